"""
Chart data materialization.

Resolves a ChartSpec against the current analysis into the payload a chart
library renders: labelled bar/pie series, scatter points, or a correlation
heatmap. A chart whose kind no longer fits its column (after a user
override) falls back to a histogram for numeric columns and a top-10 bar
chart for categorical ones.
"""

import logging
import math
from typing import Any, Dict, List

from ..core.config import settings
from ..models import ChartKind, ChartSpec, DatasetAnalysis
from .correlation import correlation_matrix
from .statistical_profiler import parse_number

logger = logging.getLogger("csvinsights.chart_data")

BAR_TOP_N = 12
PIE_TOP_N = 8
FALLBACK_TOP_N = 10


def format_edge(value: float) -> str:
    """Two-decimal label with trailing zeros removed (1.50 -> '1.5', 2.00 -> '2')."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _histogram_payload(spec: ChartSpec, analysis: DatasetAnalysis, col: str) -> Dict[str, Any]:
    hist = analysis.profiles.numeric[col].histogram
    return {
        "id": spec.id,
        "type": spec.kind.value,
        "render": "bar",
        "title": col,
        "labels": [f"{format_edge(b.bin_start)}–{format_edge(b.bin_end)}" for b in hist],
        "values": [b.count for b in hist],
    }


def _top_values_payload(
    spec: ChartSpec, analysis: DatasetAnalysis, col: str, top_n: int, render: str
) -> Dict[str, Any]:
    top = analysis.profiles.categorical[col].top[:top_n]
    return {
        "id": spec.id,
        "type": spec.kind.value,
        "render": render,
        "title": col,
        "labels": [t.value for t in top],
        "values": [t.count for t in top],
    }


def _scatter_payload(spec: ChartSpec, analysis: DatasetAnalysis) -> Dict[str, Any]:
    points: List[Dict[str, float]] = []
    for row in analysis.dataset.rows:
        x = parse_number(row.get(spec.col_x, ""))
        y = parse_number(row.get(spec.col_y, ""))
        if x is None or y is None or not (math.isfinite(x) and math.isfinite(y)):
            continue
        points.append({"x": x, "y": y})
        if len(points) >= settings.SCATTER_MAX_POINTS:
            break
    return {
        "id": spec.id,
        "type": spec.kind.value,
        "render": "scatter",
        "title": f"{spec.col_x} vs {spec.col_y}",
        "xLabel": spec.col_x,
        "yLabel": spec.col_y,
        "points": points,
    }


def _heatmap_payload(spec: ChartSpec, analysis: DatasetAnalysis) -> Dict[str, Any]:
    cols = list(spec.cols) if spec.cols else analysis.profiles.numeric_columns
    cols = [c for c in cols if c in analysis.profiles.numeric][:settings.CORRELATION_MAX_COLUMNS]
    matrix = correlation_matrix(analysis.dataset, cols) if len(cols) >= 2 else {}
    return {
        "id": spec.id,
        "type": spec.kind.value,
        "render": "heatmap",
        "title": "Correlation matrix (Pearson)",
        "cols": cols if len(cols) >= 2 else [],
        "matrix": matrix,
    }


def _fallback_payload(spec: ChartSpec, analysis: DatasetAnalysis) -> Dict[str, Any]:
    col = spec.col_x
    if col and col in analysis.profiles.numeric:
        return _histogram_payload(spec, analysis, col)
    if col and col in analysis.profiles.categorical:
        return _top_values_payload(spec, analysis, col, FALLBACK_TOP_N, "bar")
    return {"id": spec.id, "type": spec.kind.value, "render": None}


def build_chart_data(spec: ChartSpec, analysis: DatasetAnalysis) -> Dict[str, Any]:
    """Render payload for one chart spec."""
    numeric = analysis.profiles.numeric
    categorical = analysis.profiles.categorical

    if spec.kind == ChartKind.HISTOGRAM and spec.col_x in numeric:
        return _histogram_payload(spec, analysis, spec.col_x)
    if spec.kind == ChartKind.BAR and spec.col_x in categorical:
        return _top_values_payload(spec, analysis, spec.col_x, BAR_TOP_N, "bar")
    if spec.kind == ChartKind.PIE and spec.col_x in categorical:
        return _top_values_payload(spec, analysis, spec.col_x, PIE_TOP_N, "pie")
    if spec.kind == ChartKind.SCATTER and spec.col_x in numeric and spec.col_y in numeric:
        return _scatter_payload(spec, analysis)
    if spec.kind == ChartKind.CORRELATION_MATRIX:
        return _heatmap_payload(spec, analysis)

    logger.debug("build_chart_data: %s (%s) does not fit its columns, using fallback",
                 spec.id, spec.kind.value)
    return _fallback_payload(spec, analysis)
