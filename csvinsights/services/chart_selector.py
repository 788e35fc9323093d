"""
Chart Config Selector — heuristic auto-chart suggestions

Turns column profiles into an ordered, capped list of ChartSpecs. The list
is built by a fixed sequence of stages that draw from one shared capacity:

1. a histogram per numeric column
2. a bar chart then a pie chart per categorical column
3. a scatter plot per numeric column pair (i < j)
4. one correlation matrix when there are at least two numeric columns

Selection stops as soon as the cap is reached, even in the middle of a
stage. The same profiles always produce the same list.
"""

import logging
from itertools import chain, combinations, islice
from typing import Iterable, Iterator, List, Sequence

from ..core.config import settings
from ..core.errors import UnknownChartError
from ..models import ChartKind, ChartSpec, Profiles

logger = logging.getLogger("csvinsights.charts")


def _histogram_stage(numeric_cols: Sequence[str]) -> Iterator[ChartSpec]:
    for col in numeric_cols:
        yield ChartSpec.histogram(col)


def _categorical_stage(categorical_cols: Sequence[str]) -> Iterator[ChartSpec]:
    for col in categorical_cols:
        yield ChartSpec.bar(col)
        yield ChartSpec.pie(col)


def _scatter_stage(numeric_cols: Sequence[str]) -> Iterator[ChartSpec]:
    for x, y in combinations(numeric_cols, 2):
        yield ChartSpec.scatter(x, y)


def _correlation_stage(numeric_cols: Sequence[str], max_columns: int) -> Iterator[ChartSpec]:
    if len(numeric_cols) >= 2:
        yield ChartSpec.correlation_matrix(list(numeric_cols[:max_columns]))


def select_charts(
    column_order: Sequence[str],
    profiles: Profiles,
    max_charts: int = None,
) -> List[ChartSpec]:
    """
    Build the ordered chart list for a set of profiles.

    Columns are visited in `column_order`; columns without a profile are
    skipped.
    """
    max_charts = settings.MAX_CHARTS if max_charts is None else max_charts
    numeric_cols = [c for c in column_order if c in profiles.numeric]
    categorical_cols = [c for c in column_order if c in profiles.categorical]

    stages: Iterable[ChartSpec] = chain(
        _histogram_stage(numeric_cols),
        _categorical_stage(categorical_cols),
        _scatter_stage(numeric_cols),
        _correlation_stage(numeric_cols, settings.CORRELATION_MAX_COLUMNS),
    )
    specs = list(islice(stages, max(max_charts, 0)))
    logger.info("select_charts: %d specs (%d numeric, %d categorical columns)",
                len(specs), len(numeric_cols), len(categorical_cols))
    return specs


def override_chart_kind(specs: Sequence[ChartSpec], chart_id: str, kind: ChartKind) -> List[ChartSpec]:
    """Return a copy of `specs` with one chart's kind replaced; positions are unchanged."""
    if not any(spec.id == chart_id for spec in specs):
        raise UnknownChartError(f"Chart '{chart_id}' not found")
    return [spec.with_kind(kind) if spec.id == chart_id else spec for spec in specs]
