"""
Analysis facade — everything derived from one Dataset.

`analyze_dataset` is called exactly once per dataset replacement; nothing
is cached across replacements. The query helpers validate caller-chosen
columns before handing off to the correlation and pivot services.
"""

import logging
from typing import List, Optional, Sequence

from ..core.errors import InvalidColumnError
from ..models import ChartSpec, CorrelationMatrix, Dataset, DatasetAnalysis, PivotTable, Profiles
from .chart_selector import select_charts
from .correlation import correlation_matrix
from .pivot import build_pivot
from .statistical_profiler import build_profiles

logger = logging.getLogger("csvinsights.analysis")


def recompute_profiles(dataset: Dataset) -> Profiles:
    return build_profiles(dataset)


def analyze_dataset(dataset: Dataset) -> DatasetAnalysis:
    """Profiles and chart suggestions for a freshly ingested dataset."""
    profiles = recompute_profiles(dataset)
    specs = select_charts(dataset.columns, profiles)
    return DatasetAnalysis(dataset=dataset, profiles=profiles, chart_specs=specs)


def regenerate_charts(analysis: DatasetAnalysis) -> List[ChartSpec]:
    return select_charts(analysis.dataset.columns, analysis.profiles)


def query_correlation(analysis: DatasetAnalysis, cols: Optional[Sequence[str]] = None) -> CorrelationMatrix:
    """Correlation matrix over `cols`, or over all numeric columns when omitted."""
    if not cols:
        cols = analysis.profiles.numeric_columns
    for col in cols:
        if col not in analysis.profiles.numeric:
            raise InvalidColumnError(f"'{col}' is not a numeric column")
    return correlation_matrix(analysis.dataset, cols)


def query_pivot(analysis: DatasetAnalysis, col_a: str, col_b: str) -> PivotTable:
    """Pivot between two categorical columns."""
    for col in (col_a, col_b):
        if col not in analysis.profiles.categorical:
            raise InvalidColumnError(f"'{col}' is not a categorical column")
    return build_pivot(analysis.dataset, col_a, col_b)
