"""
Pivot aggregation — 2D frequency cross-tabulation of two categorical columns.
"""

import logging
from typing import Dict, List, Tuple

from ..core.config import settings
from ..models import EMPTY_KEY, Dataset, PivotTable

logger = logging.getLogger("csvinsights.pivot")


def _label(value) -> str:
    if value is None or value == "":
        return EMPTY_KEY
    return str(value)


def build_pivot(dataset: Dataset, col_a: str, col_b: str, max_labels: int = None) -> PivotTable:
    """
    Count rows per (value_a, value_b) pair.

    The full count map is always kept. Only the axis label lists are cut to
    the first `max_labels` distinct values in discovery order.
    """
    max_labels = max_labels or settings.PIVOT_MAX_LABELS
    counts: Dict[Tuple[str, str], int] = {}
    a_seen: Dict[str, None] = {}
    b_seen: Dict[str, None] = {}

    for row in dataset.rows:
        a = _label(row.get(col_a))
        b = _label(row.get(col_b))
        a_seen.setdefault(a, None)
        b_seen.setdefault(b, None)
        counts[(a, b)] = counts.get((a, b), 0) + 1

    a_values: List[str] = list(a_seen)[:max_labels]
    b_values: List[str] = list(b_seen)[:max_labels]
    max_count = max(
        (counts.get((a, b), 0) for a in a_values for b in b_values),
        default=0,
    )

    logger.debug("build_pivot: %s x %s -> %d cells (%d x %d distinct)",
                 col_a, col_b, len(counts), len(a_seen), len(b_seen))
    return PivotTable(
        col_a=col_a,
        col_b=col_b,
        counts=counts,
        a_values=a_values,
        b_values=b_values,
        max_count=max_count,
    )
