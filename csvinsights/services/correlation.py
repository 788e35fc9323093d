"""
Pairwise Pearson correlation among numeric columns.

Each ordered pair (a, b) is computed from the rows where both columns hold
a finite number. Pairs are evaluated independently rather than mirrored;
the arithmetic is order-symmetric so (a, b) and (b, a) agree exactly.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..core.config import settings
from ..models import CorrelationMatrix, Dataset
from .statistical_profiler import parse_number

logger = logging.getLogger("csvinsights.correlation")


def pearson(xs: Sequence[float], ys: Sequence[float]) -> float:
    """
    Pearson coefficient of two equal-length samples.

    Returns 0 for empty or mismatched input. A zero denominator (a
    zero-variance side) is replaced by 1.
    """
    if len(xs) == 0 or len(xs) != len(ys):
        return 0.0
    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    dx = x - x.mean()
    dy = y - y.mean()
    num = float(np.sum(dx * dy))
    den = math.sqrt(float(np.sum(dx * dx)) * float(np.sum(dy * dy)) or 1.0)
    return max(-1.0, min(1.0, num / den))


def paired_values(dataset: Dataset, col_a: str, col_b: str) -> Tuple[List[float], List[float]]:
    """Aligned values from rows where both columns parse as finite numbers."""
    xs: List[float] = []
    ys: List[float] = []
    for row in dataset.rows:
        a = parse_number(row.get(col_a, ""))
        b = parse_number(row.get(col_b, ""))
        if a is None or b is None or not math.isfinite(a) or not math.isfinite(b):
            continue
        xs.append(a)
        ys.append(b)
    return xs, ys


def correlation_matrix(
    dataset: Dataset,
    numeric_columns: Sequence[str],
    max_columns: Optional[int] = None,
    min_pairs: Optional[int] = None,
) -> CorrelationMatrix:
    """
    Correlation for every ordered pair over the first `max_columns` columns.

    Pairs backed by fewer than `min_pairs` observations get coefficient 0.
    """
    max_columns = max_columns or settings.CORRELATION_MAX_COLUMNS
    min_pairs = settings.CORRELATION_MIN_PAIRS if min_pairs is None else min_pairs
    cols = list(numeric_columns)[:max_columns]

    logger.info("correlation_matrix: %d columns over %d rows", len(cols), len(dataset))
    matrix: CorrelationMatrix = {}
    for a in cols:
        matrix[a] = {}
        for b in cols:
            xs, ys = paired_values(dataset, a, b)
            if len(xs) < min_pairs:
                matrix[a][b] = 0.0
            else:
                matrix[a][b] = pearson(xs, ys)
    return matrix
