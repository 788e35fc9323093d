"""
Fixed-bin-count histograms for numeric columns.
"""

import logging
from typing import List, Sequence

import numpy as np

from ..core.config import settings
from ..models import HistogramBin

logger = logging.getLogger("csvinsights.histogram")


def build_histogram(values: Sequence[float], bins: int = None) -> List[HistogramBin]:
    """
    Bucket values into `bins` equal-width bins between min and max.

    Bin i spans [min + i*width, min + (i+1)*width); the last bin ends exactly
    at max and includes it. A constant array yields a single bin holding
    every value. Bin counts always sum to len(values).
    """
    bins = bins or settings.HISTOGRAM_BINS
    vals = np.asarray(values, dtype=float)
    if vals.size == 0:
        return []

    lo = float(np.min(vals))
    hi = float(np.max(vals))
    if lo == hi:
        return [HistogramBin(bin_start=lo, bin_end=hi, count=int(vals.size))]

    width = (hi - lo) / bins
    # Clamp absorbs float rounding at both edges
    idx = np.floor((vals - lo) / width).astype(np.int64)
    idx = np.clip(idx, 0, bins - 1)
    counts = np.bincount(idx, minlength=bins)

    result = []
    for i in range(bins):
        result.append(HistogramBin(
            bin_start=lo + i * width,
            bin_end=hi if i == bins - 1 else lo + (i + 1) * width,
            count=int(counts[i]),
        ))
    return result
