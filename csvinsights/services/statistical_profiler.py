"""
Statistical Profiler — per-column classification and summaries

Every column of a Dataset is classified as numeric or categorical from its
raw string values, then summarized:

- numeric: count, mean, median, population stdev, min, max, a sample of
  the first parsed values and a fixed-bin histogram
- categorical: distinct count and the most frequent values

Runs entirely in memory over the capped dataset. Every function here is a
pure function of its input.
"""

import logging
import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..core.config import settings
from ..models import (
    EMPTY_KEY,
    CategoricalProfile,
    Dataset,
    NumericProfile,
    Profiles,
    ValueCount,
)
from .histogram import build_histogram

logger = logging.getLogger("csvinsights.profiler")

# Wide enough to hold any finite float with six decimals
_SIX_PLACES = Decimal("0.000001")
_ROUNDING = Context(prec=400, rounding=ROUND_HALF_UP)


# ─── Number parsing ──────────────────────────────────────────────────


def parse_number(value) -> Optional[float]:
    """
    Parse a raw cell as a number after dropping thousands separators.

    Returns None for empty or non-numeric text. Infinite values parse
    (they count as numeric) but NaN literals do not.
    """
    if value is None:
        return None
    text = str(value).replace(",", "").strip()
    if not text or "_" in text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number):
        return None
    return number


def is_numeric_string(value) -> bool:
    return parse_number(value) is not None


# ─── Descriptive statistics ──────────────────────────────────────────


def mean(values: Sequence[float]) -> Optional[float]:
    if len(values) == 0:
        return None
    return float(np.mean(np.asarray(values, dtype=float)))


def median(values: Sequence[float]) -> Optional[float]:
    """Middle element, or the average of the two middle elements for even lengths."""
    if len(values) == 0:
        return None
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return ordered[mid]


def stdev(values: Sequence[float]) -> Optional[float]:
    """Population standard deviation (divides by n)."""
    if len(values) == 0:
        return None
    return float(np.std(np.asarray(values, dtype=float)))


# ─── Classification ──────────────────────────────────────────────────


def non_empty_values(values: Sequence[str]) -> List[str]:
    """Raw values whose trimmed content is non-empty (untrimmed)."""
    return [v for v in values if v is not None and str(v).strip() != ""]


def numeric_ratio(non_empty: Sequence[str]) -> float:
    if not non_empty:
        return 0.0
    numeric_count = sum(1 for v in non_empty if is_numeric_string(v))
    return numeric_count / len(non_empty)


def is_numeric_column(values: Sequence[str], threshold: float = None) -> bool:
    """A column is numeric when at least `threshold` of its non-empty values parse as numbers."""
    threshold = settings.NUMERIC_RATIO_THRESHOLD if threshold is None else threshold
    non_empty = non_empty_values(values)
    return len(non_empty) > 0 and numeric_ratio(non_empty) >= threshold


# ─── Summaries ───────────────────────────────────────────────────────


def profile_numeric(
    non_empty: Sequence[str],
    sample_size: int = None,
    bins: int = None,
) -> NumericProfile:
    """Summarize the numeric values of a column; unparseable and infinite values are dropped."""
    sample_size = sample_size or settings.NUMERIC_SAMPLE_SIZE
    nums: List[float] = []
    for v in non_empty:
        n = parse_number(v)
        if n is not None and math.isfinite(n):
            nums.append(n)

    if not nums:
        return NumericProfile(count=0, mean=0.0, median=0.0, min=None, max=None, stdev=0.0)

    return NumericProfile(
        count=len(nums),
        mean=_safe(mean(nums)),
        median=_safe(median(nums)),
        min=min(nums),
        max=max(nums),
        stdev=_safe(stdev(nums)),
        sample=nums[:sample_size],
        histogram=build_histogram(nums, bins),
    )


def frequency_table(values: Sequence[str]) -> List[Tuple[str, int]]:
    """
    (value, count) pairs sorted by descending count.

    Ties keep first-encountered order. Empty strings are counted under
    the reserved __EMPTY__ key.
    """
    freq: Dict[str, int] = {}
    for v in values:
        key = EMPTY_KEY if v == "" else v
        freq[key] = freq.get(key, 0) + 1
    # sorted() is stable, dict keeps insertion order
    return sorted(freq.items(), key=lambda kv: kv[1], reverse=True)


def profile_categorical(non_empty: Sequence[str], top_n: int = None) -> CategoricalProfile:
    top_n = top_n or settings.CATEGORICAL_TOP_N
    table = frequency_table(non_empty)
    return CategoricalProfile(
        unique_count=len(table),
        top=[ValueCount(value=k, count=n) for k, n in table[:top_n]],
    )


def build_profiles(dataset: Dataset) -> Profiles:
    """Classify and summarize every column of the dataset, in header order."""
    logger.info("build_profiles: %d rows, %d columns", len(dataset), len(dataset.columns))
    profiles = Profiles()
    if not len(dataset):
        logger.info("build_profiles: empty dataset — no profiles")
        return profiles

    for col in dataset.columns:
        non_empty = non_empty_values(dataset.column_values(col))
        if is_numeric_column(non_empty):
            profiles.numeric[col] = profile_numeric(non_empty)
            logger.debug("  profiled '%s' → numeric (%d values)", col, profiles.numeric[col].count)
        else:
            profiles.categorical[col] = profile_categorical(non_empty)
            logger.debug("  profiled '%s' → categorical (%d distinct)",
                         col, profiles.categorical[col].unique_count)

    logger.info("build_profiles: done — %d numeric, %d categorical",
                len(profiles.numeric), len(profiles.categorical))
    return profiles


def _safe(value: Optional[float]) -> float:
    """Round half away from zero to 6 decimals, mapping None/NaN/inf to 0."""
    if value is None:
        return 0.0
    f = float(value)
    if math.isnan(f) or math.isinf(f):
        return 0.0
    rounded = float(Decimal(f).quantize(_SIX_PLACES, context=_ROUNDING))
    return rounded if rounded else 0.0
