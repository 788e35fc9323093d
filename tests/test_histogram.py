"""
Tests for the histogram builder.
"""

import random

import pytest

from csvinsights.services.histogram import build_histogram


def test_twelve_bins_cover_min_to_max():
    values = [float(v) for v in range(0, 121)]
    hist = build_histogram(values, 12)

    assert len(hist) == 12
    assert hist[0].bin_start == 0.0
    assert hist[-1].bin_end == 120.0
    assert hist[0].bin_end == pytest.approx(10.0)
    assert all(hist[i].bin_end == pytest.approx(hist[i + 1].bin_start) for i in range(11))


def test_maximum_lands_in_last_bin():
    hist = build_histogram([0.0, 1.0, 2.0, 12.0], 12)
    assert hist[-1].count == 1
    assert hist[0].count == 1


def test_counts_sum_to_input_length():
    rng = random.Random(7)
    for size in (2, 13, 500):
        values = [rng.uniform(-1e3, 1e3) for _ in range(size)]
        hist = build_histogram(values, 12)
        assert len(hist) == 12
        assert sum(b.count for b in hist) == size


def test_awkward_float_widths_still_sum_to_length():
    values = [0.1 * i for i in range(37)]
    hist = build_histogram(values, 12)
    assert sum(b.count for b in hist) == 37


def test_constant_values_yield_single_bin():
    hist = build_histogram([5.0] * 7, 12)

    assert len(hist) == 1
    assert (hist[0].bin_start, hist[0].bin_end, hist[0].count) == (5.0, 5.0, 7)


def test_empty_input_yields_no_bins():
    assert build_histogram([], 12) == []


def test_bins_default_from_settings():
    assert len(build_histogram([1.0, 2.0, 3.0])) == 12
