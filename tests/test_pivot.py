"""
Tests for the pivot aggregator.
"""

from csvinsights.models import EMPTY_KEY
from csvinsights.services.pivot import build_pivot


def test_counts_value_pairs(dataset_factory):
    dataset = dataset_factory([
        {"color": "red", "size": "S"},
        {"color": "red", "size": "S"},
        {"color": "blue", "size": "L"},
        {"color": "red", "size": "L"},
    ])
    pivot = build_pivot(dataset, "color", "size")

    assert pivot.count("red", "S") == 2
    assert pivot.count("red", "L") == 1
    assert pivot.count("blue", "L") == 1
    assert pivot.count("blue", "S") == 0
    assert pivot.a_values == ["red", "blue"]
    assert pivot.b_values == ["S", "L"]
    assert pivot.max_count == 2


def test_empty_values_map_to_reserved_key(dataset_factory):
    dataset = dataset_factory([{"a": "", "b": "x"}, {"a": "y", "b": ""}])
    pivot = build_pivot(dataset, "a", "b")

    assert pivot.count(EMPTY_KEY, "x") == 1
    assert pivot.count("y", EMPTY_KEY) == 1


def test_label_lists_truncate_without_touching_counts(dataset_factory):
    rows = [{"a": f"a{i}", "b": f"b{i % 30}"} for i in range(40)]
    pivot = build_pivot(dataset_factory(rows), "a", "b")

    assert len(pivot.a_values) == 25
    assert len(pivot.b_values) == 25
    assert pivot.a_values[0] == "a0"
    assert pivot.a_values[-1] == "a24"
    assert len(pivot.counts) == 40
    assert sum(pivot.counts.values()) == 40
    assert pivot.count("a39", "b9") == 1


def test_pivot_of_empty_dataset(dataset_factory):
    pivot = build_pivot(dataset_factory([]), "a", "b")
    assert pivot.counts == {}
    assert pivot.max_count == 0


def test_pivot_serializes_nested_counts(dataset_factory):
    dataset = dataset_factory([{"a": "x", "b": "y"}, {"a": "x", "b": "y"}])
    data = build_pivot(dataset, "a", "b").to_dict()

    assert data["counts"] == {"x": {"y": 2}}
    assert data["aValues"] == ["x"]
    assert data["maxCount"] == 2
