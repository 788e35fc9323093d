"""
Tests for the analysis facade and the session store.
"""

import pytest

from csvinsights.core.errors import InvalidColumnError
from csvinsights.models import Dataset
from csvinsights.services.analysis import (
    analyze_dataset,
    query_correlation,
    query_pivot,
    regenerate_charts,
)
from csvinsights.services.session_store import SessionStore


def test_analyze_dataset_output_contract(pets_dataset: Dataset):
    analysis = analyze_dataset(pets_dataset)
    data = analysis.to_dict()

    assert data["columns"] == ["a", "b"]
    assert data["rowCount"] == 3
    assert data["dataset"][1] == {"a": "2", "b": "dog"}
    assert [c["id"] for c in data["chartSpecs"]] == ["hist_a", "bar_b", "pie_b"]
    assert set(data["profiles"]) == {"numeric", "categorical"}


def test_empty_dataset_is_a_defined_state():
    analysis = analyze_dataset(Dataset())

    assert analysis.row_count == 0
    assert analysis.columns == []
    assert analysis.chart_specs == []
    assert analysis.profiles.numeric == {} and analysis.profiles.categorical == {}


def test_regenerate_charts_matches_initial_selection(pets_dataset: Dataset):
    analysis = analyze_dataset(pets_dataset)
    assert regenerate_charts(analysis) == analysis.chart_specs


def test_query_correlation_defaults_to_numeric_columns(dataset_factory):
    rows = [{"p": str(i), "q": str(2 * i), "tag": "t"} for i in range(6)]
    matrix = query_correlation(analyze_dataset(dataset_factory(rows)))
    assert list(matrix) == ["p", "q"]


def test_query_correlation_rejects_non_numeric_columns(pets_dataset: Dataset):
    with pytest.raises(InvalidColumnError):
        query_correlation(analyze_dataset(pets_dataset), ["a", "b"])


def test_query_pivot_requires_categorical_columns(pets_dataset: Dataset):
    analysis = analyze_dataset(pets_dataset)
    with pytest.raises(InvalidColumnError):
        query_pivot(analysis, "a", "b")
    with pytest.raises(InvalidColumnError):
        query_pivot(analysis, "b", "missing")
    assert query_pivot(analysis, "b", "b").count("cat", "cat") == 2


def test_store_replaces_dataset_wholesale(store: SessionStore, pets_dataset: Dataset, dataset_factory):
    first = store.replace_dataset(None, pets_dataset)
    second = store.replace_dataset(first.session_id, dataset_factory([{"only": "x"}]))

    assert second.session_id == first.session_id
    assert second.created_at == first.created_at
    assert store.get(first.session_id).analysis.columns == ["only"]
    assert first.analysis.columns == ["a", "b"]


def test_store_update_chart_specs_keeps_profiles(store: SessionStore, pets_dataset: Dataset):
    session = store.replace_dataset(None, pets_dataset)
    updated = store.update_chart_specs(session.session_id, session.analysis.chart_specs[:1])

    assert len(updated.analysis.chart_specs) == 1
    assert updated.analysis.profiles is session.analysis.profiles
    assert len(session.analysis.chart_specs) == 3


def test_store_reset_and_missing_sessions(store: SessionStore, pets_dataset: Dataset):
    session = store.replace_dataset("fixed-id", pets_dataset)

    assert store.reset(session.session_id) is True
    assert store.get("fixed-id") is None
    assert store.reset("fixed-id") is False
    assert store.update_chart_specs("fixed-id", []) is None
