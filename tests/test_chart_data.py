"""
Tests for chart render payloads.
"""

import pytest

from csvinsights.models import ChartKind, ChartSpec
from csvinsights.services.analysis import analyze_dataset
from csvinsights.services.chart_data import build_chart_data, format_edge


@pytest.fixture
def analysis(dataset_factory):
    colors = ["red", "green", "blue", "cyan"]
    rows = [
        {"x": str(i), "y": str(i * 1.5), "color": colors[i % 4], "flag": "" if i % 5 == 0 else "on"}
        for i in range(24)
    ]
    return analyze_dataset(dataset_factory(rows))


@pytest.mark.parametrize("value,label", [(1.5, "1.5"), (2.0, "2"), (0.125, "0.12"), (-0.001, "0"), (10.0, "10")])
def test_format_edge(value, label):
    assert format_edge(value) == label


def test_histogram_payload(analysis):
    payload = build_chart_data(ChartSpec.histogram("x"), analysis)

    assert payload["render"] == "bar"
    assert len(payload["labels"]) == 12
    assert payload["labels"][0] == "0–1.92"
    assert sum(payload["values"]) == 24


def test_bar_and_pie_payloads_use_top_values(analysis):
    bar = build_chart_data(ChartSpec.bar("color"), analysis)
    pie = build_chart_data(ChartSpec.pie("color"), analysis)

    assert bar["render"] == "bar"
    assert pie["render"] == "pie"
    assert bar["labels"] == ["red", "green", "blue", "cyan"]
    assert bar["values"] == [6, 6, 6, 6]


def test_scatter_payload_points(analysis):
    payload = build_chart_data(ChartSpec.scatter("x", "y"), analysis)

    assert payload["render"] == "scatter"
    assert len(payload["points"]) == 24
    assert payload["points"][2] == {"x": 2.0, "y": 3.0}


def test_correlation_payload(analysis):
    payload = build_chart_data(ChartSpec.correlation_matrix(["x", "y"]), analysis)

    assert payload["render"] == "heatmap"
    assert payload["cols"] == ["x", "y"]
    assert payload["matrix"]["x"]["y"] == pytest.approx(1.0)


def test_overridden_kind_falls_back_by_column_type(analysis):
    numeric_as_pie = ChartSpec.histogram("x").with_kind(ChartKind.PIE)
    categorical_as_hist = ChartSpec.bar("color").with_kind(ChartKind.HISTOGRAM)

    assert build_chart_data(numeric_as_pie, analysis)["labels"][0] == "0–1.92"
    fallback = build_chart_data(categorical_as_hist, analysis)
    assert fallback["render"] == "bar"
    assert fallback["labels"] == ["red", "green", "blue", "cyan"]


def test_scatter_override_without_second_column_falls_back(analysis):
    spec = ChartSpec.histogram("x").with_kind(ChartKind.SCATTER)
    assert build_chart_data(spec, analysis)["render"] == "bar"


def test_correlation_override_uses_numeric_columns(analysis):
    spec = ChartSpec.bar("color").with_kind(ChartKind.CORRELATION_MATRIX)
    payload = build_chart_data(spec, analysis)
    assert payload["cols"] == ["x", "y"]


@pytest.mark.parametrize("kind", [ChartKind.LINE, ChartKind.AREA, ChartKind.STACKED, ChartKind.DONUT])
def test_override_only_kinds_render_numeric_column_as_histogram(analysis, kind):
    payload = build_chart_data(ChartSpec.histogram("x").with_kind(kind), analysis)

    assert payload["type"] == kind.value
    assert payload["render"] == "bar"
    assert len(payload["labels"]) == 12
    assert payload["labels"][0] == "0–1.92"


@pytest.mark.parametrize("kind", [ChartKind.LINE, ChartKind.AREA, ChartKind.STACKED, ChartKind.DONUT])
def test_override_only_kinds_render_categorical_column_as_top_bar(analysis, kind):
    payload = build_chart_data(ChartSpec.bar("color").with_kind(kind), analysis)

    assert payload["render"] == "bar"
    assert payload["labels"] == ["red", "green", "blue", "cyan"]
    assert payload["values"] == [6, 6, 6, 6]
