"""Tests for the Altair bar chart and its Vega-Lite spec."""

import json

import pandas as pd

from latency.charts import DEFAULT_TITLE, build_latency_chart, render_page, to_vega_spec


def _aggregate() -> pd.DataFrame:
    return pd.DataFrame({"Model": ["m1", "m2", "m3"], "AverageTimeMillis": [550.0, 50.0, float("nan")]})


def _mark_type(spec: dict) -> str:
    mark = spec["mark"]
    return mark["type"] if isinstance(mark, dict) else mark


def _values(spec: dict) -> list:
    return next(iter(spec["datasets"].values()))


class TestLatencyChart:

    def test_bar_with_model_on_x_and_average_on_y(self) -> None:
        spec = to_vega_spec(build_latency_chart(_aggregate()))
        assert _mark_type(spec) == "bar"
        assert spec["encoding"]["x"]["field"] == "Model"
        assert spec["encoding"]["x"]["type"] == "nominal"
        assert spec["encoding"]["y"]["field"] == "AverageTimeMillis"
        assert spec["encoding"]["y"]["type"] == "quantitative"

    def test_one_pair_per_row(self) -> None:
        values = _values(to_vega_spec(build_latency_chart(_aggregate())))
        assert [v["Model"] for v in values] == ["m1", "m2", "m3"]
        assert values[0]["AverageTimeMillis"] == 550.0

    def test_nan_average_serializes_as_null(self) -> None:
        spec = to_vega_spec(build_latency_chart(_aggregate()))
        assert _values(spec)[2]["AverageTimeMillis"] is None
        json.dumps(spec, allow_nan=False)

    def test_title(self) -> None:
        assert to_vega_spec(build_latency_chart(_aggregate()))["title"] == DEFAULT_TITLE
        assert to_vega_spec(build_latency_chart(_aggregate(), title="Run 7"))["title"] == "Run 7"

    def test_empty_aggregate(self) -> None:
        empty = pd.DataFrame({"Model": pd.Series(dtype="string"), "AverageTimeMillis": pd.Series(dtype="float64")})
        spec = to_vega_spec(build_latency_chart(empty))
        assert _values(spec) == []


class TestRenderPage:

    def test_standalone_html(self) -> None:
        html = render_page(_aggregate(), title="Solver Latency")
        assert "<html" in html
        assert "vega" in html
        assert "AverageTimeMillis" in html
        assert "Solver Latency" in html
