from __future__ import annotations

from typing import Any, Dict, Optional

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()

DEFAULT_TITLE = "Average Solve Time by Model"


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def build_latency_chart(aggregate: pd.DataFrame, *, title: Optional[str] = None) -> alt.Chart:
    """One bar per model: ``Model`` on x, ``AverageTimeMillis`` on y.

    NaN averages serialize as null and are filtered out by Vega-Lite, so an
    all-gap model draws no bar.
    """
    data = aggregate[["Model", "AverageTimeMillis"]].copy()
    data["Model"] = data["Model"].astype(str)
    hover = alt.selection_point(fields=["Model"], on="mouseover", empty="all")
    return (
        alt.Chart(data)
        .mark_bar()
        .encode(
            x=alt.X("Model:N", title="Model", sort=None, axis=alt.Axis(grid=False, labelAngle=0)),
            y=alt.Y(
                "AverageTimeMillis:Q",
                title="Average Time (ms)",
                axis=alt.Axis(format="~s", gridDash=[4, 4], domain=False, ticks=False),
            ),
            color=alt.Color("Model:N", legend=None),
            opacity=alt.condition(hover, alt.value(1), alt.value(0.6)),
            tooltip=[
                alt.Tooltip("Model:N", title="Model"),
                alt.Tooltip("AverageTimeMillis:Q", title="Avg (ms)", format=",.3f"),
            ],
        )
        .add_params(hover)
        .properties(title=title or DEFAULT_TITLE)
    )


def render_page(aggregate: pd.DataFrame, *, title: Optional[str] = None) -> str:
    """Standalone HTML page embedding the latency bar chart."""
    return build_latency_chart(aggregate, title=title).to_html()
