import pandas as pd
import streamlit as st
from contextlib import contextmanager
from typing import Optional

from latency.errors import LatencyDataError
from latency.pipeline import compute_latency, load_latency_data
from latency.settings import EMPTY_GROUP_POLICIES, UNIT_POLICIES, load_settings

# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def render_page_header(title: str, source: str, export_df: Optional[pd.DataFrame] = None, export_name: str = "export.csv"):
    inject_base_styles()
    c1, c2 = st.columns([8, 2])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{source}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        btn_cols = st.columns(2)
        if btn_cols[0].button("Refresh"):
            st.rerun()
        if export_df is not None and not export_df.empty:
            btn_cols[1].download_button(
                "Export CSV",
                data=export_df.to_csv(index=False).encode("utf-8"),
                file_name=export_name,
                mime="text/csv",
            )


def render_kpis(kpis: dict):
    fastest = kpis.get("fastest_model") or {}
    cols = st.columns(4)
    cols[0].metric("Models", f"{kpis.get('models', 0):,}")
    cols[1].metric("Result rows", f"{kpis.get('rows', 0):,}")
    cols[2].metric(
        "Rows without a usable time",
        f"{kpis.get('value_gaps', 0):,}",
        help="Rows whose Time has no numeric part are left out of every average.",
    )
    cols[3].metric(
        "Fastest model",
        fastest.get("model", "N/A"),
        delta=f"{fastest['average_time_ms']:,.3f} ms" if fastest else None,
        delta_color="off",
    )


# ---------- UI setup ----------
settings = load_settings()
st.set_page_config(page_title="Solver Latency Dashboard", layout="wide")
inject_base_styles()
st.title("Solver Latency Dashboard")
st.caption("Average solve time per model from the benchmark results file.")

with st.sidebar:
    st.markdown("### Normalization")
    unit_policy = st.selectbox(
        "Unit policy",
        options=list(UNIT_POLICIES),
        index=list(UNIT_POLICIES).index(settings.unit_policy),
        help="compat: only 's' is scaled by 1000, everything else is read as ms. table: full unit table.",
    )
    empty_groups = st.selectbox(
        "Models with no usable times",
        options=list(EMPTY_GROUP_POLICIES),
        index=list(EMPTY_GROUP_POLICIES).index(settings.empty_groups),
        format_func=lambda v: "Show (no bar)" if v == "nan" else "Hide",
    )

try:
    data_ctx = load_latency_data(settings.data_path, unit_policy=unit_policy)
except LatencyDataError as exc:
    st.error(f"Could not load results: {exc}")
    st.stop()

payload = compute_latency(data_ctx, empty_groups=empty_groups)
aggregate = pd.DataFrame(payload["aggregate"], columns=["Model", "AverageTimeMillis"])

render_page_header("Average Time by Model", str(settings.data_path), export_df=aggregate, export_name="average_latency.csv")
render_kpis(payload["kpis"])

if aggregate.empty:
    st.info("No models found in the results file.")
else:
    with card("Average Time (ms)"):
        st.vega_lite_chart(payload["charts"]["average_latency"], use_container_width=True)

    left, right = st.columns(2)
    with left:
        with card("Averages"):
            st.dataframe(aggregate, use_container_width=True, hide_index=True)
    with right:
        with card("Runs per model"):
            summary = pd.DataFrame(payload["summary"])
            st.dataframe(summary, use_container_width=True, hide_index=True)

st.caption("Re-run the benchmark to refresh the results file; the dashboard reloads it when it changes.")
