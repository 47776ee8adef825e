"""Streamlit entrypoint for the sector & factor markets dashboard."""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from datetime import date
from pathlib import Path

# --- Ensure src is on path for local imports ---
ROOT = Path(__file__).resolve().parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.append(str(SRC))

import streamlit as st

from markets_dash import MarketsConfig, ViewName, load_config  # noqa: E402
from markets_dash.analytics import ShortSeriesPolicy, build_summary, long_form  # noqa: E402
from markets_dash.domain import LOOKBACKS, VIEWS  # noqa: E402
from markets_dash.services import BatchReport, DashboardService, RefreshCoordinator  # noqa: E402
from markets_dash.utils import ConfigError, get_logger  # noqa: E402
from markets_dash.viz import grid_html, make_performance_chart  # noqa: E402

VIEW_LABELS = {"sectors": "Sectors", "factors": "Factors"}
POLICY_LABELS = {"Oldest available session": ShortSeriesPolicy.CLAMP, "Hide metric": ShortSeriesPolicy.OMIT}


@dataclass
class UiInputs:
    view: ViewName
    refresh: bool
    policy: ShortSeriesPolicy
    show_chart: bool
    show_table: bool


@st.cache_resource(show_spinner=False)
def get_config() -> MarketsConfig:
    return load_config()


def get_coordinator() -> RefreshCoordinator:
    if "coordinator" not in st.session_state:
        st.session_state.coordinator = RefreshCoordinator()
    return st.session_state.coordinator


def render_sidebar() -> UiInputs:
    st.sidebar.header("Dashboard Controls")

    view = st.sidebar.radio(
        "View",
        options=list(VIEWS),
        format_func=lambda v: VIEW_LABELS[v],
        horizontal=True,
        key="view",
    )
    refresh = st.sidebar.button("🔄 Refresh", use_container_width=True)

    with st.sidebar.expander("⚙️ View Settings", expanded=False):
        policy_label = st.radio(
            "Short history",
            options=list(POLICY_LABELS.keys()),
            index=0,
            help="When a ticker has fewer sessions than a lookback needs",
        )
        show_chart = st.checkbox("Show performance chart", value=True)
        show_table = st.checkbox("Show summary table", value=True)

    return UiInputs(
        view=view,
        refresh=refresh,
        policy=POLICY_LABELS[policy_label],
        show_chart=show_chart,
        show_table=show_table,
    )


def needs_refresh(inputs: UiInputs, coordinator: RefreshCoordinator) -> bool:
    current = coordinator.current
    if inputs.refresh or current is None:
        return True
    if current.view != inputs.view:
        return True
    return st.session_state.get("policy") != inputs.policy


def render_report(report: BatchReport, inputs: UiInputs) -> None:
    if report.cards:
        st.markdown(grid_html(report.cards), unsafe_allow_html=True)

    summary = build_summary(report.items, report.outcomes, LOOKBACKS) if report.outcomes else None
    if summary is None:
        return

    if inputs.show_chart:
        st.divider()
        chart = make_performance_chart(long_form(summary, LOOKBACKS), title=f"{VIEW_LABELS[report.view]} performance")
        st.plotly_chart(chart, use_container_width=True)

    if inputs.show_table:
        st.subheader("Performance Summary")
        display = summary.set_index("ticker").rename(columns={lb.key: lb.label for lb in LOOKBACKS})
        st.dataframe(display, width="stretch")
        st.download_button(
            "Download summary CSV",
            data=summary.to_csv(index=False),
            file_name=f"{report.view}_performance_{date.today()}.csv",
            mime="text/csv",
        )


def main() -> None:
    st.set_page_config(page_title="Markets Dashboard", layout="wide")
    st.title("Sector & Factor Performance")
    st.caption("Streamlit + Financial Modeling Prep + Plotly")

    try:
        config = get_config()
    except ConfigError as err:
        st.error(f"Configuration error: {err}")
        return

    logger = get_logger("markets_dash.app", config.log_level)
    inputs = render_sidebar()
    coordinator = get_coordinator()
    service = DashboardService(config=config, policy=inputs.policy, coordinator=coordinator)

    status = st.empty()
    message = service.startup_message()
    if message:
        st.warning(message)

    if needs_refresh(inputs, coordinator):
        status.info("Fetching data…")
        logger.info("Refreshing %s view", inputs.view)
        with st.spinner("Fetching data…"):
            asyncio.run(service.refresh(inputs.view, force_refresh=inputs.refresh))
        st.session_state.policy = inputs.policy

    report = coordinator.current
    if report is None:
        status.info("Fetching data…")
        return

    if report.ok:
        status.caption(report.status)
    else:
        status.error(report.status)
    render_report(report, inputs)


if __name__ == "__main__":
    main()
