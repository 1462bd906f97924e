"""Streamlit demo UI for lifemap-flow."""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta
from typing import Any

from lifemap_flow.adapters import json_adapter
from lifemap_flow.config import FlowSettings
from lifemap_flow.flow import calculate_flow
from lifemap_flow.report import flow_report
from lifemap_flow.schema import LifeMap
from lifemap_flow.vitality import node_vitality
from lifemap_flow.windows import parse_window

RANGES = ["D", "W", "M", "Y", "Custom"]
DEMO_PATH = "examples/sample_lifemap.json"


def _parse_uploaded(uploaded_file) -> LifeMap:
    payload = json.loads(uploaded_file.getvalue().decode("utf-8"))
    return json_adapter.load(payload)


def run_engine(snapshot: LifeMap, range_name: str, start: date | None, end: date | None, now: datetime) -> dict[str, Any]:
    """Run the flow engine and return a UI-friendly result payload."""

    settings = FlowSettings()
    window = parse_window(range_name, start, end)
    result = calculate_flow(
        snapshot.nodes,
        snapshot.edges,
        snapshot.logs,
        window,
        now=now,
        policy=settings.weight_policy(),
        passes=settings.passes,
        tolerance=settings.tolerance,
    )
    states = node_vitality(
        snapshot.nodes,
        snapshot.edges,
        snapshot.logs,
        window,
        now=now,
        policy=settings.weight_policy(),
        passes=settings.passes,
        tolerance=settings.tolerance,
    )

    report = flow_report(snapshot.nodes, result)
    for row in report["nodes"]:
        state = states[row["id"]]
        row["active"] = state.is_active
        row["going_dormant"] = state.going_dormant
    return report


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="Life Map Flow Demo", layout="wide")
    st.title("Life Map Flow — Streamlit Demo")

    with st.sidebar:
        st.header("Controls")
        uploaded = st.file_uploader("Upload life map snapshot", type=["json"])
        use_demo = st.checkbox("Load demo snapshot", value=True)
        range_name = st.selectbox("Time range", options=RANGES, index=1)
        today = date.today()
        start = st.date_input("Custom start", value=today - timedelta(days=30), disabled=(range_name != "Custom"))
        end = st.date_input("Custom end", value=today, disabled=(range_name != "Custom"))
        run = st.button("Compute flow", type="primary")

    if not run:
        st.info("Choose a snapshot and time range in the sidebar and click **Compute flow**.")
        return

    try:
        if use_demo:
            snapshot = json_adapter.parse(DEMO_PATH)
            data_source = f"demo snapshot ({DEMO_PATH})"
        elif uploaded is not None:
            snapshot = _parse_uploaded(uploaded)
            data_source = f"uploaded file ({uploaded.name})"
        else:
            st.error("Please upload a JSON snapshot or enable 'Load demo snapshot'.")
            return

        report = run_engine(snapshot, range_name, start, end, datetime.now())

        st.success(f"Loaded {len(snapshot.nodes)} nodes, {len(snapshot.edges)} edges from {data_source}.")
        c1, c2 = st.columns(2)
        c1.metric("Total inflow (min)", f"{report['total_inflow_minutes']:.0f}")
        c2.metric("Passes", report["passes"])

        st.subheader("Node inflow")
        st.table(report["nodes"])

        st.subheader("Edge flow")
        st.table(report["edges"] or [{"edge": "-", "flow_minutes": 0.0, "flow_hours": "0h"}])

    except ValueError as exc:
        st.error(f"Input error: {exc}")


if __name__ == "__main__":
    main()
