"""Demo script for lifemap-flow."""

import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from lifemap_flow.adapters import csv_adapter, json_adapter
from lifemap_flow.config import setup_logging
from lifemap_flow.flow import calculate_flow
from lifemap_flow.report import format_hours
from lifemap_flow.schema import TimeWindow
from lifemap_flow.vitality import node_vitality


def main() -> None:
    setup_logging("INFO")
    snapshot = json_adapter.parse("examples/sample_lifemap.json")
    logs = snapshot.logs + csv_adapter.parse("examples/sample_logs.csv")
    now = datetime(2025, 6, 15, 12, 0)

    for range_name in ("D", "W", "M", "Y"):
        result = calculate_flow(snapshot.nodes, snapshot.edges, logs, TimeWindow(range_name), now=now)
        totals = {node.label: format_hours(result.node_inflow[node.id]) for node in snapshot.nodes}
        print(f"{range_name}:", totals)

    states = node_vitality(snapshot.nodes, snapshot.edges, logs, TimeWindow("W"), now=now)
    print("Going dormant:", [node_id for node_id, state in states.items() if state.going_dormant])


if __name__ == "__main__":
    main()
