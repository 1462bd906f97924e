"""Compute life-map flow for a JSON snapshot and print a JSON report."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from lifemap_flow.adapters import csv_adapter, json_adapter
from lifemap_flow.config import FlowSettings, setup_logging
from lifemap_flow.flow import calculate_flow
from lifemap_flow.report import flow_report
from lifemap_flow.windows import parse_window

log = logging.getLogger("lifemap_flow.run_flow")


def _parse_now(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValueError(f"Malformed --now value '{raw}'") from exc


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the life-map flow engine")
    parser.add_argument("--data", required=True, help="Path to JSON snapshot with nodes, edges and logs")
    parser.add_argument("--logs", help="Optional CSV of extra activity logs")
    parser.add_argument("--range", default="W", help="D, W, M, Y or Custom")
    parser.add_argument("--start", help="Custom range start date (YYYY-MM-DD)")
    parser.add_argument("--end", help="Custom range end date (YYYY-MM-DD)")
    parser.add_argument("--now", help="Reference time (ISO format), defaults to the current time")
    args = parser.parse_args()

    settings = FlowSettings()
    setup_logging(settings.log_level)

    snapshot = json_adapter.parse(args.data)
    logs = list(snapshot.logs)
    if args.logs:
        logs.extend(csv_adapter.parse(args.logs))

    window = parse_window(args.range, args.start, args.end)
    result = calculate_flow(
        snapshot.nodes,
        snapshot.edges,
        logs,
        window,
        now=_parse_now(args.now),
        policy=settings.weight_policy(),
        passes=settings.passes,
        tolerance=settings.tolerance,
    )
    log.info("Computed flow for %d nodes over range %s", len(snapshot.nodes), window.range)

    report = flow_report(snapshot.nodes, result)
    report["range"] = window.range
    print(json.dumps(report, indent=2))

    outputs_dir = Path("outputs")
    outputs_dir.mkdir(parents=True, exist_ok=True)
    out_path = outputs_dir / "flow_report.json"
    out_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
    print(f"Saved flow report to {out_path}")


if __name__ == "__main__":
    main()
