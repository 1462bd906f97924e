"""Presentation-facing summaries of a flow result."""

from __future__ import annotations

from math import ceil
from typing import Iterable

from lifemap_flow.schema import FlowResult, Node

MAX_MAGNITUDE = 5


def format_hours(minutes: float) -> str:
    """Render minutes as hours with one decimal, e.g. ``90 -> "1.5h"``."""

    if not minutes or minutes < 1:
        return "0h"
    text = f"{minutes / 60:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return f"{text}h"


def leaf_magnitude(flow: float, max_flow: float) -> int:
    """Bucket a node's flow into 1..5 relative to the largest flow."""

    if flow <= 0 or max_flow <= 0:
        return 0
    level = ceil((flow / max_flow) * MAX_MAGNITUDE)
    return max(1, min(MAX_MAGNITUDE, level))


def flow_report(nodes: Iterable[Node], result: FlowResult) -> dict:
    """Return JSON-ready node and edge rows for a computed flow."""

    max_flow = max(result.node_inflow.values(), default=0.0)
    node_rows = []
    for node in nodes:
        inflow = result.node_inflow.get(node.id, 0.0)
        node_rows.append(
            {
                "id": node.id,
                "label": node.label,
                "type": node.type,
                "generated_minutes": round(result.generated.get(node.id, 0.0), 2),
                "inflow_minutes": round(inflow, 2),
                "inflow_hours": format_hours(inflow),
                "magnitude": leaf_magnitude(inflow, max_flow),
            }
        )
    node_rows.sort(key=lambda row: (-row["inflow_minutes"], row["id"]))

    edge_rows = [
        {"edge": key, "flow_minutes": round(value, 2), "flow_hours": format_hours(value)}
        for key, value in sorted(result.edge_flow.items(), key=lambda item: (-item[1], item[0]))
    ]

    return {
        "nodes": node_rows,
        "edges": edge_rows,
        "total_inflow_minutes": round(sum(result.node_inflow.values()), 2),
        "passes": result.passes,
    }
