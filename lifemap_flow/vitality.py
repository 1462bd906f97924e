"""Per-node activity state derived from flow and log history."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from lifemap_flow.flow import DEFAULT_PASSES, calculate_flow, log_matches
from lifemap_flow.lineage import passive_ancestors
from lifemap_flow.schema import Edge, LogEntry, Node, TimeWindow
from lifemap_flow.weights import WeightPolicy
from lifemap_flow.windows import align_timestamp

DORMANCY_DAYS = 14
NO_ACTIVITY_DAYS = 999
_EPOCH = datetime(1970, 1, 1)


@dataclass
class Vitality:
    """Display state of a node."""

    flow: float
    is_active: bool
    has_history: bool
    going_dormant: bool
    days_since_activity: int
    age_days: int


def last_activity(node: Node, logs: Iterable[LogEntry]) -> Optional[datetime]:
    """Most recent log timestamp attributed to ``node`` by id or label."""

    latest = None
    for entry in logs:
        if not log_matches(entry, node):
            continue
        if latest is None or align_timestamp(entry.timestamp, latest) > latest:
            latest = entry.timestamp
    return latest


def _days_between(earlier: datetime, now: datetime) -> int:
    return int((now - align_timestamp(earlier, now)).total_seconds() // 86400)


def node_vitality(
    nodes: Iterable[Node],
    edges: Iterable[Edge],
    logs: Iterable[LogEntry],
    window: TimeWindow,
    now: Optional[datetime] = None,
    policy: Optional[WeightPolicy] = None,
    passes: int = DEFAULT_PASSES,
    tolerance: Optional[float] = None,
) -> dict[str, Vitality]:
    """Classify every node as active, historic or drifting toward dormancy."""

    nodes = list(nodes)
    edges = list(edges)
    logs = list(logs)
    now = now or datetime.now()

    budget = {"now": now, "policy": policy, "passes": passes, "tolerance": tolerance}
    current = calculate_flow(nodes, edges, logs, window, **budget)
    yearly = current if window.range == "Y" else calculate_flow(nodes, edges, logs, TimeWindow("Y"), **budget)

    states = {}
    for node in nodes:
        flow = current.node_inflow.get(node.id, 0.0)
        springs = passive_ancestors(node.id, nodes, edges)
        is_active = flow > 0 or bool(springs)

        latest = last_activity(node, logs)
        days_idle = _days_between(latest, now) if latest is not None else NO_ACTIVITY_DAYS
        created = node.created_at or _EPOCH
        age_days = _days_between(created, now)

        states[node.id] = Vitality(
            flow=flow,
            is_active=is_active,
            has_history=yearly.node_inflow.get(node.id, 0.0) > 0 or bool(springs),
            going_dormant=not is_active and days_idle > DORMANCY_DAYS and age_days > DORMANCY_DAYS,
            days_since_activity=days_idle,
            age_days=age_days,
        )
    return states
