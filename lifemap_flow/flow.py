"""Flow propagation over the life map.

Effort is generated at each node (manual override, passive spring capacity,
logged activity, historical roots) and then pushed along outgoing edges for
a fixed number of passes. Flow moves from ``source_id`` to ``target_id``.

The pass budget is deliberately fixed: a chain of more hops than passes
under-reports at its far end. ``tolerance`` allows an early stop once every
node's inflow has settled.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from numbers import Real
from typing import Iterable, Optional

from lifemap_flow.lineage import find_cycle, max_depth
from lifemap_flow.schema import Edge, FlowResult, LogEntry, Node, TimeWindow
from lifemap_flow.weights import WeightPolicy
from lifemap_flow.windows import in_window, override_slot, time_scale

log = logging.getLogger(__name__)

DEFAULT_PASSES = 5


def edge_key(source_id: str, target_id: str) -> str:
    return f"{source_id}-{target_id}"


def prepare_edges(nodes: Iterable[Node], edges: Iterable[Edge]) -> list[Edge]:
    """Deduplicate edges and drop those that cannot carry flow."""

    by_id = {node.id: node for node in nodes}
    seen: set[tuple[str, str]] = set()
    valid: list[Edge] = []
    for edge in edges:
        pair = (edge.source_id, edge.target_id)
        if pair in seen:
            continue
        seen.add(pair)

        source = by_id.get(edge.source_id)
        target = by_id.get(edge.target_id)
        if source is None or target is None:
            log.debug("Skipping edge %s: unknown endpoint", edge_key(*pair))
            continue
        if source.is_question or target.is_question:
            continue
        valid.append(edge)
    return valid


def root_minutes(node: Node) -> float:
    return sum(float(root.hours or 0) * 60 for root in node.roots)


def _override_hours(node: Node, window: TimeWindow) -> Optional[float]:
    value = node.debug_hours.get(override_slot(window))
    if isinstance(value, Real) and not isinstance(value, bool) and value >= 0:
        return float(value)
    return None


def log_matches(entry: LogEntry, node: Node) -> bool:
    """True when the log references the node by id or names it by label."""

    if entry.node_id is not None and entry.node_id == node.id:
        return True
    label = node.label.lower()
    return any(name is not None and name.lower() == label for name in (entry.course_name, entry.task_name))


def node_generation(node: Node, logs: Iterable[LogEntry], window: TimeWindow, now: datetime) -> float:
    """Minutes a node produces by itself in ``window``, roots excluded."""

    if node.is_question:
        return 0.0

    override = _override_hours(node, window)
    if override is not None:
        return override * 60

    generated = 0.0
    if node.is_spring and node.capacity:
        generated = node.capacity * 60 * time_scale(window)

    for entry in logs:
        if log_matches(entry, node) and in_window(entry.timestamp, window, now):
            generated += entry.elapsed_minutes or 0
    return generated


def _distribute(
    nodes: tuple[Node, ...],
    outgoing: dict[str, list[Edge]],
    node_inflow: dict[str, float],
    edge_flow: dict[str, float],
    policy: WeightPolicy,
) -> None:
    for node in nodes:
        if node.is_question:
            continue
        total = node_inflow.get(node.id, 0.0)
        if total <= 0:
            continue

        targets = outgoing.get(node.id, [])
        if len(targets) == 1:
            edge = targets[0]
            edge_flow[edge_key(edge.source_id, edge.target_id)] = total
        elif len(targets) > 1:
            shares = policy.shares(edge.weight for edge in targets)
            for edge, share in zip(targets, shares):
                edge_flow[edge_key(edge.source_id, edge.target_id)] = total * share


def _accumulate(
    nodes: tuple[Node, ...],
    incoming: dict[str, list[Edge]],
    base: dict[str, float],
    edge_flow: dict[str, float],
) -> dict[str, float]:
    inflow: dict[str, float] = {}
    for node in nodes:
        if node.is_question:
            inflow[node.id] = 0.0
            continue
        received = sum(edge_flow.get(edge_key(e.source_id, e.target_id), 0.0) for e in incoming.get(node.id, []))
        inflow[node.id] = base[node.id] + received
    return inflow


def calculate_flow(
    nodes: Iterable[Node],
    edges: Iterable[Edge],
    logs: Iterable[LogEntry],
    window: TimeWindow,
    *,
    now: Optional[datetime] = None,
    policy: Optional[WeightPolicy] = None,
    passes: int = DEFAULT_PASSES,
    tolerance: Optional[float] = None,
) -> FlowResult:
    """Compute per-node inflow and per-edge flow for ``window``."""

    nodes = tuple(nodes)
    logs = tuple(logs)
    now = now or datetime.now()
    policy = policy or WeightPolicy()
    passes = max(1, int(passes))

    valid_edges = prepare_edges(nodes, edges)
    outgoing: dict[str, list[Edge]] = defaultdict(list)
    incoming: dict[str, list[Edge]] = defaultdict(list)
    for edge in valid_edges:
        outgoing[edge.source_id].append(edge)
        incoming[edge.target_id].append(edge)

    cycle = find_cycle(nodes, valid_edges)
    if cycle is not None:
        log.warning("Flow graph contains a cycle: %s", " -> ".join(cycle))
    else:
        depth = max_depth(nodes, valid_edges)
        if depth is not None and depth > passes:
            log.debug("Graph depth %d exceeds %d passes; upper nodes will under-report", depth, passes)

    generated: dict[str, float] = {}
    base: dict[str, float] = {}
    for node in nodes:
        generated[node.id] = node_generation(node, logs, window, now)
        base[node.id] = 0.0 if node.is_question else generated[node.id] + root_minutes(node)

    node_inflow = dict(base)
    edge_flow: dict[str, float] = {}
    ran = 0
    for _ in range(passes):
        _distribute(nodes, outgoing, node_inflow, edge_flow, policy)
        updated = _accumulate(nodes, incoming, base, edge_flow)
        ran += 1

        settled = tolerance is not None and all(
            abs(updated[node_id] - node_inflow.get(node_id, 0.0)) <= tolerance for node_id in updated
        )
        node_inflow = updated
        if settled:
            break

    log.debug("Flow computed for %d nodes, %d edges in %d passes", len(nodes), len(valid_edges), ran)
    return FlowResult(node_inflow=node_inflow, edge_flow=edge_flow, generated=generated, passes=ran)
