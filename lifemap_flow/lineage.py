"""Graph traversal helpers over the life map."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Optional

from lifemap_flow.schema import Edge, Node


def _adjacency(edges: Iterable[Edge]) -> dict[str, list[str]]:
    graph: dict[str, list[str]] = defaultdict(list)
    for edge in edges:
        graph[edge.source_id].append(edge.target_id)
    return graph


def passive_ancestors(node_id: str, nodes: Iterable[Node], edges: Iterable[Edge]) -> set[str]:
    """Return spring sources with capacity that feed ``node_id`` upstream."""

    by_id = {node.id: node for node in nodes}
    incoming: dict[str, list[str]] = defaultdict(list)
    for edge in edges:
        incoming[edge.target_id].append(edge.source_id)

    ancestors: set[str] = set()
    visited = {node_id}
    stack = [node_id]
    while stack:
        current = stack.pop()
        for source_id in incoming.get(current, []):
            source = by_id.get(source_id)
            if source is not None and source.is_spring and (source.capacity or 0) > 0:
                ancestors.add(source_id)
            if source_id not in visited:
                visited.add(source_id)
                stack.append(source_id)
    return ancestors


def find_cycle(nodes: Iterable[Node], edges: Iterable[Edge]) -> Optional[list[str]]:
    """Return one directed cycle as a list of node ids, or None."""

    graph = _adjacency(edges)
    order = [node.id for node in nodes]
    known = set(order)
    order.extend(key for key in graph if key not in known)

    state: dict[str, int] = {}
    for start in order:
        if state.get(start):
            continue
        path: list[str] = []
        stack = [(start, iter(graph.get(start, [])))]
        state[start] = 1
        path.append(start)
        while stack:
            current, children = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
                path.pop()
                state[current] = 2
                continue
            if state.get(child) == 1:
                return path[path.index(child):] + [child]
            if not state.get(child):
                state[child] = 1
                path.append(child)
                stack.append((child, iter(graph.get(child, []))))
    return None


def max_depth(nodes: Iterable[Node], edges: Iterable[Edge]) -> Optional[int]:
    """Longest path length in edges, or None when the graph has a cycle."""

    nodes = list(nodes)
    edges = list(edges)
    if find_cycle(nodes, edges) is not None:
        return None

    graph = _adjacency(edges)
    depth: dict[str, int] = {}

    def longest_from(node_id: str) -> int:
        pending = [(node_id, False)]
        while pending:
            current, expanded = pending.pop()
            if current in depth:
                continue
            children = graph.get(current, [])
            if expanded:
                depth[current] = max((depth[child] + 1 for child in children), default=0)
                continue
            pending.append((current, True))
            pending.extend((child, False) for child in children if child not in depth)
        return depth[node_id]

    ids = {node.id for node in nodes} | set(graph)
    return max((longest_from(node_id) for node_id in ids), default=0)
