"""JSON adapter for life-map snapshots."""

from __future__ import annotations

import json
from datetime import datetime

from lifemap_flow.schema import EDGE_KINDS, NODE_STATUSES, NODE_TYPES, Edge, LifeMap, LogEntry, Node, Root

_REQUIRED_NODE_FIELDS = {"id", "type"}
_REQUIRED_EDGE_FIELDS = {"source_id", "target_id"}
_REQUIRED_LOG_FIELDS = {"timestamp"}


def _parse_timestamp(raw, where: str) -> datetime:
    try:
        return datetime.fromisoformat(str(raw).strip().replace("Z", "+00:00"))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"{where}: malformed timestamp") from exc


def _optional_text(raw) -> str | None:
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def _number(raw, where: str, field: str) -> float | None:
    if raw is None or raw == "":
        return None
    try:
        return float(raw)
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"{where}: invalid {field}") from exc


def _parse_roots(raw, where: str) -> tuple[Root, ...]:
    roots = []
    for position, item in enumerate(raw or [], start=1):
        if not isinstance(item, dict):
            raise ValueError(f"{where}: root {position} must be an object")
        hours = _number(item.get("hours"), where, "root hours") or 0.0
        label = str(item.get("label") or "")
        # Blank, zero-hour roots are editor placeholders.
        if not label.strip() and hours <= 0:
            continue
        roots.append(Root(label=label, hours=hours, id=_optional_text(item.get("id"))))
    return tuple(roots)


def _parse_debug_hours(raw, where: str) -> dict[str, float]:
    if not raw:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"{where}: debugHours must be an object")
    hours = {}
    for slot, value in raw.items():
        if isinstance(value, bool):
            continue
        number = _number(value, where, f"debugHours[{slot}]")
        if number is not None:
            hours[str(slot)] = number
    return hours


def parse_node(item: dict, index: int) -> Node:
    where = f"Node {index}"
    missing = [field for field in _REQUIRED_NODE_FIELDS if not item.get(field)]
    if missing:
        raise ValueError(f"{where}: missing required fields {sorted(missing)}")

    node_type = str(item["type"]).strip()
    if node_type not in NODE_TYPES:
        raise ValueError(f"{where}: invalid type '{node_type}'")

    meta = item.get("meta") or {}
    if not isinstance(meta, dict):
        raise ValueError(f"{where}: meta must be an object")

    status = str(item.get("status") or "active")
    if status not in NODE_STATUSES:
        raise ValueError(f"{where}: invalid status '{status}'")

    created_raw = item.get("createdAt", item.get("created_at"))
    created_at = _parse_timestamp(created_raw, where) if created_raw else None

    return Node(
        id=str(item["id"]).strip(),
        type=node_type,
        label=str(item.get("label") or ""),
        capacity=_number(meta.get("capacity"), where, "capacity"),
        category=_optional_text(meta.get("category")),
        roots=_parse_roots(meta.get("roots"), where),
        debug_hours=_parse_debug_hours(meta.get("debugHours"), where),
        created_at=created_at,
        status=status,
    )


def parse_edge(item: dict, index: int) -> Edge:
    where = f"Edge {index}"
    missing = [field for field in _REQUIRED_EDGE_FIELDS if not item.get(field)]
    if missing:
        raise ValueError(f"{where}: missing required fields {sorted(missing)}")

    weight_raw = item.get("weight", 1)
    try:
        weight = int(weight_raw)
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"{where}: invalid weight") from exc

    kind = str(item.get("type") or "active_stream")
    if kind not in EDGE_KINDS:
        raise ValueError(f"{where}: invalid type '{kind}'")

    return Edge(
        source_id=str(item["source_id"]).strip(),
        target_id=str(item["target_id"]).strip(),
        weight=weight,
        kind=kind,
    )


def parse_log(item: dict, index: int) -> LogEntry:
    where = f"Log {index}"
    missing = [field for field in _REQUIRED_LOG_FIELDS if not item.get(field)]
    if missing:
        raise ValueError(f"{where}: missing required fields {sorted(missing)}")

    return LogEntry(
        timestamp=_parse_timestamp(item["timestamp"], where),
        elapsed_minutes=_number(item.get("elapsed_minutes"), where, "elapsed_minutes") or 0.0,
        node_id=_optional_text(item.get("node_id")),
        course_name=_optional_text(item.get("course_name")),
        task_name=_optional_text(item.get("task_name")),
        id=_optional_text(item.get("id")),
        series_name=_optional_text(item.get("series_name")),
        duration_minutes=_number(item.get("duration_minutes"), where, "duration_minutes"),
    )


def _section(payload: dict, name: str) -> list:
    items = payload.get(name) or []
    if not isinstance(items, list):
        raise ValueError(f"'{name}' must be a list of objects")
    for position, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            raise ValueError(f"'{name}' item {position} must be an object")
    return items


def load(payload: dict) -> LifeMap:
    """Build a LifeMap from an already decoded JSON document."""

    if not isinstance(payload, dict):
        raise ValueError("JSON payload must be an object with nodes, edges and logs")

    return LifeMap(
        nodes=[parse_node(item, i) for i, item in enumerate(_section(payload, "nodes"), start=1)],
        edges=[parse_edge(item, i) for i, item in enumerate(_section(payload, "edges"), start=1)],
        logs=[parse_log(item, i) for i, item in enumerate(_section(payload, "logs"), start=1)],
    )


def parse(file_path: str) -> LifeMap:
    """Parse a JSON snapshot file into a LifeMap."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)
    return load(payload)
