"""Core data schema for life-map nodes, edges and activity logs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

NODE_TYPES = ("hub", "bed", "plant", "source", "question")
NODE_STATUSES = ("active", "dormant", "decaying", "completed")
EDGE_KINDS = ("active_stream", "groundwater")

FIXED_RANGES = ("D", "W", "M", "Y")
CUSTOM_RANGE = "Custom"

SPRING_CATEGORY = "spring"


@dataclass(frozen=True)
class Root:
    """Retroactive effort entered by hand, independent of any time window."""

    label: str
    hours: float
    id: Optional[str] = None


@dataclass(frozen=True)
class Node:
    """A vertex of the life map."""

    id: str
    type: str
    label: str = ""
    capacity: Optional[float] = None
    category: Optional[str] = None
    roots: tuple[Root, ...] = ()
    debug_hours: dict[str, float] = field(default_factory=dict, hash=False)
    created_at: Optional[datetime] = None
    status: str = "active"

    @property
    def is_question(self) -> bool:
        return self.type == "question"

    @property
    def is_spring(self) -> bool:
        return self.type == "source" and self.category == SPRING_CATEGORY


@dataclass(frozen=True)
class Edge:
    """Directed link; flow moves from ``source_id`` to ``target_id``."""

    source_id: str
    target_id: str
    weight: int = 1
    kind: str = "active_stream"


@dataclass(frozen=True)
class LogEntry:
    """A single completed activity record."""

    timestamp: datetime
    elapsed_minutes: float
    node_id: Optional[str] = None
    course_name: Optional[str] = None
    task_name: Optional[str] = None
    id: Optional[str] = None
    series_name: Optional[str] = None
    duration_minutes: Optional[float] = None


@dataclass(frozen=True)
class TimeWindow:
    """Reporting range: one of D/W/M/Y, or Custom with inclusive dates."""

    range: str = "W"
    start: Optional[date] = None
    end: Optional[date] = None

    def __post_init__(self) -> None:
        if self.range == CUSTOM_RANGE:
            if self.start is None or self.end is None:
                raise ValueError("Custom window requires both start and end dates")
            if self.end < self.start:
                raise ValueError("Custom window end is before start")
        elif self.range not in FIXED_RANGES:
            raise ValueError(f"Unknown time range '{self.range}'")

    @property
    def is_custom(self) -> bool:
        return self.range == CUSTOM_RANGE


@dataclass
class FlowResult:
    """Output of one flow computation."""

    node_inflow: dict[str, float]
    edge_flow: dict[str, float]
    generated: dict[str, float]
    passes: int

    def edge_flow_for(self, source_id: str, target_id: str) -> float:
        return self.edge_flow.get(f"{source_id}-{target_id}", 0.0)


@dataclass
class LifeMap:
    """A caller-supplied snapshot of the whole map."""

    nodes: list[Node]
    edges: list[Edge]
    logs: list[LogEntry]
