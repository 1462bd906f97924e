"""CSV adapter for activity logs."""

from __future__ import annotations

import csv
from datetime import datetime

from lifemap_flow.schema import LogEntry

_REQUIRED_FIELDS = {"timestamp", "elapsed_minutes"}


def _text(row: dict, field: str) -> str | None:
    raw = row.get(field)
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def _parse_row(row: dict, row_number: int) -> LogEntry:
    missing = [field for field in _REQUIRED_FIELDS if not row.get(field)]
    if missing:
        raise ValueError(f"Row {row_number}: missing required fields {sorted(missing)}")

    try:
        timestamp = datetime.fromisoformat(row["timestamp"].strip().replace("Z", "+00:00"))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Row {row_number}: malformed timestamp") from exc

    try:
        elapsed = float(row["elapsed_minutes"])
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Row {row_number}: invalid elapsed_minutes") from exc

    duration_raw = _text(row, "duration_minutes")
    duration = None
    if duration_raw is not None:
        try:
            duration = float(duration_raw)
        except Exception as exc:  # noqa: BLE001
            raise ValueError(f"Row {row_number}: invalid duration_minutes") from exc

    return LogEntry(
        timestamp=timestamp,
        elapsed_minutes=elapsed,
        node_id=_text(row, "node_id"),
        course_name=_text(row, "course_name"),
        task_name=_text(row, "task_name"),
        id=_text(row, "id"),
        series_name=_text(row, "series_name"),
        duration_minutes=duration,
    )


def parse(file_path: str) -> list[LogEntry]:
    """Parse a CSV file of activity logs."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        logs: list[LogEntry] = []
        for row_number, row in enumerate(reader, start=2):
            logs.append(_parse_row(row, row_number))
        return logs
