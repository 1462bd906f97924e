"""Time window scaling and log filtering."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional

from lifemap_flow.schema import CUSTOM_RANGE, FIXED_RANGES, TimeWindow

_LOOKBACK_DAYS = {"D": 1, "W": 7, "M": 30, "Y": 365}
_WEEKLY_SCALE = {"D": 1 / 7, "W": 1.0, "M": 4.3, "Y": 52.0}
_RANGE_ALIASES = {
    "d": "D",
    "day": "D",
    "w": "W",
    "week": "W",
    "m": "M",
    "month": "M",
    "y": "Y",
    "year": "Y",
    "custom": CUSTOM_RANGE,
}

# Custom windows read the monthly override.
_CUSTOM_OVERRIDE_SLOT = "M"


def time_scale(window: TimeWindow) -> float:
    """Multiplier turning a weekly capacity into the window's capacity."""

    if window.is_custom:
        weeks = (window.end - window.start).days / 7
        return max(1.0, weeks)
    return _WEEKLY_SCALE[window.range]


def override_slot(window: TimeWindow) -> str:
    return _CUSTOM_OVERRIDE_SLOT if window.is_custom else window.range


def align_timestamp(value: datetime, reference: datetime) -> datetime:
    if value.tzinfo is not None and reference.tzinfo is None:
        return value.astimezone().replace(tzinfo=None)
    if value.tzinfo is None and reference.tzinfo is not None:
        return value.astimezone(reference.tzinfo)
    return value


def window_bounds(window: TimeWindow, now: datetime) -> tuple[datetime, Optional[datetime]]:
    """Return ``(lower, upper)``; fixed ranges have no upper bound."""

    if window.is_custom:
        lower = datetime.combine(window.start, time.min)
        upper = datetime.combine(window.end, time(23, 59, 59, 999000))
        if now.tzinfo is not None:
            lower = lower.replace(tzinfo=now.tzinfo)
            upper = upper.replace(tzinfo=now.tzinfo)
        return lower, upper
    return now - timedelta(days=_LOOKBACK_DAYS[window.range]), None


def in_window(timestamp: datetime, window: TimeWindow, now: datetime) -> bool:
    """True when ``timestamp`` falls inside ``window`` as seen from ``now``."""

    lower, upper = window_bounds(window, now)
    timestamp = align_timestamp(timestamp, now)
    if upper is not None:
        return lower <= timestamp <= upper
    return timestamp >= lower


def _parse_date(value, name: str) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError as exc:
        raise ValueError(f"Malformed {name} date '{value}'") from exc


def parse_window(range_name: str, start=None, end=None) -> TimeWindow:
    """Build a TimeWindow from loosely formatted user input."""

    key = str(range_name).strip()
    normalized = key if key in FIXED_RANGES or key == CUSTOM_RANGE else _RANGE_ALIASES.get(key.lower())
    if normalized is None:
        raise ValueError(f"Unknown time range '{range_name}'")

    if normalized != CUSTOM_RANGE:
        return TimeWindow(normalized)
    return TimeWindow(CUSTOM_RANGE, _parse_date(start, "start"), _parse_date(end, "end"))
