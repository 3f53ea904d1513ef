from __future__ import annotations

import re
from datetime import UTC, date, datetime, timedelta, timezone
from typing import Any

_iso_date_re = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_iso_date(value: str) -> bool:
    if not _iso_date_re.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def validate_iso_date(value: str) -> str:
    """Return `value` if it is a calendar date in `YYYY-MM-DD` form."""

    if not isinstance(value, str) or not is_iso_date(value):
        raise ValueError(f"Expected a YYYY-MM-DD date, got {value!r}")
    return value


def to_pmu_date(iso_date: str) -> str:
    """PMU programme URLs use DDMMYYYY."""

    d = date.fromisoformat(validate_iso_date(iso_date))
    return d.strftime("%d%m%Y")


def epoch_ms_to_iso(value: Any, *, tz_offset_ms: Any = None) -> str | None:
    """
    Convert a PMU millisecond timestamp into an ISO-8601 string.

    PMU sends `heureDepart` in epoch milliseconds plus a separate
    `timezoneOffset` (ms); the offset is kept so local race times read naturally.
    """
    if not isinstance(value, int | float) or isinstance(value, bool):
        return None

    tz: timezone = UTC
    try:
        if isinstance(tz_offset_ms, int | float) and not isinstance(tz_offset_ms, bool):
            tz = timezone(timedelta(milliseconds=tz_offset_ms))
        return datetime.fromtimestamp(value / 1000.0, tz=tz).isoformat()
    except (OverflowError, OSError, ValueError):
        return None


def parse_iso_datetime(value: Any) -> datetime | None:
    """Best-effort parser for provider timestamps; naive values are treated as UTC."""

    if not isinstance(value, str) or not value.strip():
        return None
    v = value.strip()
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(v)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt
