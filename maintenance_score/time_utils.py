"""
Shared datetime helpers.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone


_RFC3339 = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[Tt ]"
    r"(?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)


def utc_now() -> datetime:
    """Return the current instant as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Return a timezone-aware UTC datetime."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp and normalize it to UTC.

    Fractional seconds of any length are accepted (truncated to
    microseconds), as are lowercase ``t``/``z`` separators.

    Raises:
        ValueError: if the value is empty, malformed or carries no UTC offset.
    """
    if not value:
        raise ValueError("empty timestamp")
    match = _RFC3339.match(value.strip())
    if match is None:
        raise ValueError(f"not an RFC 3339 timestamp with UTC offset: {value!r}")

    fraction = (match.group("fraction") or "0")[:6].ljust(6, "0")
    offset = match.group("offset")
    if offset in ("Z", "z"):
        offset = "+00:00"
    normalized = f"{match.group('date')}T{match.group('time')}.{fraction}{offset}"
    return datetime.fromisoformat(normalized).astimezone(timezone.utc)
