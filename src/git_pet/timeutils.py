"""Time and primitive conversion helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable

SECONDS_PER_HOUR = 3600.0


def utcnow() -> datetime:
    """Get current UTC time."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string (or datetime) into a timezone-aware UTC datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def latest_timestamp(candidates: Iterable[Any]) -> datetime | None:
    """Return the latest candidate that parses as a timestamp, or None if none does."""
    parsed = [stamp for stamp in (parse_timestamp(item) for item in candidates) if stamp is not None]
    if not parsed:
        return None
    return max(parsed)


def hours_between(start: datetime, end: datetime) -> float:
    """Fractional hours from ``start`` to ``end`` (negative if ``end`` is earlier)."""
    start, end = parse_timestamp(start), parse_timestamp(end)
    return (end - start).total_seconds() / SECONDS_PER_HOUR


def hours_since(value: Any, now: datetime) -> float | None:
    """Hours elapsed since ``value``; None when it is not a usable timestamp."""
    stamp = parse_timestamp(value)
    if stamp is None:
        return None
    return hours_between(stamp, now)


def clamp_stat(value: float, low: int = 0, high: int = 100) -> int:
    """Clamp a stat into ``[low, high]`` and round to the nearest integer."""
    return int(round(min(high, max(low, value))))


def to_int(value: Any, default: int) -> int:
    """Best-effort integer conversion with sane fallback. Booleans are not numbers here."""
    if isinstance(value, bool):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


__all__ = [
    "clamp_stat",
    "hours_between",
    "hours_since",
    "latest_timestamp",
    "parse_timestamp",
    "to_int",
    "utcnow",
]
