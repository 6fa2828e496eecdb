"""Timestamp and duration conversions.

Durations inside the scheduler are integer milliseconds; timestamps are
timezone-aware UTC datetimes. SQLite hands back naive datetimes, so every
value read from storage goes through ensure_utc().
"""

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (as stored by SQLite), convert aware ones."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def minutes_to_ms(minutes: float) -> int:
    return int(round(minutes * 60 * 1000))


def seconds_to_ms(seconds: float) -> int:
    return int(round(seconds * 1000))


def elapsed_ms(since: datetime, now: datetime) -> int:
    """Milliseconds from `since` to `now` (negative if clock went backwards)."""
    return int((now - since).total_seconds() * 1000)
