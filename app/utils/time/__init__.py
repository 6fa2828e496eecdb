"""Time helpers shared by the scheduler and persistence layers."""

from app.utils.time.conversions import (
    utcnow,
    ensure_utc,
    minutes_to_ms,
    seconds_to_ms,
    elapsed_ms,
)

__all__ = ["utcnow", "ensure_utc", "minutes_to_ms", "seconds_to_ms", "elapsed_ms"]
