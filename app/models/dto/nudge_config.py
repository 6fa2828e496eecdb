"""Nudge configuration DTOs (global defaults and per-workspace overrides)."""

from typing import Optional

from pydantic import BaseModel, Field

from app.core.config import settings
from app.models.database.scheduler_state import (
    DEFAULT_BASE_INTERVAL_MS,
    DEFAULT_IDLE_THRESHOLD_MS,
    DEFAULT_MAX_INTERVAL_MS,
    MINUTE_MS,
)


class NudgeConfig(BaseModel):
    """
    Read-only configuration input to the interval controller and scheduler.

    enabled=False: the idle tick still observes activity but never arms a ping.
    A max below base is accepted here; the interval controller raises it to base.
    """

    enabled: bool = True
    base_interval_minutes: float = Field(gt=0, description="Interval after a non-waiting check-in")
    max_interval_minutes: float = Field(gt=0, description="Upper bound for the backed-off interval")
    idle_threshold_seconds: float = Field(gt=0, description="Inactivity before a ping is armed")

    @classmethod
    def defaults(cls) -> "NudgeConfig":
        return cls(
            base_interval_minutes=DEFAULT_BASE_INTERVAL_MS / MINUTE_MS,
            max_interval_minutes=DEFAULT_MAX_INTERVAL_MS / MINUTE_MS,
            idle_threshold_seconds=DEFAULT_IDLE_THRESHOLD_MS / 1000,
        )

    @classmethod
    def from_settings(cls) -> "NudgeConfig":
        """
        Raises:
            pydantic.ValidationError: a non-positive interval or threshold in settings
        """
        return cls(
            enabled=settings.NUDGE_ENABLED,
            base_interval_minutes=settings.NUDGE_BASE_INTERVAL_MINUTES,
            max_interval_minutes=settings.NUDGE_MAX_INTERVAL_MINUTES,
            idle_threshold_seconds=settings.NUDGE_IDLE_THRESHOLD_SECONDS,
        )

    def merged(self, update: "NudgeConfigUpdate") -> "NudgeConfig":
        """Apply a partial update (fields already validated on the update)."""
        data = self.model_dump()
        data.update(update.model_dump(exclude_unset=True, exclude_none=True))
        return NudgeConfig(**data)


class NudgeConfigUpdate(BaseModel):
    """Partial per-workspace configuration update (all fields optional)."""

    enabled: Optional[bool] = None
    base_interval_minutes: Optional[float] = Field(None, gt=0)
    max_interval_minutes: Optional[float] = Field(None, gt=0)
    idle_threshold_seconds: Optional[float] = Field(None, gt=0)
