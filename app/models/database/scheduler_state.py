"""Scheduler State model - per-workspace nudge scheduling record."""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field as PydanticField
from sqlalchemy import Column, JSON
from sqlmodel import Field, SQLModel

from app.models.database.mixins.timestamp import TimestampMixin
from app.utils.time import utcnow


MINUTE_MS = 60 * 1000

DEFAULT_BASE_INTERVAL_MS = 15 * MINUTE_MS
DEFAULT_MAX_INTERVAL_MS = 60 * MINUTE_MS
DEFAULT_IDLE_THRESHOLD_MS = 3 * MINUTE_MS


class BlockerType(str, Enum):
    """User-reported reason for lack of progress."""

    NONE = "none"
    WAITING_FOR_PERSON = "waiting_for_person"
    WAITING_FOR_PROCESS = "waiting_for_process"
    OTHER = "other"

    @property
    def is_external_wait(self) -> bool:
        """Waiting on someone or something outside the developer's control."""
        return self in (BlockerType.WAITING_FOR_PERSON, BlockerType.WAITING_FOR_PROCESS)


class SchedulerState(BaseModel):
    """
    Durable session record for one workspace.

    Owned by exactly one NudgeScheduler and mutated in place by the
    debouncer (timestamp), the timer (timer fields) and the interval
    controller (interval + blocker fields).

    Invariant: base_interval_ms <= current_interval_ms <= max_interval_ms
    """

    workspace_id: str
    last_activity_at: datetime = PydanticField(default_factory=utcnow)
    ping_scheduled_at: Optional[datetime] = None

    base_interval_ms: int = PydanticField(default=DEFAULT_BASE_INTERVAL_MS, ge=0)
    current_interval_ms: int = PydanticField(default=DEFAULT_BASE_INTERVAL_MS, ge=0)
    max_interval_ms: int = PydanticField(default=DEFAULT_MAX_INTERVAL_MS, ge=0)
    idle_threshold_ms: int = PydanticField(default=DEFAULT_IDLE_THRESHOLD_MS, ge=0)

    is_waiting: bool = False
    blocker_type: BlockerType = BlockerType.NONE

    # Answers from the most recent completed check-in
    last_answers: List[str] = PydanticField(default_factory=list)
    last_checkin_at: Optional[datetime] = None

    @classmethod
    def defaults(cls, workspace_id: str, now: Optional[datetime] = None) -> "SchedulerState":
        return cls(workspace_id=workspace_id, last_activity_at=now or utcnow())


class SchedulerStateRecord(TimestampMixin, table=True):
    """
    Persisted SchedulerState. One row per workspace.

    Every state column is nullable: rows written by older versions (or
    partially corrupted) load with per-field defaults instead of failing.
    """
    __tablename__ = "scheduler_states"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    workspace_id: str = Field(max_length=255, unique=True, index=True, description="Owning workspace")

    last_activity_at: Optional[datetime] = Field(default=None, nullable=True)
    ping_scheduled_at: Optional[datetime] = Field(default=None, nullable=True)

    base_interval_ms: Optional[int] = Field(default=None, nullable=True)
    current_interval_ms: Optional[int] = Field(default=None, nullable=True)
    max_interval_ms: Optional[int] = Field(default=None, nullable=True)
    idle_threshold_ms: Optional[int] = Field(default=None, nullable=True)

    is_waiting: Optional[bool] = Field(default=None, nullable=True)
    blocker_type: Optional[str] = Field(default=None, max_length=32, nullable=True)

    last_answers: Optional[List[str]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    last_checkin_at: Optional[datetime] = Field(default=None, nullable=True)
