"""Domain operations for Scheduler State - persistence of the session record.

One row per workspace. Reads are forgiving: a missing row, a missing
column value or an unreadable value falls back to the default for that
field. No transaction management - callers own the session.

Pattern: Sync operations, static methods.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from sqlmodel import Session, select

from app.domain.interval_controller import IntervalController
from app.models.database.scheduler_state import (
    BlockerType,
    SchedulerState,
    SchedulerStateRecord,
    DEFAULT_BASE_INTERVAL_MS,
    DEFAULT_MAX_INTERVAL_MS,
    DEFAULT_IDLE_THRESHOLD_MS,
)
from app.utils.time import ensure_utc

logger = logging.getLogger(__name__)


def _duration_or_default(value: Any, default: int) -> int:
    """Stored duration if it is a non-negative integer, else the default."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        return default
    return int(value)


def _blocker_or_default(value: Any) -> BlockerType:
    try:
        return BlockerType(value) if value is not None else BlockerType.NONE
    except ValueError:
        logger.warning(f"Unknown stored blocker type {value!r}, using 'none'")
        return BlockerType.NONE


class SchedulerStateOperations:
    """
    Scheduler State persistence. Static methods, sync session-based, no commits.
    """

    @staticmethod
    def get_by_workspace_id(
        session: Session,
        workspace_id: str
    ) -> Optional[SchedulerStateRecord]:
        """
        Get stored state row for workspace.

        Returns:
            SchedulerStateRecord if exists, None otherwise
        """
        statement = select(SchedulerStateRecord).where(SchedulerStateRecord.workspace_id == workspace_id)
        return session.exec(statement).first()

    @staticmethod
    def to_state(
        record: Optional[SchedulerStateRecord],
        workspace_id: str,
        now: datetime,
    ) -> SchedulerState:
        """
        Build in-memory state from a stored row (or defaults when absent).

        Session-scoped fields are not restored: last_activity_at starts at
        `now` (opening the session counts as activity) and no timer
        survives a restart.
        """
        if record is None:
            return SchedulerState.defaults(workspace_id, now)

        base_ms = _duration_or_default(record.base_interval_ms, DEFAULT_BASE_INTERVAL_MS)
        max_ms = _duration_or_default(record.max_interval_ms, DEFAULT_MAX_INTERVAL_MS)
        is_waiting = bool(record.is_waiting) if record.is_waiting is not None else False
        current_ms = _duration_or_default(record.current_interval_ms, base_ms)
        if not is_waiting:
            current_ms = base_ms

        answers = record.last_answers if isinstance(record.last_answers, list) else []

        state = SchedulerState(
            workspace_id=workspace_id,
            last_activity_at=now,
            ping_scheduled_at=None,
            base_interval_ms=base_ms,
            current_interval_ms=current_ms,
            max_interval_ms=max_ms,
            idle_threshold_ms=_duration_or_default(record.idle_threshold_ms, DEFAULT_IDLE_THRESHOLD_MS),
            is_waiting=is_waiting,
            blocker_type=_blocker_or_default(record.blocker_type),
            last_answers=[str(answer) for answer in answers],
            last_checkin_at=ensure_utc(record.last_checkin_at),
        )
        IntervalController.enforce_bounds(state)
        return state

    @staticmethod
    def load(
        session: Session,
        workspace_id: str,
        now: datetime,
    ) -> SchedulerState:
        """Load state for workspace, falling back to defaults per field."""
        record = SchedulerStateOperations.get_by_workspace_id(session, workspace_id)
        return SchedulerStateOperations.to_state(record, workspace_id, now)

    @staticmethod
    def save(
        session: Session,
        state: SchedulerState,
    ) -> SchedulerStateRecord:
        """
        Write every state field to the workspace row (creates it on first save).

        Returns:
            Persisted SchedulerStateRecord
        """
        record = SchedulerStateOperations.get_by_workspace_id(session, state.workspace_id)
        if record is None:
            record = SchedulerStateRecord(workspace_id=state.workspace_id)

        record.last_activity_at = state.last_activity_at
        record.ping_scheduled_at = state.ping_scheduled_at
        record.base_interval_ms = state.base_interval_ms
        record.current_interval_ms = state.current_interval_ms
        record.max_interval_ms = state.max_interval_ms
        record.idle_threshold_ms = state.idle_threshold_ms
        record.is_waiting = state.is_waiting
        record.blocker_type = state.blocker_type.value
        record.last_answers = list(state.last_answers)
        record.last_checkin_at = state.last_checkin_at

        session.add(record)
        session.flush()

        return record
