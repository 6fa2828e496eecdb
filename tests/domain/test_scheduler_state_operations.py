"""Tests for scheduler state persistence (forgiving reads, full writes)."""
from datetime import datetime, timedelta, timezone

from app.domain.scheduler_state_operations import SchedulerStateOperations
from app.models.database.scheduler_state import (
    BlockerType,
    SchedulerState,
    SchedulerStateRecord,
    DEFAULT_BASE_INTERVAL_MS,
    DEFAULT_MAX_INTERVAL_MS,
    DEFAULT_IDLE_THRESHOLD_MS,
    MINUTE_MS,
)

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def test_missing_row_loads_defaults(db_session):
    state = SchedulerStateOperations.load(db_session, "ws-new", NOW)

    assert state.workspace_id == "ws-new"
    assert state.last_activity_at == NOW
    assert state.ping_scheduled_at is None
    assert state.base_interval_ms == DEFAULT_BASE_INTERVAL_MS
    assert state.current_interval_ms == DEFAULT_BASE_INTERVAL_MS
    assert state.max_interval_ms == DEFAULT_MAX_INTERVAL_MS
    assert state.idle_threshold_ms == DEFAULT_IDLE_THRESHOLD_MS
    assert state.is_waiting is False
    assert state.blocker_type == BlockerType.NONE


def test_save_then_load_keeps_backoff(db_session):
    state = SchedulerState(
        workspace_id="ws-1",
        last_activity_at=NOW - timedelta(hours=2),
        ping_scheduled_at=NOW + timedelta(minutes=5),
        base_interval_ms=10 * MINUTE_MS,
        current_interval_ms=20 * MINUTE_MS,
        max_interval_ms=40 * MINUTE_MS,
        idle_threshold_ms=60_000,
        is_waiting=True,
        blocker_type=BlockerType.WAITING_FOR_PERSON,
        last_answers=["Reviewing", "Waiting on Ana"],
        last_checkin_at=NOW - timedelta(minutes=30),
    )
    SchedulerStateOperations.save(db_session, state)

    loaded = SchedulerStateOperations.load(db_session, "ws-1", NOW)

    assert loaded.current_interval_ms == 20 * MINUTE_MS
    assert loaded.is_waiting is True
    assert loaded.blocker_type == BlockerType.WAITING_FOR_PERSON
    assert loaded.last_answers == ["Reviewing", "Waiting on Ana"]
    assert loaded.last_checkin_at == NOW - timedelta(minutes=30)
    # Session-scoped fields restart
    assert loaded.last_activity_at == NOW
    assert loaded.ping_scheduled_at is None


def test_save_overwrites_single_row(db_session):
    state = SchedulerState.defaults("ws-1", NOW)
    SchedulerStateOperations.save(db_session, state)
    state.idle_threshold_ms = 5_000
    SchedulerStateOperations.save(db_session, state)

    rows = db_session.query(SchedulerStateRecord).all()

    assert len(rows) == 1
    assert rows[0].idle_threshold_ms == 5_000


def test_current_resets_to_base_when_not_waiting(db_session):
    db_session.add(SchedulerStateRecord(
        workspace_id="ws-1",
        base_interval_ms=10 * MINUTE_MS,
        current_interval_ms=25 * MINUTE_MS,
        max_interval_ms=60 * MINUTE_MS,
        is_waiting=False,
    ))
    db_session.flush()

    loaded = SchedulerStateOperations.load(db_session, "ws-1", NOW)

    assert loaded.current_interval_ms == 10 * MINUTE_MS


def test_partial_row_falls_back_per_field(db_session):
    db_session.add(SchedulerStateRecord(
        workspace_id="ws-1",
        idle_threshold_ms=30_000,
        blocker_type="gone_fishing",
        last_answers=None,
    ))
    db_session.flush()

    loaded = SchedulerStateOperations.load(db_session, "ws-1", NOW)

    assert loaded.idle_threshold_ms == 30_000
    assert loaded.base_interval_ms == DEFAULT_BASE_INTERVAL_MS
    assert loaded.max_interval_ms == DEFAULT_MAX_INTERVAL_MS
    assert loaded.blocker_type == BlockerType.NONE
    assert loaded.last_answers == []


def test_inverted_bounds_raise_max_to_base(db_session):
    db_session.add(SchedulerStateRecord(
        workspace_id="ws-1",
        base_interval_ms=90 * MINUTE_MS,
        current_interval_ms=90 * MINUTE_MS,
        max_interval_ms=30 * MINUTE_MS,
        is_waiting=True,
    ))
    db_session.flush()

    loaded = SchedulerStateOperations.load(db_session, "ws-1", NOW)

    assert loaded.base_interval_ms == 90 * MINUTE_MS
    assert loaded.max_interval_ms == 90 * MINUTE_MS
    assert loaded.current_interval_ms == 90 * MINUTE_MS
    assert loaded.base_interval_ms <= loaded.current_interval_ms <= loaded.max_interval_ms


def test_negative_duration_ignored(db_session):
    db_session.add(SchedulerStateRecord(workspace_id="ws-1", idle_threshold_ms=-5))
    db_session.flush()

    loaded = SchedulerStateOperations.load(db_session, "ws-1", NOW)

    assert loaded.idle_threshold_ms == DEFAULT_IDLE_THRESHOLD_MS

