"""Tests for the adaptive interval policy."""
from datetime import datetime, timezone

import pytest

from app.domain.exceptions import DomainValidationError
from app.domain.interval_controller import IntervalController
from app.models.database.scheduler_state import BlockerType, SchedulerState, MINUTE_MS


def _state(**overrides) -> SchedulerState:
    values = dict(
        workspace_id="ws-1",
        last_activity_at=datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc),
        base_interval_ms=15 * MINUTE_MS,
        current_interval_ms=15 * MINUTE_MS,
        max_interval_ms=60 * MINUTE_MS,
    )
    values.update(overrides)
    return SchedulerState(**values)


class TestBlockerReported:

    @pytest.mark.parametrize("blocker", [BlockerType.WAITING_FOR_PROCESS, BlockerType.WAITING_FOR_PERSON])
    def test_external_wait_steps_up_once(self, blocker):
        """First external wait adds one base interval; repeating it adds nothing."""
        state = _state()

        IntervalController.on_blocker_reported(state, blocker)
        assert state.current_interval_ms == 30 * MINUTE_MS
        assert state.is_waiting is True
        assert state.blocker_type == blocker

        IntervalController.on_blocker_reported(state, blocker)
        assert state.current_interval_ms == 30 * MINUTE_MS
        assert state.is_waiting is True

    def test_switching_wait_kind_does_not_compound(self):
        state = _state()

        IntervalController.on_blocker_reported(state, BlockerType.WAITING_FOR_PERSON)
        IntervalController.on_blocker_reported(state, BlockerType.WAITING_FOR_PROCESS)

        assert state.current_interval_ms == 30 * MINUTE_MS
        assert state.blocker_type == BlockerType.WAITING_FOR_PROCESS

    def test_step_up_clamped_to_max(self):
        state = _state(base_interval_ms=40 * MINUTE_MS, current_interval_ms=40 * MINUTE_MS)

        IntervalController.on_blocker_reported(state, BlockerType.WAITING_FOR_PROCESS)

        assert state.current_interval_ms == 60 * MINUTE_MS

    @pytest.mark.parametrize("blocker", [BlockerType.NONE, BlockerType.OTHER])
    def test_self_resolvable_blocker_resets_to_base(self, blocker):
        state = _state(current_interval_ms=30 * MINUTE_MS, is_waiting=True,
                       blocker_type=BlockerType.WAITING_FOR_PERSON)

        IntervalController.on_blocker_reported(state, blocker)

        assert state.current_interval_ms == 15 * MINUTE_MS
        assert state.is_waiting is False
        assert state.blocker_type == blocker

    def test_none_when_not_waiting_is_idempotent(self):
        state = _state()

        IntervalController.on_blocker_reported(state, BlockerType.NONE)
        IntervalController.on_blocker_reported(state, BlockerType.NONE)

        assert state.current_interval_ms == 15 * MINUTE_MS
        assert state.is_waiting is False

    def test_wait_after_reset_steps_up_again(self):
        state = _state()

        IntervalController.on_blocker_reported(state, BlockerType.WAITING_FOR_PROCESS)
        IntervalController.on_blocker_reported(state, BlockerType.NONE)
        IntervalController.on_blocker_reported(state, BlockerType.WAITING_FOR_PROCESS)

        assert state.current_interval_ms == 30 * MINUTE_MS

    def test_accepts_raw_string_value(self):
        state = _state()

        IntervalController.on_blocker_reported(state, "waiting_for_person")

        assert state.blocker_type == BlockerType.WAITING_FOR_PERSON
        assert state.is_waiting is True


class TestConfigChanged:

    def test_new_base_applies_when_not_waiting(self):
        state = _state()

        IntervalController.on_config_changed(state, base_minutes=5, max_minutes=60, idle_seconds=120)

        assert state.base_interval_ms == 5 * MINUTE_MS
        assert state.current_interval_ms == 5 * MINUTE_MS
        assert state.idle_threshold_ms == 120_000

    def test_backoff_survives_base_change(self):
        state = _state(current_interval_ms=30 * MINUTE_MS, is_waiting=True)

        IntervalController.on_config_changed(state, base_minutes=10, max_minutes=60, idle_seconds=180)

        assert state.base_interval_ms == 10 * MINUTE_MS
        assert state.current_interval_ms == 30 * MINUTE_MS

    def test_lower_max_clamps_current(self):
        state = _state(current_interval_ms=45 * MINUTE_MS, is_waiting=True)

        IntervalController.on_config_changed(state, base_minutes=15, max_minutes=20, idle_seconds=180)

        assert state.current_interval_ms == 20 * MINUTE_MS

    def test_base_above_max_raises_max_to_base(self):
        state = _state()

        IntervalController.on_config_changed(state, base_minutes=90, max_minutes=60, idle_seconds=180)

        assert state.base_interval_ms == 90 * MINUTE_MS
        assert state.max_interval_ms == 90 * MINUTE_MS
        assert state.current_interval_ms == 90 * MINUTE_MS

    def test_base_above_max_while_waiting(self):
        state = _state(current_interval_ms=30 * MINUTE_MS, is_waiting=True)

        IntervalController.on_config_changed(state, base_minutes=45, max_minutes=40, idle_seconds=180)

        assert state.max_interval_ms == 45 * MINUTE_MS
        assert state.current_interval_ms == 45 * MINUTE_MS
        assert state.is_waiting is True

    def test_negative_values_rejected(self):
        state = _state()

        with pytest.raises(DomainValidationError):
            IntervalController.on_config_changed(state, base_minutes=15, max_minutes=60, idle_seconds=-1)

        assert state.idle_threshold_ms == 180_000


class TestEnforceBounds:

    def test_within_bounds_untouched(self):
        state = _state(current_interval_ms=20 * MINUTE_MS)

        assert IntervalController.enforce_bounds(state) is False
        assert state.current_interval_ms == 20 * MINUTE_MS

    def test_clamps_above_max(self):
        state = _state(current_interval_ms=90 * MINUTE_MS)

        assert IntervalController.enforce_bounds(state) is True
        assert state.current_interval_ms == 60 * MINUTE_MS

    def test_clamps_below_base(self):
        state = _state(current_interval_ms=MINUTE_MS)

        assert IntervalController.enforce_bounds(state) is True
        assert state.current_interval_ms == 15 * MINUTE_MS

    def test_max_below_base_raised(self):
        state = _state(max_interval_ms=10 * MINUTE_MS)

        assert IntervalController.enforce_bounds(state) is True
        assert state.max_interval_ms == 15 * MINUTE_MS
        assert state.current_interval_ms == 15 * MINUTE_MS
