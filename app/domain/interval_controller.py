"""Interval Controller - adaptive ping interval policy.

Converts blocker feedback into a monotonic, bounded interval adjustment:

    not waiting --(external wait reported)--> waiting   current += base (once)
    waiting     --(external wait reported)--> waiting   unchanged
    any         --(none / other reported)---> not waiting   current = base

Pattern: static methods mutating the SchedulerState handle in place.
No persistence here - callers save the state after every mutation.
"""

import logging

from app.domain.exceptions import DomainValidationError
from app.models.database.scheduler_state import BlockerType, SchedulerState
from app.utils.time import minutes_to_ms, seconds_to_ms

logger = logging.getLogger(__name__)


class IntervalController:
    """Backoff/reset policy for SchedulerState interval fields."""

    @staticmethod
    def enforce_bounds(state: SchedulerState) -> bool:
        """
        Re-assert base <= current <= max.

        Runs after every write path so out-of-order configuration updates
        can never leave the state outside its bounds. A max below base is
        raised to base.

        Returns:
            True if max or the current interval had to be adjusted
        """
        adjusted = False
        if state.max_interval_ms < state.base_interval_ms:
            logger.warning(
                f"Workspace {state.workspace_id}: max interval {state.max_interval_ms}ms below base "
                f"{state.base_interval_ms}ms, raised to base"
            )
            state.max_interval_ms = state.base_interval_ms
            adjusted = True

        clamped = min(max(state.current_interval_ms, state.base_interval_ms), state.max_interval_ms)
        if clamped == state.current_interval_ms:
            return adjusted

        logger.warning(
            f"Workspace {state.workspace_id}: current interval {state.current_interval_ms}ms "
            f"outside [{state.base_interval_ms}, {state.max_interval_ms}], clamped to {clamped}ms"
        )
        state.current_interval_ms = clamped
        return True

    @staticmethod
    def on_blocker_reported(state: SchedulerState, blocker_type: BlockerType) -> None:
        """
        Apply a completed check-in's blocker report.

        Only the false -> true waiting transition steps the interval up, so
        re-reporting the same external wait never compounds.
        """
        blocker_type = BlockerType(blocker_type)
        was_waiting = state.is_waiting
        previous_interval = state.current_interval_ms
        state.blocker_type = blocker_type

        if blocker_type.is_external_wait:
            if not was_waiting:
                state.current_interval_ms = min(
                    state.current_interval_ms + state.base_interval_ms,
                    state.max_interval_ms,
                )
                state.is_waiting = True
        else:
            # "other" is self-resolvable: it never extends the interval
            state.current_interval_ms = state.base_interval_ms
            state.is_waiting = False

        IntervalController.enforce_bounds(state)

        if state.current_interval_ms != previous_interval:
            logger.info(
                f"Workspace {state.workspace_id}: blocker={blocker_type.value}, interval "
                f"{previous_interval / 1000:.0f}s -> {state.current_interval_ms / 1000:.0f}s"
            )

    @staticmethod
    def on_config_changed(
        state: SchedulerState,
        base_minutes: float,
        max_minutes: float,
        idle_seconds: float,
    ) -> None:
        """
        Apply new interval configuration.

        A changed base forces the current interval to the new base unless a
        backoff is active. Max and idle threshold always apply; a max below
        the new base is raised to it by enforce_bounds.

        Raises:
            DomainValidationError: negative values (state left untouched)
        """
        new_base_ms = minutes_to_ms(base_minutes)
        new_max_ms = minutes_to_ms(max_minutes)
        new_idle_ms = seconds_to_ms(idle_seconds)

        if min(new_base_ms, new_max_ms, new_idle_ms) < 0:
            raise DomainValidationError("Intervals and idle threshold must not be negative")

        if not state.is_waiting and state.base_interval_ms != new_base_ms:
            state.current_interval_ms = new_base_ms

        state.base_interval_ms = new_base_ms
        state.max_interval_ms = new_max_ms
        state.idle_threshold_ms = new_idle_ms

        IntervalController.enforce_bounds(state)

        logger.debug(
            f"Workspace {state.workspace_id}: config applied (base={new_base_ms}ms, "
            f"max={state.max_interval_ms}ms, idle={new_idle_ms}ms, current={state.current_interval_ms}ms)"
        )
