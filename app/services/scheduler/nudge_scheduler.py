"""
Nudge Scheduler

Per-workspace state machine deciding when to interrupt with a check-in.

    ACTIVE --(tick, idle >= threshold, enabled)--> IDLE_NO_PING
    IDLE_NO_PING --(no timer armed)--> PING_ARMED (one-shot timer, current interval)
    PING_ARMED --(activity)--> ACTIVE (timer cancelled)
    PING_ARMED --(timer elapses)--> PING_FIRED --> ACTIVE
    any --(manual trigger)--> PING_FIRED

Cancellation always wins over firing: every armed timer carries a token
and only the token currently held by the scheduler may fire. Cancelling
or re-arming drops the token synchronously, so a timer job that was
already dispatched finds a stale token and does nothing.

All mutations happen on the event loop (activity requests, the tick job
and timer jobs are serialized by it).
"""
import itertools
import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from app.core.database import SessionFactory, get_db_session
from app.domain.exceptions import CheckInConflictError
from app.domain.interval_controller import IntervalController
from app.domain.progress_classifier import classify_progress
from app.domain.scheduler_state_operations import SchedulerStateOperations
from app.models.database.change_snapshot import ChangeSnapshot
from app.models.database.scheduler_state import SchedulerState
from app.models.dto.checkin import CheckInPrompt, CheckInResponse, CheckInSource
from app.models.dto.nudge_config import NudgeConfig
from app.services.changes.snapshotter import ChangeSnapshotter
from app.services.checkin.message_composer import MessageComposer
from app.services.checkin.presenter import CheckInPresenter
from app.utils.time import utcnow
from .activity_debouncer import ActivityDebouncer
from .scheduler_orchestrator import SchedulerOrchestrator

logger = logging.getLogger(__name__)


class NudgePhase(str, Enum):
    ACTIVE = "active"
    IDLE_NO_PING = "idle_no_ping"
    PING_ARMED = "ping_armed"
    PING_FIRED = "ping_fired"


class NudgeScheduler:
    """
    Nudge state machine for one workspace.

    Dependencies (state handle, snapshotter, presenter, orchestrator) are
    injected; the scheduler is the single writer of its SchedulerState.
    """

    def __init__(
        self,
        state: SchedulerState,
        config: NudgeConfig,
        snapshotter: ChangeSnapshotter,
        presenter: CheckInPresenter,
        orchestrator: SchedulerOrchestrator,
        composer: Optional[MessageComposer] = None,
        questions: Optional[List[str]] = None,
        session_factory: SessionFactory = get_db_session,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.state = state
        self.config = config
        self.snapshotter = snapshotter
        self.presenter = presenter
        self.composer = composer or MessageComposer()
        self.questions = list(questions or [])
        self._orchestrator = orchestrator
        self._session_factory = session_factory
        self._clock = clock

        self.debouncer = ActivityDebouncer(state, on_activity=self._on_activity, clock=clock)

        self._tokens = itertools.count(1)
        self._armed_token: Optional[int] = None
        self._checkin_in_flight = False
        self._phase = NudgePhase.ACTIVE
        self._stats = {
            "pings_armed": 0,
            "pings_fired": 0,
            "pings_cancelled": 0,
            "stale_timers_ignored": 0,
            "checkins_completed": 0,
            "checkins_cancelled": 0,
            "checkins_failed": 0,
        }

    @property
    def workspace_id(self) -> str:
        return self.state.workspace_id

    @property
    def job_id(self) -> str:
        return f"nudge_ping_{self.workspace_id}"

    @property
    def phase(self) -> NudgePhase:
        return self._phase

    @property
    def is_ping_armed(self) -> bool:
        return self._armed_token is not None

    @property
    def checkin_in_flight(self) -> bool:
        return self._checkin_in_flight

    @property
    def stats(self) -> Dict[str, int]:
        return dict(self._stats)

    # =========================================================================
    # Activity
    # =========================================================================

    def record_activity(self) -> None:
        """Activity signal from any source. Cancels an armed ping."""
        self.debouncer.record_activity()

    def _on_activity(self) -> None:
        if self._disarm():
            self._stats["pings_cancelled"] += 1
            logger.info(f"Workspace {self.workspace_id}: scheduled ping cancelled due to activity")
            self._persist_state()
        if not self._checkin_in_flight:
            self._phase = NudgePhase.ACTIVE

    # =========================================================================
    # Idle tick + timer
    # =========================================================================

    def tick(self) -> bool:
        """
        Periodic idle check.

        Returns:
            True if a ping was armed by this tick
        """
        if not self.config.enabled or self._checkin_in_flight or self.is_ping_armed:
            return False

        now = self._clock()
        if not self.debouncer.is_idle(now):
            self._phase = NudgePhase.ACTIVE
            return False

        self._phase = NudgePhase.IDLE_NO_PING
        self._arm(now)
        return True

    def _arm(self, now: datetime) -> None:
        """Arm the one-shot ping timer for the current interval."""
        self._disarm()

        token = next(self._tokens)
        self._armed_token = token
        run_at = now + timedelta(milliseconds=self.state.current_interval_ms)
        self.state.ping_scheduled_at = run_at

        self._orchestrator.add_job(
            self._on_ping_timer,
            trigger="date",
            run_date=run_at,
            id=self.job_id,
            name=f"Nudge ping {self.workspace_id}",
            args=[token],
            replace_existing=True,
            coalesce=True,
            max_instances=1,
            misfire_grace_time=None,  # A late ping still fires unless cancelled
        )

        self._phase = NudgePhase.PING_ARMED
        self._stats["pings_armed"] += 1
        logger.info(
            f"Workspace {self.workspace_id}: ping scheduled in "
            f"{self.state.current_interval_ms / 1000:.0f} seconds"
        )
        self._persist_state()

    def _disarm(self) -> bool:
        """
        Invalidate the armed timer (token first, then the job).

        Returns:
            True if a timer was armed
        """
        if self._armed_token is None:
            return False

        self._armed_token = None
        self.state.ping_scheduled_at = None
        self._orchestrator.remove_job(self.job_id)
        return True

    async def _on_ping_timer(self, token: int) -> Dict[str, Any]:
        """Timer callback. No-op unless `token` is the one currently armed."""
        if token != self._armed_token:
            self._stats["stale_timers_ignored"] += 1
            logger.debug(f"Workspace {self.workspace_id}: stale ping timer {token} ignored")
            return {
                "success": True,
                "skipped": True,
                "workspace_id": self.workspace_id,
                "reason": "cancelled",
            }

        # Consume the token before the first await
        self._armed_token = None
        self.state.ping_scheduled_at = None
        self._persist_state()
        return await self._run_checkin(CheckInSource.SCHEDULED)

    # =========================================================================
    # Check-in flow
    # =========================================================================

    async def trigger_manual(self) -> Dict[str, Any]:
        """Explicit user command: check in now, bypassing the idle check."""
        if self._checkin_in_flight:
            return {
                "success": True,
                "skipped": True,
                "workspace_id": self.workspace_id,
                "reason": "already_running",
            }

        if self._disarm():
            logger.debug(f"Workspace {self.workspace_id}: armed ping replaced by manual check-in")
        return await self._run_checkin(CheckInSource.MANUAL)

    async def _run_checkin(self, source: CheckInSource) -> Dict[str, Any]:
        """
        Snapshot, classify, present; apply the answers if not cancelled.

        A cancelled check-in leaves state and stored snapshot untouched.
        """
        if self._checkin_in_flight:
            return {
                "success": True,
                "skipped": True,
                "workspace_id": self.workspace_id,
                "reason": "already_running",
            }

        self._checkin_in_flight = True
        self._phase = NudgePhase.PING_FIRED
        self._stats["pings_fired"] += 1

        try:
            previous = self.snapshotter.last()
            current = await self.snapshotter.capture()
            progress = classify_progress(previous, current)

            description = self.composer.describe(progress, current)
            prompt = CheckInPrompt(
                workspace_id=self.workspace_id,
                source=source,
                opening_message=self.composer.opening_message(progress, description),
                description=description,
                detailed_report=self.composer.detailed_report(progress, previous, current),
                questions=self.questions,
                progress=progress,
                opened_at=self._clock(),
            )

            response = await self.presenter.present(prompt)

            if response is None:
                self._stats["checkins_cancelled"] += 1
                logger.info(f"Workspace {self.workspace_id}: check-in cancelled by user")
                return {
                    "success": True,
                    "skipped": True,
                    "workspace_id": self.workspace_id,
                    "reason": "cancelled_by_user",
                    "classification": progress.classification.value,
                }

            self._apply_response(response, current)
            self._stats["checkins_completed"] += 1
            logger.info(
                f"Workspace {self.workspace_id}: check-in complete "
                f"(progress={progress.classification.value}, blocker={response.blocker_type.value}, "
                f"interval={self.state.current_interval_ms / 1000:.0f}s, waiting={self.state.is_waiting})"
            )
            return {
                "success": True,
                "skipped": False,
                "workspace_id": self.workspace_id,
                "classification": progress.classification.value,
                "blocker_type": response.blocker_type.value,
                "current_interval_ms": self.state.current_interval_ms,
            }

        except CheckInConflictError as e:
            logger.warning(f"Workspace {self.workspace_id}: {e}")
            return {
                "success": True,
                "skipped": True,
                "workspace_id": self.workspace_id,
                "reason": "already_open",
            }
        except Exception as e:
            self._stats["checkins_failed"] += 1
            logger.error(f"Workspace {self.workspace_id}: check-in failed - {str(e)}", exc_info=True)
            return {
                "success": False,
                "skipped": False,
                "workspace_id": self.workspace_id,
                "error": str(e),
            }
        finally:
            self._checkin_in_flight = False
            self._phase = NudgePhase.ACTIVE

    def _apply_response(self, response: CheckInResponse, snapshot: ChangeSnapshot) -> None:
        now = self._clock()

        IntervalController.on_blocker_reported(self.state, response.blocker_type)
        self.state.last_answers = list(response.answers)
        self.state.last_checkin_at = now
        if response.engaged:
            self.state.last_activity_at = now

        self._persist_state()
        try:
            self.snapshotter.persist(snapshot)
        except Exception as e:
            logger.error(f"Workspace {self.workspace_id}: failed to persist snapshot - {e}", exc_info=True)

    # =========================================================================
    # Configuration + persistence
    # =========================================================================

    def apply_config(self, config: NudgeConfig) -> None:
        """
        Apply new configuration (interval controller + enabled flag).

        Raises:
            DomainValidationError: config rejected by the interval controller
        """
        IntervalController.on_config_changed(
            self.state,
            config.base_interval_minutes,
            config.max_interval_minutes,
            config.idle_threshold_seconds,
        )
        if config.max_interval_minutes < config.base_interval_minutes:
            # Report the max the controller actually applied
            config = config.model_copy(update={"max_interval_minutes": config.base_interval_minutes})
        self.config = config

        if not config.enabled and self._disarm():
            logger.info(f"Workspace {self.workspace_id}: nudges disabled, armed ping dropped")
            self._phase = NudgePhase.ACTIVE

        self._persist_state()

    def _persist_state(self) -> None:
        """Write state after a mutation. Failures are logged, never raised."""
        try:
            with self._session_factory() as session:
                SchedulerStateOperations.save(session, self.state)
        except Exception as e:
            logger.error(f"Workspace {self.workspace_id}: failed to persist state - {e}", exc_info=True)

    def get_status(self) -> Dict[str, Any]:
        now = self._clock()
        state = self.state
        return {
            "workspace_id": self.workspace_id,
            "phase": self._phase.value,
            "enabled": self.config.enabled,
            "ping_armed": self.is_ping_armed,
            "ping_scheduled_at": state.ping_scheduled_at.isoformat() if state.ping_scheduled_at else None,
            "checkin_in_flight": self._checkin_in_flight,
            "last_activity_at": state.last_activity_at.isoformat(),
            "idle_seconds": max(self.debouncer.idle_ms(now), 0) / 1000,
            "base_interval_ms": state.base_interval_ms,
            "current_interval_ms": state.current_interval_ms,
            "max_interval_ms": state.max_interval_ms,
            "idle_threshold_ms": state.idle_threshold_ms,
            "is_waiting": state.is_waiting,
            "blocker_type": state.blocker_type.value,
            "last_checkin_at": state.last_checkin_at.isoformat() if state.last_checkin_at else None,
            "last_answers": list(state.last_answers),
            "activity_signals": self.debouncer.signal_count,
            "stats": self.stats,
        }
