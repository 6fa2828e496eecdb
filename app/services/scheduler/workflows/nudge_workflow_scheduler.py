"""
Nudge Workflow Scheduler

Owns one NudgeScheduler per workspace and drives all of them from a
single periodic idle-check job. Supports scheduled (tick), realtime
(activity) and manual (API) triggers.
"""
from datetime import datetime
from typing import Any, Callable, Dict, Optional
import logging

from pydantic import ValidationError

from app.core.config import settings
from app.core.database import SessionFactory, get_db_session
from app.domain.exceptions import EntityNotFoundError
from app.domain.scheduler_state_operations import SchedulerStateOperations
from app.models.database.scheduler_state import SchedulerState
from app.models.dto.nudge_config import NudgeConfig
from app.services.changes import ChangeSetProvider, ChangeSnapshotter, GitChangeProvider, StaticChangeProvider
from app.services.checkin import MessageComposer, PendingCheckInPresenter
from app.utils.time import utcnow
from ..nudge_scheduler import NudgeScheduler
from ..scheduler_base import SchedulerBase
from ..scheduler_orchestrator import SchedulerOrchestrator

logger = logging.getLogger(__name__)


def default_provider_for(workspace_id: str) -> ChangeSetProvider:
    """Git provider for workspaces with a configured root, empty provider otherwise."""
    root = settings.WORKSPACE_ROOTS.get(workspace_id)
    if root:
        return GitChangeProvider(root)
    logger.warning(f"Workspace {workspace_id}: no repository root configured, change sets will be empty")
    return StaticChangeProvider()


class NudgeWorkflowScheduler(SchedulerBase):
    """Idle-check workflow across all workspaces."""

    def __init__(
        self,
        orchestrator: Optional[SchedulerOrchestrator] = None,
        presenter: Optional[PendingCheckInPresenter] = None,
        provider_factory: Callable[[str], ChangeSetProvider] = default_provider_for,
        session_factory: SessionFactory = get_db_session,
        clock: Callable[[], datetime] = utcnow,
    ):
        super().__init__(orchestrator)
        self.presenter = presenter or PendingCheckInPresenter()
        self._provider_factory = provider_factory
        self._session_factory = session_factory
        self._clock = clock
        self._composer = MessageComposer()
        self._workspaces: Dict[str, NudgeScheduler] = {}

    @property
    def workflow_name(self) -> str:
        return "idle_check"

    @property
    def job_interval_seconds(self) -> int:
        return settings.IDLE_CHECK_INTERVAL_SECONDS

    # =========================================================================
    # Workspace registry
    # =========================================================================

    def _load_state(self, workspace_id: str) -> SchedulerState:
        """Stored state, or defaults if storage is absent or unreadable."""
        now = self._clock()
        try:
            with self._session_factory() as session:
                return SchedulerStateOperations.load(session, workspace_id, now)
        except Exception as e:
            logger.error(
                f"Workspace {workspace_id}: failed to load state, using defaults - {e}",
                exc_info=True
            )
            return SchedulerState.defaults(workspace_id, now)

    def get_or_create_workspace(
        self,
        workspace_id: str,
        provider: Optional[ChangeSetProvider] = None,
    ) -> NudgeScheduler:
        """
        Get the workspace's scheduler, loading it on first access.

        Global nudge settings are applied through the same path as a
        runtime configuration change.
        """
        scheduler = self._workspaces.get(workspace_id)
        if scheduler is not None:
            return scheduler

        state = self._load_state(workspace_id)
        snapshotter = ChangeSnapshotter(
            workspace_id,
            provider or self._provider_factory(workspace_id),
            session_factory=self._session_factory,
            clock=self._clock,
        )

        try:
            config = NudgeConfig.from_settings()
        except ValidationError as e:
            logger.error(f"Workspace {workspace_id}: nudge settings invalid, using defaults - {e}")
            config = NudgeConfig.defaults()

        scheduler = NudgeScheduler(
            state=state,
            config=config,
            snapshotter=snapshotter,
            presenter=self.presenter,
            orchestrator=self._scheduler,
            composer=self._composer,
            questions=settings.CHECKIN_QUESTIONS,
            session_factory=self._session_factory,
            clock=self._clock,
        )

        scheduler.apply_config(config)

        self._workspaces[workspace_id] = scheduler
        logger.info(
            f"Workspace {workspace_id} registered "
            f"(interval={state.current_interval_ms / 1000:.0f}s, waiting={state.is_waiting})"
        )
        return scheduler

    def get_workspace(self, workspace_id: str) -> NudgeScheduler:
        """
        Raises:
            EntityNotFoundError: workspace never seen by this process
        """
        scheduler = self._workspaces.get(workspace_id)
        if scheduler is None:
            raise EntityNotFoundError("Workspace", workspace_id)
        return scheduler

    def list_workspaces(self) -> list[str]:
        return sorted(self._workspaces)

    # =========================================================================
    # Triggers
    # =========================================================================

    def record_activity(self, workspace_id: str) -> NudgeScheduler:
        """Realtime trigger: activity signal (registers unknown workspaces)."""
        scheduler = self.get_or_create_workspace(workspace_id)
        scheduler.record_activity()
        return scheduler

    async def execute_for_workspace(self, workspace_id: str) -> Dict[str, Any]:
        """Idle check for one workspace."""
        scheduler = self.get_workspace(workspace_id)
        try:
            armed = scheduler.tick()
        except Exception as e:
            logger.error(f"Workspace {workspace_id}: idle check failed - {str(e)}", exc_info=True)
            return {
                "success": False,
                "skipped": False,
                "workspace_id": workspace_id,
                "error": str(e),
            }

        return {
            "success": True,
            "skipped": not armed,
            "workspace_id": workspace_id,
            "phase": scheduler.phase.value,
        }

    async def execute_for_all_workspaces(self) -> Dict[str, Any]:
        """
        Idle check for every known workspace (scheduled job).

        Returns:
            Aggregated statistics
        """
        run_start = utcnow()

        results = [await self.execute_for_workspace(workspace_id) for workspace_id in self.list_workspaces()]

        successful = sum(1 for r in results if r.get("success"))
        failed = len(results) - successful
        armed = sum(1 for r in results if r.get("success") and not r.get("skipped"))

        self._last_run = run_start
        self._stats["total_runs"] += 1
        self._stats["workspaces_processed"] += len(results)
        self._stats["pings_armed"] += armed

        if failed == 0:
            self._stats["successful_runs"] += 1
        else:
            self._stats["failed_runs"] += 1

        if armed or failed:
            logger.info(f"Idle check complete: {len(results)} workspaces, {armed} pings armed, {failed} failed")

        return {
            "total_workspaces": len(results),
            "successful": successful,
            "failed": failed,
            "pings_armed": armed,
            "run_time": (utcnow() - run_start).total_seconds(),
        }

    async def trigger_manual(self, workspace_id: str) -> Dict[str, Any]:
        """
        Manual check-in (explicit user command).

        Awaits the whole check-in, including the user's answer.
        """
        scheduler = self.get_or_create_workspace(workspace_id)
        return await scheduler.trigger_manual()

    def get_status(self) -> Dict[str, Any]:
        status = super().get_status()
        status["workspaces"] = {
            workspace_id: scheduler.get_status()
            for workspace_id, scheduler in sorted(self._workspaces.items())
        }
        return status


# Singleton instance
_nudge_workflow_scheduler: Optional[NudgeWorkflowScheduler] = None


def get_nudge_workflow_scheduler() -> NudgeWorkflowScheduler:
    """Get or create nudge workflow scheduler singleton."""
    global _nudge_workflow_scheduler
    if _nudge_workflow_scheduler is None:
        _nudge_workflow_scheduler = NudgeWorkflowScheduler()
    return _nudge_workflow_scheduler
