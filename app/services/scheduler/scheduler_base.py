"""
Scheduler Base Class

Abstract base class for periodic workspace workflows.
Provides common patterns (statistics, registration, status).
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Any, Optional
import logging

from .scheduler_orchestrator import SchedulerOrchestrator, get_scheduler_orchestrator

logger = logging.getLogger(__name__)


class SchedulerBase(ABC):
    """
    Abstract base class for periodic workspace workflows.

    Subclasses implement:
    - workflow_name (property)
    - job_interval_seconds (property)
    - execute_for_workspace() (async method)
    - execute_for_all_workspaces() (async method)
    - trigger_manual() (async method)
    """

    def __init__(self, orchestrator: Optional[SchedulerOrchestrator] = None):
        self._scheduler = orchestrator or get_scheduler_orchestrator()
        self._last_run: Optional[datetime] = None
        self._stats = {
            "total_runs": 0,
            "successful_runs": 0,
            "failed_runs": 0,
            "workspaces_processed": 0,
            "pings_armed": 0,
        }

    @property
    @abstractmethod
    def workflow_name(self) -> str:
        """Workflow identifier (e.g., 'idle_check')."""
        pass

    @property
    @abstractmethod
    def job_interval_seconds(self) -> int:
        """How often to run (seconds)."""
        pass

    @abstractmethod
    async def execute_for_workspace(self, workspace_id: str) -> Dict[str, Any]:
        """
        Execute workflow for single workspace.

        Returns:
            Result dict with keys: success, skipped, error, workspace_id
        """
        pass

    @abstractmethod
    async def execute_for_all_workspaces(self) -> Dict[str, Any]:
        """
        Execute workflow for all known workspaces.

        Returns:
            Aggregated statistics
        """
        pass

    @abstractmethod
    async def trigger_manual(self, workspace_id: str) -> Dict[str, Any]:
        """Explicit user command for one workspace."""
        pass

    async def register(self):
        """Register this workflow's periodic job with scheduler."""
        job_id = f"{self.workflow_name}_job"

        self._scheduler.add_job(
            func=self.execute_for_all_workspaces,
            trigger='interval',
            seconds=self.job_interval_seconds,
            id=job_id,
            name=f"{self.workflow_name.replace('_', ' ').title()} - All Workspaces",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

        logger.info(
            f"Registered {self.workflow_name} job: "
            f"job_id={job_id}, interval_seconds={self.job_interval_seconds}"
        )

    def get_status(self) -> Dict[str, Any]:
        """Get workflow-specific status."""
        job = self._scheduler.get_job(f"{self.workflow_name}_job")
        next_run_time = getattr(job, 'next_run_time', None) if job else None

        return {
            "workflow": self.workflow_name,
            "running": job is not None and self._scheduler.is_running,
            "interval_seconds": self.job_interval_seconds,
            "last_run": self._last_run.isoformat() if self._last_run else None,
            "next_run": next_run_time.isoformat() if next_run_time else None,
            "stats": self._stats,
        }
