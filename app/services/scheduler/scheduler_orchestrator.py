"""
Scheduler Orchestrator

Runs the idle-check tick and every workspace's one-shot ping timer on a
single APScheduler instance bound to the application's event loop.
Singleton pattern - one instance serves entire application.
"""
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from typing import Dict, Any, Optional, List
import logging

logger = logging.getLogger(__name__)


class SchedulerOrchestrator:
    """
    Owns the shared APScheduler infrastructure.

    Jobs added before start() are kept pending and begin running once the
    scheduler starts.
    """

    def __init__(self):
        self._scheduler = AsyncIOScheduler()
        self._is_running = False

    @property
    def is_running(self) -> bool:
        return self._is_running

    async def start(self):
        """Start scheduler (idempotent)."""
        if self._is_running:
            logger.warning("Scheduler already running")
            return

        logger.info("Starting scheduler infrastructure")
        self._scheduler.start()
        self._is_running = True

    async def stop(self):
        """Stop scheduler without waiting for open check-ins."""
        if not self._is_running:
            return

        logger.info("Stopping scheduler infrastructure")
        self._scheduler.shutdown(wait=False)
        self._is_running = False

    def add_job(self, *args, **kwargs):
        """
        Register job with APScheduler.

        Delegates to underlying APScheduler instance.
        """
        return self._scheduler.add_job(*args, **kwargs)

    def get_job(self, job_id: str):
        """Get job by ID (pending jobs included)."""
        return self._scheduler.get_job(job_id)

    def remove_job(self, job_id: str) -> bool:
        """
        Remove job if it exists.

        Returns:
            True if a job was removed, False if none was registered
        """
        try:
            self._scheduler.remove_job(job_id)
            return True
        except JobLookupError:
            return False

    def get_all_jobs(self) -> List:
        """Get all registered jobs (for monitoring)."""
        return self._scheduler.get_jobs()

    def get_status(self) -> Dict[str, Any]:
        """
        Get scheduler status.

        Returns:
            Dict with scheduler state + all registered jobs
        """
        jobs = self.get_all_jobs()

        return {
            "running": self._is_running,
            "total_jobs": len(jobs),
            "jobs": [
                {
                    "id": job.id,
                    "name": job.name,
                    "next_run": getattr(job, 'next_run_time', None).isoformat() if getattr(job, 'next_run_time', None) else None,
                }
                for job in jobs
            ]
        }


# Global singleton
_scheduler_orchestrator: Optional[SchedulerOrchestrator] = None


def get_scheduler_orchestrator() -> SchedulerOrchestrator:
    """Get or create scheduler orchestrator singleton."""
    global _scheduler_orchestrator
    if _scheduler_orchestrator is None:
        _scheduler_orchestrator = SchedulerOrchestrator()
    return _scheduler_orchestrator
