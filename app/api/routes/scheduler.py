"""
Unified Scheduler API

Status of the scheduler infrastructure and the idle-check workflow.
"""
from fastapi import APIRouter
from typing import Dict, Any

from app.services.scheduler import get_scheduler_orchestrator, get_nudge_workflow_scheduler

router = APIRouter(prefix="/scheduler", tags=["Scheduler"])


@router.get("/status")
async def get_scheduler_status() -> Dict[str, Any]:
    """
    Get status of all workflows and scheduler infrastructure.

    Returns unified view of:
    - Scheduler running state
    - All registered jobs (idle tick + armed pings)
    - Per-workspace nudge status
    """
    scheduler = get_scheduler_orchestrator()
    idle_check = get_nudge_workflow_scheduler()

    return {
        "scheduler": scheduler.get_status(),
        "workflows": {
            "idle_check": idle_check.get_status(),
        }
    }
