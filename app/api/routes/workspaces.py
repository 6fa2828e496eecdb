"""Workspace API endpoints (nudge status + configuration).

Pattern: Async routes. All scheduler state lives on the event loop, so
these routes must not be moved to the thread pool.
"""

from typing import Any, Dict

from fastapi import APIRouter
from app.models.dto.nudge_config import NudgeConfig, NudgeConfigUpdate
from app.services.scheduler import get_nudge_workflow_scheduler


router = APIRouter(tags=["workspaces"])


@router.get(
    "/workspaces/{workspace_id}/status",
    summary="Get nudge status"
)
async def get_workspace_status(workspace_id: str) -> Dict[str, Any]:
    """
    Get scheduler status for a workspace.

    Returns 404 if the workspace has not reported activity yet.
    """
    return get_nudge_workflow_scheduler().get_workspace(workspace_id).get_status()


@router.get(
    "/workspaces/{workspace_id}/config",
    response_model=NudgeConfig,
    summary="Get nudge configuration"
)
async def get_workspace_config(workspace_id: str) -> NudgeConfig:
    """Get nudge configuration for a workspace (registers it on first access)."""
    return get_nudge_workflow_scheduler().get_or_create_workspace(workspace_id).config


@router.put(
    "/workspaces/{workspace_id}/config",
    response_model=NudgeConfig,
    summary="Update nudge configuration"
)
async def update_workspace_config(
    workspace_id: str,
    data: NudgeConfigUpdate,
) -> NudgeConfig:
    """
    Update nudge configuration for a workspace.

    Partial update - only provided fields are changed. A max interval
    below the base is raised to the base; the response shows the values
    in effect.
    """
    scheduler = get_nudge_workflow_scheduler().get_or_create_workspace(workspace_id)
    scheduler.apply_config(scheduler.config.merged(data))
    return scheduler.config
