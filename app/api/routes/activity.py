"""Activity API endpoint.

Editors report every edit, save, focus change and cursor move here.
The call only touches in-memory state; it never waits on storage.
"""

from fastapi import APIRouter, status

from app.services.scheduler import get_nudge_workflow_scheduler


router = APIRouter(tags=["activity"])


@router.post(
    "/workspaces/{workspace_id}/activity",
    status_code=status.HTTP_202_ACCEPTED,
    summary="Record user activity"
)
async def record_activity(workspace_id: str) -> dict:
    """
    Record an activity signal for a workspace.

    Registers the workspace on first contact. Cancels an armed ping.
    """
    scheduler = get_nudge_workflow_scheduler().record_activity(workspace_id)
    return {
        "workspace_id": workspace_id,
        "phase": scheduler.phase.value,
    }
