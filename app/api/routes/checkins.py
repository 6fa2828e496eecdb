"""Check-in API endpoints.

A check-in is opened by a fired ping or by POST .../checkin/trigger and
stays open until the client answers or cancels it. Clients poll
GET .../checkin for the open prompt.
"""

from fastapi import APIRouter, status

from app.domain.exceptions import CheckInConflictError
from app.models.dto.checkin import CheckInPrompt, CheckInResponse
from app.services.hooks import trigger_manual_checkin
from app.services.scheduler import get_nudge_workflow_scheduler


router = APIRouter(tags=["checkins"])


@router.post(
    "/workspaces/{workspace_id}/checkin/trigger",
    status_code=status.HTTP_202_ACCEPTED,
    summary="Check in now"
)
async def trigger_checkin(workspace_id: str) -> dict:
    """
    Open a check-in immediately, bypassing the idle check.

    Runs in the background; poll GET .../checkin for the prompt.
    Returns 409 if a check-in is already open for the workspace.
    """
    workflow = get_nudge_workflow_scheduler()
    workflow.get_or_create_workspace(workspace_id)
    if workflow.presenter.has_pending(workspace_id):
        raise CheckInConflictError(workspace_id)
    trigger_manual_checkin(workspace_id)
    return {"workspace_id": workspace_id, "status": "triggered"}


@router.get(
    "/workspaces/{workspace_id}/checkin",
    response_model=CheckInPrompt,
    summary="Get open check-in"
)
async def get_open_checkin(workspace_id: str) -> CheckInPrompt:
    """Get the open check-in prompt. Returns 404 if none is open."""
    return get_nudge_workflow_scheduler().presenter.get_pending(workspace_id)


@router.post(
    "/workspaces/{workspace_id}/checkin/respond",
    status_code=status.HTTP_202_ACCEPTED,
    summary="Answer open check-in"
)
async def respond_to_checkin(workspace_id: str, data: CheckInResponse) -> dict:
    """
    Submit answers (and blocker type) for the open check-in.

    Returns 404 if no check-in is open.
    """
    get_nudge_workflow_scheduler().presenter.respond(workspace_id, data)
    return {"workspace_id": workspace_id, "status": "answered"}


@router.post(
    "/workspaces/{workspace_id}/checkin/cancel",
    status_code=status.HTTP_202_ACCEPTED,
    summary="Cancel open check-in"
)
async def cancel_checkin(workspace_id: str) -> dict:
    """
    Close the open check-in without answers.

    State and the stored snapshot are left untouched.
    """
    get_nudge_workflow_scheduler().presenter.cancel(workspace_id)
    return {"workspace_id": workspace_id, "status": "cancelled"}
