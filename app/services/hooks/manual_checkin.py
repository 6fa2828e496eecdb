"""
Manual Check-in Hook.

Fire-and-forget trigger for an explicit "check in now" command. The
check-in waits on the user for as long as it takes, so the caller (an
HTTP request) must not await it.
"""

import asyncio
import logging
from typing import Set

logger = logging.getLogger(__name__)

# Strong references keep running check-ins from being garbage collected
_background_tasks: Set[asyncio.Task] = set()


async def _trigger_manual_checkin_async(workspace_id: str) -> None:
    """
    Internal async function running one manual check-in (fire-and-forget).

    Designed to be called via asyncio.create_task() and will not raise
    exceptions to the caller.
    """
    try:
        from app.services.scheduler import get_nudge_workflow_scheduler

        logger.info(f"Manual check-in requested for workspace {workspace_id}")

        result = await get_nudge_workflow_scheduler().trigger_manual(workspace_id)

        if result.get("error"):
            logger.warning(f"Manual check-in failed for workspace {workspace_id}: {result['error']}")
        elif result.get("skipped"):
            logger.info(f"Manual check-in skipped for workspace {workspace_id}: {result.get('reason')}")
        else:
            logger.info(
                f"Manual check-in complete for workspace {workspace_id} "
                f"(classification={result.get('classification')})"
            )

    except Exception as e:
        logger.error(
            f"Unexpected error in manual check-in for workspace {workspace_id}: {str(e)}",
            exc_info=True,
        )


def trigger_manual_checkin(workspace_id: str) -> asyncio.Task:
    """
    Start a manual check-in for a workspace (fire-and-forget).

    Must be called from a running event loop.

    Returns:
        asyncio.Task running the check-in
    """
    task = asyncio.create_task(_trigger_manual_checkin_async(workspace_id))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task
