"""
Check-in presenters.

The presenter is the boundary to whatever shows the check-in to the user.
present() suspends until the user answers (CheckInResponse) or cancels
(None). There is no timeout: the dialog is driven by the user alone.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional

from app.domain.exceptions import CheckInConflictError, EntityNotFoundError
from app.models.dto.checkin import CheckInPrompt, CheckInResponse

logger = logging.getLogger(__name__)


class CheckInPresenter(ABC):
    """Abstract check-in presentation layer."""

    @abstractmethod
    async def present(self, prompt: CheckInPrompt) -> Optional[CheckInResponse]:
        """
        Show a check-in and wait for the user.

        Returns:
            CheckInResponse, or None if the user cancelled
        """
        pass


@dataclass
class PendingCheckIn:
    prompt: CheckInPrompt
    future: "asyncio.Future[Optional[CheckInResponse]]"


class PendingCheckInPresenter(CheckInPresenter):
    """
    Presenter that parks each check-in until a client resolves it.

    The HTTP API polls get_pending() and resolves the check-in with
    respond() or cancel(). One open check-in per workspace.
    """

    def __init__(self):
        self._pending: Dict[str, PendingCheckIn] = {}

    async def present(self, prompt: CheckInPrompt) -> Optional[CheckInResponse]:
        workspace_id = prompt.workspace_id
        if workspace_id in self._pending:
            raise CheckInConflictError(workspace_id)

        future: "asyncio.Future[Optional[CheckInResponse]]" = asyncio.get_running_loop().create_future()
        self._pending[workspace_id] = PendingCheckIn(prompt=prompt, future=future)
        logger.info(f"Workspace {workspace_id}: check-in open ({prompt.source.value})")

        try:
            return await future
        finally:
            entry = self._pending.get(workspace_id)
            if entry is not None and entry.future is future:
                del self._pending[workspace_id]

    def get_pending(self, workspace_id: str) -> CheckInPrompt:
        """
        Raises:
            EntityNotFoundError: no open check-in for workspace
        """
        entry = self._pending.get(workspace_id)
        if entry is None:
            raise EntityNotFoundError("Open check-in for workspace", workspace_id)
        return entry.prompt

    def has_pending(self, workspace_id: str) -> bool:
        return workspace_id in self._pending

    def respond(self, workspace_id: str, response: CheckInResponse) -> None:
        """Complete the open check-in with the user's answers."""
        self._resolve(workspace_id, response)

    def cancel(self, workspace_id: str) -> None:
        """Close the open check-in without answers."""
        self._resolve(workspace_id, None)

    def _resolve(self, workspace_id: str, response: Optional[CheckInResponse]) -> None:
        entry = self._pending.get(workspace_id)
        if entry is None or entry.future.done():
            raise EntityNotFoundError("Open check-in for workspace", workspace_id)
        entry.future.set_result(response)
