"""Tests for the pending check-in presenter used by the HTTP API."""
import asyncio
from datetime import datetime, timezone

import pytest

from app.domain.exceptions import CheckInConflictError, EntityNotFoundError
from app.models.database.scheduler_state import BlockerType
from app.models.dto.checkin import CheckInPrompt, CheckInResponse, CheckInSource
from app.models.dto.progress import ProgressClassification, ProgressResult
from app.services.checkin import PendingCheckInPresenter


def _prompt(workspace_id: str = "ws-1") -> CheckInPrompt:
    return CheckInPrompt(
        workspace_id=workspace_id,
        source=CheckInSource.SCHEDULED,
        opening_message="Hi",
        description="No changes in Git.",
        detailed_report="",
        questions=["What are you working on?"],
        progress=ProgressResult(
            has_changes=False,
            is_stuck=False,
            classification=ProgressClassification.FIRST_RUN,
        ),
        opened_at=datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc),
    )


async def _wait_for_pending(presenter: PendingCheckInPresenter, workspace_id: str = "ws-1"):
    for _ in range(100):
        if presenter.has_pending(workspace_id):
            return
        await asyncio.sleep(0)
    raise AssertionError("check-in never opened")


@pytest.mark.asyncio
async def test_respond_resolves_present():
    presenter = PendingCheckInPresenter()
    task = asyncio.create_task(presenter.present(_prompt()))
    await _wait_for_pending(presenter)

    assert presenter.get_pending("ws-1").opening_message == "Hi"
    presenter.respond("ws-1", CheckInResponse(blocker_type=BlockerType.OTHER, answers=["x"]))

    response = await task
    assert response.blocker_type == BlockerType.OTHER
    assert presenter.has_pending("ws-1") is False


@pytest.mark.asyncio
async def test_cancel_resolves_with_none():
    presenter = PendingCheckInPresenter()
    task = asyncio.create_task(presenter.present(_prompt()))
    await _wait_for_pending(presenter)

    presenter.cancel("ws-1")

    assert await task is None
    with pytest.raises(EntityNotFoundError):
        presenter.get_pending("ws-1")


@pytest.mark.asyncio
async def test_second_checkin_for_same_workspace_conflicts():
    presenter = PendingCheckInPresenter()
    task = asyncio.create_task(presenter.present(_prompt()))
    await _wait_for_pending(presenter)

    with pytest.raises(CheckInConflictError):
        await presenter.present(_prompt())

    presenter.cancel("ws-1")
    await task


@pytest.mark.asyncio
async def test_workspaces_are_independent():
    presenter = PendingCheckInPresenter()
    first = asyncio.create_task(presenter.present(_prompt("ws-1")))
    second = asyncio.create_task(presenter.present(_prompt("ws-2")))
    await _wait_for_pending(presenter, "ws-1")
    await _wait_for_pending(presenter, "ws-2")

    presenter.respond("ws-2", CheckInResponse())

    assert (await second) is not None
    assert presenter.has_pending("ws-1") is True

    presenter.cancel("ws-1")
    assert await first is None


def test_resolving_without_open_checkin_raises():
    presenter = PendingCheckInPresenter()

    with pytest.raises(EntityNotFoundError):
        presenter.respond("ws-1", CheckInResponse())
    with pytest.raises(EntityNotFoundError):
        presenter.cancel("ws-1")
