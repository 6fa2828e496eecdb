"""
Integration test fixtures for FastAPI TestClient.

Provides:
- Test app with the real router and exception handlers, without the
  production lifespan (no idle-check job, no scheduler start)
- Fresh workflow/orchestrator singletons per test

Strategy:
- Clients are used as context managers so the app's event loop stays
  alive between requests; background check-ins run on that loop
- Each test works on its own workspace id
"""

import time
from contextlib import asynccontextmanager
from typing import Callable, Generator
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from app.api.router import api_router
from app.core.config import settings
from app.domain.exceptions import (
    EntityNotFoundError,
    CheckInConflictError,
    DomainValidationError,
)

import app.services.scheduler.scheduler_orchestrator as _orch_mod
import app.services.scheduler.workflows.nudge_workflow_scheduler as _nudge_mod


# ---------------------------------------------------------------------------
# App Factory (no lifespan - skips schedulers)
# ---------------------------------------------------------------------------

@asynccontextmanager
async def test_lifespan(app: FastAPI):
    """Minimal lifespan that skips scheduler registration."""
    yield


def create_test_app() -> FastAPI:
    """Create FastAPI app for testing without scheduler overhead."""
    app = FastAPI(
        title=f"{settings.PROJECT_NAME} (test)",
        lifespan=test_lifespan,
    )

    @app.exception_handler(EntityNotFoundError)
    async def _not_found(request, exc):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(CheckInConflictError)
    async def _conflict(request, exc):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(DomainValidationError)
    async def _validation(request, exc):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def _reset_scheduler_singletons():
    orch = _orch_mod._scheduler_orchestrator
    if orch and orch._is_running:
        orch._scheduler.shutdown(wait=False)
        orch._is_running = False
    _orch_mod._scheduler_orchestrator = None
    _nudge_mod._nudge_workflow_scheduler = None


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """TestClient bound to a fresh workflow singleton."""
    _reset_scheduler_singletons()
    with TestClient(create_test_app()) as test_client:
        yield test_client
    _reset_scheduler_singletons()


@pytest.fixture
def workspace_id() -> str:
    return f"ws-{uuid4().hex[:8]}"


@pytest.fixture
def wait_for_checkin(client: TestClient) -> Callable[[str], dict]:
    """Poll GET .../checkin until a check-in is open; returns the prompt."""
    def _wait(workspace_id: str, timeout: float = 5.0) -> dict:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            response = client.get(f"/api/workspaces/{workspace_id}/checkin")
            if response.status_code == 200:
                return response.json()
            time.sleep(0.02)
        raise AssertionError(f"no check-in opened for {workspace_id}")
    return _wait


@pytest.fixture
def wait_for_idle(client: TestClient) -> Callable[[str], dict]:
    """Poll workspace status until no check-in is in flight."""
    def _wait(workspace_id: str, timeout: float = 5.0) -> dict:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            status = client.get(f"/api/workspaces/{workspace_id}/status").json()
            if not status["checkin_in_flight"]:
                return status
            time.sleep(0.02)
        raise AssertionError(f"check-in for {workspace_id} never finished")
    return _wait
