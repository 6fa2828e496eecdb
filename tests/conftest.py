"""
Pytest configuration and fixtures for testing.

Every test runs against a private in-memory SQLite database. The
environment is pinned before any app module is imported so the global
engine never touches a file on disk.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENABLE_BACKGROUND_JOBS"] = "false"
os.environ["WORKSPACE_ROOTS"] = "{}"

from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest
from sqlmodel import Session, SQLModel
from sqlalchemy.orm import sessionmaker

from app.core.database import build_engine

# Import all models so they register on SQLModel.metadata
from app.models.database.scheduler_state import SchedulerStateRecord
from app.models.database.change_snapshot import ChangeSnapshotRecord


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture(name="clock")
def clock_fixture() -> FakeClock:
    return FakeClock(datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc))


@pytest.fixture(name="engine")
def engine_fixture():
    """Fresh in-memory database per test."""
    engine = build_engine("sqlite://")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="session_factory")
def session_factory_fixture(engine):
    """
    Auto-committing session context manager bound to the test engine.

    Same contract as app.core.database.get_db_session.
    """
    factory = sessionmaker(bind=engine, class_=Session, expire_on_commit=False)

    @contextmanager
    def _session() -> Generator[Session, None, None]:
        session = factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return _session


@pytest.fixture(name="db_session")
def db_session_fixture(engine) -> Generator[Session, None, None]:
    """Plain session for domain operation tests (rolled back afterwards)."""
    session = Session(engine)
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="session", autouse=True)
def _global_tables():
    """Create tables on the app's own in-memory engine (used by singletons)."""
    from app.core.database import init_db

    init_db()
