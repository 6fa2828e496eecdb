"""
Database connection and session management.

Uses synchronous SQLAlchemy sessions over a single local engine.
Each workspace owns one scheduler_states row and one change_snapshots row.
"""

from typing import Callable, ContextManager, Generator
from contextlib import contextmanager
from sqlmodel import Session, SQLModel, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy import event
import logging

from app.core.config import settings

# Configure logger
logger = logging.getLogger(__name__)

SessionFactory = Callable[[], ContextManager[Session]]


def build_engine(database_url: str, **kwargs) -> Engine:
    """
    Create engine for the given URL.

    SQLite connections are shared between the event loop thread and the
    FastAPI thread pool, so same-thread checks are disabled.
    """
    connect_args = kwargs.pop("connect_args", {})
    if database_url.startswith("sqlite"):
        connect_args.setdefault("check_same_thread", False)
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every session sees an empty database
            kwargs.setdefault("poolclass", StaticPool)

    engine = create_engine(
        database_url,
        connect_args=connect_args,
        pool_pre_ping=True,
        echo=False,
        **kwargs,
    )

    if database_url.startswith("sqlite"):
        @event.listens_for(engine, "connect")
        def receive_connect(dbapi_conn, connection_record):  # noqa: ARG001
            """Enable WAL so readers never block the single writer."""
            cursor = dbapi_conn.cursor()
            try:
                cursor.execute("PRAGMA journal_mode=WAL")
            except Exception:
                logger.debug("Could not enable WAL journal mode (in-memory database?)")
            finally:
                cursor.close()

    return engine


engine = build_engine(settings.DATABASE_URL)

# expire_on_commit=False: rows are read into in-memory state objects and
# must stay readable after the session closes
SessionLocal = sessionmaker(
    bind=engine,
    class_=Session,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False
)


def init_db() -> None:
    """
    Create missing tables.

    Alembic owns the schema in deployed setups; this only fills in tables
    that do not exist yet so a fresh local database works out of the box.
    """
    # Import models so they register on SQLModel.metadata
    import app.models.database  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Database tables verified")


def get_db() -> Generator[Session, None, None]:
    # FastAPI dependency: one session per request, commit on success.
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions in non-FastAPI contexts.
    Used by the nudge scheduler (persist after every state mutation).
    Auto-commits on success, auto-rolls back on exception.
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()  # Auto-commit on success
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
