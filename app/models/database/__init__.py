"""Database models: import all models to ensure proper registration."""

from app.models.database.scheduler_state import (
    BlockerType,
    SchedulerState,
    SchedulerStateRecord,
)
from app.models.database.change_snapshot import ChangeSnapshot, ChangeSnapshotRecord

__all__ = [
    "BlockerType",
    "SchedulerState",
    "SchedulerStateRecord",
    "ChangeSnapshot",
    "ChangeSnapshotRecord",
]
