"""Domain operations for Change Snapshots.

Exactly one snapshot per workspace: replace() overwrites the previous one,
there is no history. No transaction management - callers own the session.
"""

import logging
from typing import Optional

from sqlmodel import Session, select

from app.models.database.change_snapshot import ChangeSnapshot, ChangeSnapshotRecord
from app.utils.time import ensure_utc

logger = logging.getLogger(__name__)


class ChangeSnapshotOperations:
    """Change Snapshot persistence. Static methods, sync session-based, no commits."""

    @staticmethod
    def get_by_workspace_id(
        session: Session,
        workspace_id: str
    ) -> Optional[ChangeSnapshotRecord]:
        statement = select(ChangeSnapshotRecord).where(ChangeSnapshotRecord.workspace_id == workspace_id)
        return session.exec(statement).first()

    @staticmethod
    def get_last(
        session: Session,
        workspace_id: str
    ) -> Optional[ChangeSnapshot]:
        """
        Get the last persisted snapshot for workspace.

        An unreadable row is treated as absent (the next check-in is then
        classified as first-run and overwrites it).
        """
        record = ChangeSnapshotOperations.get_by_workspace_id(session, workspace_id)
        if record is None:
            return None

        files = record.changed_files
        if not isinstance(files, list) or record.taken_at is None:
            logger.warning(f"Workspace {workspace_id}: stored snapshot unreadable, ignoring it")
            return None

        return ChangeSnapshot(
            taken_at=ensure_utc(record.taken_at),
            changed_files=frozenset(str(path) for path in files),
            summary=record.summary or "",
        )

    @staticmethod
    def replace(
        session: Session,
        workspace_id: str,
        snapshot: ChangeSnapshot
    ) -> ChangeSnapshotRecord:
        """
        Overwrite the workspace's snapshot with `snapshot`.

        Returns:
            Persisted ChangeSnapshotRecord
        """
        record = ChangeSnapshotOperations.get_by_workspace_id(session, workspace_id)
        if record is None:
            record = ChangeSnapshotRecord(workspace_id=workspace_id, taken_at=snapshot.taken_at)

        record.taken_at = snapshot.taken_at
        record.changed_files = sorted(snapshot.changed_files)
        record.summary = snapshot.summary

        session.add(record)
        session.flush()

        return record
