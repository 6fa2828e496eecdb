"""
Change-Set Snapshotter

Captures point-in-time change snapshots through a ChangeSetProvider and
stores the single "last snapshot" per workspace.

Fail-open: a provider failure yields an empty snapshot. A false
"no changes" under-triggers nudges, which is the safer direction.
"""
import logging
from datetime import datetime
from typing import Callable, Optional

from app.core.database import SessionFactory, get_db_session
from app.domain.change_snapshot_operations import ChangeSnapshotOperations
from app.models.database.change_snapshot import ChangeSnapshot
from app.services.changes.base import ChangeSetProvider, describe_changed_files
from app.utils.time import utcnow

logger = logging.getLogger(__name__)


class ChangeSnapshotter:
    """Capture / persist / last for one workspace's change snapshots."""

    def __init__(
        self,
        workspace_id: str,
        provider: ChangeSetProvider,
        session_factory: SessionFactory = get_db_session,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.workspace_id = workspace_id
        self.provider = provider
        self._session_factory = session_factory
        self._clock = clock

    async def capture(self) -> ChangeSnapshot:
        """
        Capture the current change set. Never raises for provider failures.
        """
        taken_at = self._clock()
        try:
            changed_files = frozenset(await self.provider.enumerate_changed_files())
        except Exception as e:
            logger.warning(
                f"Workspace {self.workspace_id}: change provider failed ({e}), "
                "treating change set as empty"
            )
            return ChangeSnapshot(
                taken_at=taken_at,
                changed_files=frozenset(),
                summary=describe_changed_files(()),
            )

        try:
            summary = await self.provider.describe_changes(changed_files)
        except Exception as e:
            logger.warning(f"Workspace {self.workspace_id}: could not describe changes ({e})")
            summary = describe_changed_files(changed_files)

        return ChangeSnapshot(taken_at=taken_at, changed_files=changed_files, summary=summary)

    def persist(self, snapshot: ChangeSnapshot) -> None:
        """Overwrite the stored snapshot with `snapshot`."""
        with self._session_factory() as session:
            ChangeSnapshotOperations.replace(session, self.workspace_id, snapshot)
        logger.debug(
            f"Workspace {self.workspace_id}: snapshot persisted ({len(snapshot.changed_files)} files)"
        )

    def last(self) -> Optional[ChangeSnapshot]:
        """
        Return the stored snapshot, or None if absent or unreadable.
        """
        try:
            with self._session_factory() as session:
                return ChangeSnapshotOperations.get_last(session, self.workspace_id)
        except Exception as e:
            logger.error(
                f"Workspace {self.workspace_id}: failed to read last snapshot - {e}",
                exc_info=True
            )
            return None
