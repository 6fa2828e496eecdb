"""Tests for the single stored change snapshot per workspace."""
from datetime import datetime, timedelta, timezone

from app.domain.change_snapshot_operations import ChangeSnapshotOperations
from app.models.database.change_snapshot import ChangeSnapshot, ChangeSnapshotRecord

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def test_no_snapshot_yet(db_session):
    assert ChangeSnapshotOperations.get_last(db_session, "ws-1") is None


def test_replace_and_read_back(db_session):
    snapshot = ChangeSnapshot(taken_at=NOW, changed_files=frozenset({"b.py", "a.py"}), summary="Changed files: a.py, b.py.")

    record = ChangeSnapshotOperations.replace(db_session, "ws-1", snapshot)
    loaded = ChangeSnapshotOperations.get_last(db_session, "ws-1")

    assert record.changed_files == ["a.py", "b.py"]
    assert loaded == snapshot
    assert loaded.taken_at.tzinfo is not None


def test_replace_keeps_only_latest(db_session):
    ChangeSnapshotOperations.replace(db_session, "ws-1", ChangeSnapshot(taken_at=NOW, changed_files=frozenset({"a.py"})))
    ChangeSnapshotOperations.replace(
        db_session, "ws-1", ChangeSnapshot(taken_at=NOW + timedelta(minutes=15), changed_files=frozenset())
    )

    rows = db_session.query(ChangeSnapshotRecord).filter(ChangeSnapshotRecord.workspace_id == "ws-1").all()
    loaded = ChangeSnapshotOperations.get_last(db_session, "ws-1")

    assert len(rows) == 1
    assert loaded.changed_files == frozenset()
    assert loaded.taken_at == NOW + timedelta(minutes=15)


def test_workspaces_are_isolated(db_session):
    ChangeSnapshotOperations.replace(db_session, "ws-1", ChangeSnapshot(taken_at=NOW, changed_files=frozenset({"a.py"})))

    assert ChangeSnapshotOperations.get_last(db_session, "ws-2") is None


def test_unreadable_row_treated_as_absent(db_session):
    db_session.add(ChangeSnapshotRecord(workspace_id="ws-1", taken_at=NOW, changed_files={"not": "a list"}))
    db_session.flush()

    assert ChangeSnapshotOperations.get_last(db_session, "ws-1") is None
