"""Change Snapshot model - last captured set of modified files per workspace."""

from datetime import datetime
from typing import FrozenSet, List
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field as PydanticField, field_serializer
from sqlalchemy import Column, JSON
from sqlmodel import Field

from app.models.database.mixins.timestamp import TimestampMixin
from app.utils.time import utcnow


class ChangeSnapshot(BaseModel):
    """
    Point-in-time fingerprint of modified files.

    changed_files is a set: duplicates collapse and order is irrelevant.
    summary is advisory text and never takes part in comparisons.
    """

    model_config = ConfigDict(frozen=True)

    taken_at: datetime = PydanticField(default_factory=utcnow)
    changed_files: FrozenSet[str] = frozenset()
    summary: str = ""

    @field_serializer("changed_files")
    def _serialize_files(self, files: FrozenSet[str]) -> List[str]:
        return sorted(files)


class ChangeSnapshotRecord(TimestampMixin, table=True):
    """Persisted last snapshot. One row per workspace, replaced on every check-in."""
    __tablename__ = "change_snapshots"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    workspace_id: str = Field(max_length=255, unique=True, index=True, description="Owning workspace")
    taken_at: datetime = Field(nullable=False, description="When the snapshot was captured")
    changed_files: List[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Sorted list of changed paths"
    )
    summary: str = Field(default="", description="Human-readable change description")
