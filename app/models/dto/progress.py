"""
Progress classification DTOs.

Derived from two change snapshots on every check-in; never persisted.
"""

from enum import Enum
from typing import FrozenSet, List

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class ProgressClassification(str, Enum):
    """Outcome of comparing the previous and current change snapshots."""

    FIRST_RUN = "first-run"
    STUCK = "stuck"
    PROGRESSING = "progressing"
    INACTIVE = "inactive"


class ProgressResult(BaseModel):
    """Comparison of two changed-file sets."""

    model_config = ConfigDict(frozen=True)

    has_changes: bool = Field(description="Current snapshot lists at least one changed file")
    new_files: FrozenSet[str] = Field(default=frozenset(), description="In current, not in previous")
    removed_files: FrozenSet[str] = Field(default=frozenset(), description="In previous, not in current")
    is_stuck: bool = Field(description="Changed-file sets are exactly equal")
    classification: ProgressClassification

    @field_serializer("new_files", "removed_files")
    def _serialize_files(self, files: FrozenSet[str]) -> List[str]:
        return sorted(files)
