"""
Progress Classifier

Compares two change snapshots by file identity only (set equality of
changed paths, never diff content). Same files with real edits inside
them read as "stuck"; that false negative is accepted.
"""
from typing import Optional

from app.models.database.change_snapshot import ChangeSnapshot
from app.models.dto.progress import ProgressClassification, ProgressResult


def classify_progress(
    previous: Optional[ChangeSnapshot],
    current: ChangeSnapshot,
) -> ProgressResult:
    """
    Classify progress between the last stored snapshot and the current one.

    Precedence (first match wins):
        no previous snapshot          -> first-run
        same set, set non-empty       -> stuck
        same set, set empty           -> inactive
        any file added                -> progressing
        files only removed            -> progressing

    Args:
        previous: Last persisted snapshot (None on the very first check-in)
        current: Freshly captured snapshot

    Returns:
        ProgressResult (derived, not persisted)
    """
    current_files = frozenset(current.changed_files)
    has_changes = len(current_files) > 0

    if previous is None:
        return ProgressResult(
            has_changes=has_changes,
            new_files=current_files,
            removed_files=frozenset(),
            is_stuck=False,
            classification=ProgressClassification.FIRST_RUN,
        )

    previous_files = frozenset(previous.changed_files)
    new_files = current_files - previous_files
    removed_files = previous_files - current_files
    is_stuck = current_files == previous_files

    if is_stuck and current_files:
        classification = ProgressClassification.STUCK
    elif is_stuck:
        classification = ProgressClassification.INACTIVE
    elif new_files:
        classification = ProgressClassification.PROGRESSING
    else:
        # Shrinking set (revert or refactor) is not told apart from progress
        classification = ProgressClassification.PROGRESSING

    return ProgressResult(
        has_changes=has_changes,
        new_files=new_files,
        removed_files=removed_files,
        is_stuck=is_stuck,
        classification=classification,
    )
