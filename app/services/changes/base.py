"""
Base class for change-set providers.

A provider enumerates the files modified in a workspace and describes them
in one line. Providers may fail by raising ChangeProviderError; the
snapshotter turns any failure into an empty change set.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional, Set


def describe_changed_files(changed_files: Iterable[str]) -> str:
    """One-line description of a changed-file list (at most three names)."""
    files = sorted(changed_files)

    if not files:
        return "No changes in Git."

    if len(files) <= 3:
        return f"Changed files: {', '.join(files)}."

    return f"{len(files)} files changed, including: {', '.join(files[:3])} and others."


class ChangeSetProvider(ABC):
    """Abstract source of changed files for one workspace."""

    @abstractmethod
    async def enumerate_changed_files(self) -> Set[str]:
        """
        Return the set of currently modified paths.

        Raises:
            ChangeProviderError: provider unavailable
        """
        pass

    async def describe_changes(self, changed_files: Optional[Iterable[str]] = None) -> str:
        """
        Human-readable summary of a change set.

        Describes `changed_files` when given (an already captured set),
        otherwise enumerates the current one.
        """
        if changed_files is None:
            changed_files = await self.enumerate_changed_files()
        return describe_changed_files(changed_files)


class StaticChangeProvider(ChangeSetProvider):
    """
    Provider with a fixed, replaceable change set.

    Used for workspaces without a configured repository root and as the
    test double for snapshot/scheduler tests.
    """

    def __init__(self, changed_files: Iterable[str] = ()):
        self.changed_files: Set[str] = set(changed_files)

    def set_changed_files(self, changed_files: Iterable[str]) -> None:
        self.changed_files = set(changed_files)

    async def enumerate_changed_files(self) -> Set[str]:
        return set(self.changed_files)
