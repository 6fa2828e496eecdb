"""Change-set providers and the snapshotter."""

from app.services.changes.base import ChangeSetProvider, StaticChangeProvider, describe_changed_files
from app.services.changes.git_provider import GitChangeProvider
from app.services.changes.snapshotter import ChangeSnapshotter

__all__ = [
    "ChangeSetProvider",
    "StaticChangeProvider",
    "describe_changed_files",
    "GitChangeProvider",
    "ChangeSnapshotter",
]
