"""
Diff Engine: per-directory classification of replica and source entries.

Only one directory level is compared at a time. Content checks are left to
the caller; ``verify`` names must be resolved with ``resolve_verification``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from folderreplica.sync.entries import DirectoryListing


class EntryAction(str, Enum):
    """Classification of a single entry name."""

    DELETE = "delete"
    """Remove the replica entry"""

    VERIFY = "verify"
    """Same name on both sides; compare content before deciding"""

    KEEP = "keep"
    """Replica entry is up to date"""


@dataclass
class DirectoryDiff:
    """Classification of one directory level.

    Every name in ``copy`` is copied only if the replica lacks it once
    ``delete`` and ``verify`` have been applied.
    """

    delete: list[str] = field(default_factory=list)
    verify: list[str] = field(default_factory=list)
    copy: list[str] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return not self.delete and not self.verify and not self.copy


@dataclass(frozen=True)
class ChildDirectory:
    """A source subdirectory to reconcile next."""

    name: str
    fresh: bool


def diff_directory(source: DirectoryListing, replica: DirectoryListing) -> DirectoryDiff:
    """Classify the entries of one source directory and its replica."""
    diff = DirectoryDiff()

    if source.is_empty:
        diff.delete.extend(replica.files)
        diff.delete.extend(replica.directories)
        diff.delete.extend(replica.others)
        return diff

    for name in replica.files:
        if name in source.files:
            diff.verify.append(name)
        else:
            diff.delete.append(name)

    for name in replica.directories:
        if name not in source.directories:
            diff.delete.append(name)

    # links and special files never match a source entry, whatever their name
    diff.delete.extend(replica.others)

    diff.copy.extend(source.files)
    return diff


def resolve_verification(contents_equal: bool) -> EntryAction:
    """Turn a content check of a ``verify`` name into its final action."""
    return EntryAction.KEEP if contents_equal else EntryAction.DELETE


def classify_subdirectories(
    source: DirectoryListing,
    replica: DirectoryListing,
) -> list[ChildDirectory]:
    """Split source subdirectories into existing and freshly created ones."""
    return [
        ChildDirectory(name=name, fresh=name not in replica.directories)
        for name in source.directories
    ]
