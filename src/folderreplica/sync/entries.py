"""
Entry name sets for one directory level.

Membership tests scan a tuple for small directories and switch to a hash
set once the number of names exceeds the configured threshold.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from folderreplica.sync.filesystem import EntryKind, LocalFileSystem

DEFAULT_HASH_SET_THRESHOLD = 20


class EntryNameSet:
    """Ordered base names with a size-dependent membership strategy."""

    __slots__ = ("_names", "_index")

    def __init__(
        self,
        names: Iterable[str] = (),
        threshold: int = DEFAULT_HASH_SET_THRESHOLD,
    ) -> None:
        self._names: tuple[str, ...] = tuple(names)
        self._index: frozenset[str] | None = (
            frozenset(self._names) if len(self._names) > threshold else None
        )

    @property
    def uses_hash_set(self) -> bool:
        return self._index is not None

    def __contains__(self, name: object) -> bool:
        if self._index is not None:
            return name in self._index
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __bool__(self) -> bool:
        return bool(self._names)

    def __repr__(self) -> str:
        strategy = "hash" if self.uses_hash_set else "linear"
        return f"EntryNameSet({list(self._names)!r}, strategy={strategy})"


@dataclass(frozen=True)
class DirectoryListing:
    """Entries of one directory at one point in time.

    ``others`` holds symbolic links and special files; it is only filled for
    replica listings, where such entries are always removed.
    """

    path: Path
    files: EntryNameSet
    directories: EntryNameSet
    others: EntryNameSet = field(default_factory=EntryNameSet)

    @property
    def is_empty(self) -> bool:
        return not self.files and not self.directories and not self.others

    def __len__(self) -> int:
        return len(self.files) + len(self.directories) + len(self.others)


def list_directory(
    fs: LocalFileSystem,
    path: Path,
    threshold: int = DEFAULT_HASH_SET_THRESHOLD,
    include_other: bool = False,
) -> DirectoryListing:
    """Build a fresh listing of ``path``.

    Symbolic links and special files are collected into ``others`` when
    ``include_other`` is set and skipped otherwise.
    """
    names: dict[EntryKind, list[str]] = {kind: [] for kind in EntryKind}
    for entry in fs.list_entries(path, include_other=include_other):
        names[entry.kind].append(entry.name)
    return DirectoryListing(
        path=path,
        files=EntryNameSet(names[EntryKind.FILE], threshold),
        directories=EntryNameSet(names[EntryKind.DIRECTORY], threshold),
        others=EntryNameSet(names[EntryKind.OTHER], threshold),
    )
