"""
Local file-system capability used by the sync engine.

All OS errors are translated into FolderReplica error kinds here, so the
rest of the engine never handles ``OSError`` directly.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

from folderreplica.core.exceptions import IOFailure, NotFound


class EntryKind(Enum):
    """Kind of a directory entry as seen by the engine."""

    FILE = auto()
    DIRECTORY = auto()
    OTHER = auto()
    """Symbolic link, socket, FIFO or device node"""


@dataclass(frozen=True)
class DirectoryEntry:
    name: str
    kind: EntryKind


@contextmanager
def translate_errors(path: Path, operation: str) -> Iterator[None]:
    """Map OS errors raised inside the block onto sync error kinds."""
    try:
        yield
    except FileNotFoundError as exc:
        raise NotFound(f"{operation}: {path} no longer exists", path, operation) from exc
    except OSError as exc:
        raise IOFailure(f"{operation} failed for {path}: {exc}", path, operation) from exc


class LocalFileSystem:
    """File-system operations over locally addressable paths."""

    def list_entries(self, path: Path, include_other: bool = False) -> list[DirectoryEntry]:
        """List the entries directly inside ``path``, sorted by name.

        Symbolic links and special files are skipped unless ``include_other``
        is set, in which case they are reported as ``EntryKind.OTHER``.
        """
        entries: list[DirectoryEntry] = []
        with translate_errors(path, "list"):
            with os.scandir(path) as scan:
                for item in scan:
                    if item.is_symlink():
                        kind = EntryKind.OTHER
                    elif item.is_dir(follow_symlinks=False):
                        kind = EntryKind.DIRECTORY
                    elif item.is_file(follow_symlinks=False):
                        kind = EntryKind.FILE
                    else:
                        kind = EntryKind.OTHER
                    if kind is EntryKind.OTHER and not include_other:
                        continue
                    entries.append(DirectoryEntry(item.name, kind))
        entries.sort(key=lambda entry: entry.name)
        return entries

    def has_entries(self, path: Path) -> bool:
        with translate_errors(path, "list"):
            with os.scandir(path) as scan:
                return any(True for _ in scan)

    def read_chunks(self, path: Path, chunk_size: int) -> Iterator[bytes]:
        with translate_errors(path, "read"):
            with path.open("rb") as handle:
                while chunk := handle.read(chunk_size):
                    yield chunk

    def exists(self, path: Path) -> bool:
        return os.path.lexists(path)

    def is_file(self, path: Path) -> bool:
        return path.is_file() and not path.is_symlink()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir() and not path.is_symlink()

    def create_directory(self, path: Path, parents: bool = False) -> None:
        with translate_errors(path, "create"):
            path.mkdir(parents=parents, exist_ok=True)

    def copy_file(self, source: Path, destination: Path) -> int:
        """Copy file content only and return the number of bytes written."""
        try:
            shutil.copyfile(source, destination)
        except FileNotFoundError as exc:
            # either side may be missing; the error names the one that is
            missing = Path(exc.filename) if exc.filename else source
            raise NotFound(
                f"copy {source} -> {destination}: {missing} no longer exists", missing, "copy"
            ) from exc
        except OSError as exc:
            failed = Path(exc.filename) if exc.filename else destination
            raise IOFailure(
                f"copy {source} -> {destination} failed: {exc}", failed, "copy"
            ) from exc
        with translate_errors(destination, "copy"):
            return destination.stat().st_size

    def delete_file(self, path: Path) -> None:
        with translate_errors(path, "delete"):
            path.unlink()

    def delete_tree(self, path: Path) -> None:
        with translate_errors(path, "delete"):
            shutil.rmtree(path)
