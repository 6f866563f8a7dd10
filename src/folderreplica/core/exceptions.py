"""
FolderReplica error kinds.

Every failure raised by the file-system layer is translated into one of
these so the traversal can decide what is tolerated and what aborts a pass.
"""

from __future__ import annotations

from pathlib import Path


class SyncError(Exception):
    """Base class for all replication errors."""

    def __init__(self, message: str, path: Path | str | None = None, operation: str = "") -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None
        self.operation = operation


class IOFailure(SyncError):
    """A read, write, create or delete failed for an OS-level reason."""


class NotFound(SyncError):
    """An entry vanished between enumeration and the operation on it."""


class NotAFile(SyncError):
    """Content comparison was attempted on something that is not a regular file."""


class InvalidRootError(SyncError):
    """Source or replica root cannot be used for a pass."""
