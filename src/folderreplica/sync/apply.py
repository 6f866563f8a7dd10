"""
Apply Engine: single mutations of the replica tree.

Each operation reports to the audit sink once it has succeeded. Nothing here
retries; a failed operation is simply re-attempted by the next pass.
"""

from __future__ import annotations

from enum import Enum, auto
from pathlib import Path

from folderreplica.core.exceptions import IOFailure, NotFound
from folderreplica.core.logging import get_logger
from folderreplica.core.models import ApplyResult, AuditKind, AuditRecord
from folderreplica.sync.audit import AuditSink, NullAuditSink
from folderreplica.sync.filesystem import LocalFileSystem

logger = get_logger(__name__)


class CopyPolicy(Enum):
    """What to do when the copy destination already exists."""

    OVERWRITE = auto()
    SKIP_IF_EXISTS = auto()


class ApplyEngine:
    """Performs deletions, copies and directory creation on the replica."""

    def __init__(
        self,
        fs: LocalFileSystem | None = None,
        sink: AuditSink | None = None,
    ) -> None:
        self.fs = fs or LocalFileSystem()
        self.sink = sink or NullAuditSink()

    def create_directory(self, path: Path, parents: bool = False) -> ApplyResult:
        if self.fs.exists(path):
            if not self.fs.is_dir(path):
                raise IOFailure(f"create: {path} exists and is not a directory", path, "create")
            return ApplyResult(path=path)

        self.fs.create_directory(path, parents=parents)
        self._report(AuditKind.CREATED, path, is_directory=True)
        return ApplyResult(path=path, kind=AuditKind.CREATED)

    def copy_file(
        self,
        source: Path,
        destination: Path,
        policy: CopyPolicy = CopyPolicy.OVERWRITE,
    ) -> ApplyResult:
        """Copy ``source`` over ``destination``.

        With ``SKIP_IF_EXISTS`` an existing destination is left untouched,
        which keeps repeated copy calls idempotent.
        """
        if policy is CopyPolicy.SKIP_IF_EXISTS and self.fs.exists(destination):
            return ApplyResult(path=destination)

        size = self.fs.copy_file(source, destination)
        self._report(AuditKind.COPIED, destination)
        return ApplyResult(path=destination, kind=AuditKind.COPIED, bytes_copied=size)

    def delete_entry(self, path: Path) -> ApplyResult:
        """Delete a file, or a directory with all of its contents."""
        if self.fs.is_dir(path):
            self.fs.delete_tree(path)
            self._report(AuditKind.DELETED, path, is_directory=True)
        elif self.fs.exists(path):
            self.fs.delete_file(path)
            self._report(AuditKind.DELETED, path)
        else:
            raise NotFound(f"delete: {path} no longer exists", path, "delete")
        return ApplyResult(path=path, kind=AuditKind.DELETED)

    def _report(self, kind: AuditKind, path: Path, is_directory: bool = False) -> None:
        record = AuditRecord(kind=kind, path=path, is_directory=is_directory)
        logger.debug("Replica mutated", kind=kind.value, path=str(path))
        self.sink.emit(record)
