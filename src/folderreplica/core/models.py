"""
FolderReplica data models.

Defines the audit records, per-pass statistics and pass outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any


class AuditKind(Enum):
    """Kind of mutation applied to the replica."""

    CREATED = "Created"
    COPIED = "Copied"
    DELETED = "Deleted"


@dataclass(frozen=True)
class AuditRecord:
    """One completed mutation of the replica tree."""

    kind: AuditKind
    path: Path
    is_directory: bool = False
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def message(self) -> str:
        entry = "directory" if self.is_directory else "file"
        return f"{self.kind.value} {entry}: {self.path}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "path": str(self.path),
            "is_directory": self.is_directory,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class ApplyResult:
    """Result of a single Apply Engine call; ``kind`` is None when nothing was done."""

    path: Path
    kind: AuditKind | None = None
    bytes_copied: int = 0

    @property
    def performed(self) -> bool:
        return self.kind is not None


@dataclass
class SyncStats:
    """Counters for one pass."""

    directories_scanned: int = 0
    created: int = 0
    copied: int = 0
    deleted: int = 0
    unchanged: int = 0
    vanished: int = 0
    bytes_copied: int = 0

    @property
    def mutations(self) -> int:
        return self.created + self.copied + self.deleted

    def record(self, result: ApplyResult) -> None:
        if result.kind is AuditKind.CREATED:
            self.created += 1
        elif result.kind is AuditKind.COPIED:
            self.copied += 1
            self.bytes_copied += result.bytes_copied
        elif result.kind is AuditKind.DELETED:
            self.deleted += 1
        else:
            self.unchanged += 1

    def to_dict(self) -> dict[str, int]:
        return {
            "directories_scanned": self.directories_scanned,
            "created": self.created,
            "copied": self.copied,
            "deleted": self.deleted,
            "unchanged": self.unchanged,
            "vanished": self.vanished,
            "bytes_copied": self.bytes_copied,
            "mutations": self.mutations,
        }


@dataclass
class SyncOutcome:
    """Result of a completed or aborted pass."""

    success: bool
    source_root: Path
    replica_root: Path
    stats: SyncStats = field(default_factory=SyncStats)
    error: Exception | None = None
    error_traceback: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None

    @property
    def duration_seconds(self) -> float | None:
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "source_root": str(self.source_root),
            "replica_root": str(self.replica_root),
            "stats": self.stats.to_dict(),
            "error": str(self.error) if self.error else None,
            "error_type": type(self.error).__name__ if self.error else None,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_seconds": self.duration_seconds,
        }
