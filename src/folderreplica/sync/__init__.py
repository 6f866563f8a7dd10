"""
FolderReplica sync module.

Provides one-way replication of a source directory tree into a replica.
"""

from folderreplica.sync.apply import ApplyEngine, CopyPolicy
from folderreplica.sync.audit import (
    AuditChannel,
    AuditSink,
    MemoryAuditSink,
    NullAuditSink,
    build_audit_channel,
)
from folderreplica.sync.comparator import ContentComparator
from folderreplica.sync.diff import DirectoryDiff, EntryAction, diff_directory
from folderreplica.sync.entries import DirectoryListing, EntryNameSet, list_directory
from folderreplica.sync.filesystem import LocalFileSystem
from folderreplica.sync.scheduler import ReplicationScheduler, ScheduleReport
from folderreplica.sync.session import SyncSession, run_sync_pass, validate_roots
from folderreplica.sync.traversal import DirectoryState, TraversalEngine, WorkItem

__all__ = [
    "ApplyEngine",
    "CopyPolicy",
    "AuditChannel",
    "AuditSink",
    "MemoryAuditSink",
    "NullAuditSink",
    "build_audit_channel",
    "ContentComparator",
    "DirectoryDiff",
    "EntryAction",
    "diff_directory",
    "DirectoryListing",
    "EntryNameSet",
    "list_directory",
    "LocalFileSystem",
    "ReplicationScheduler",
    "ScheduleReport",
    "SyncSession",
    "run_sync_pass",
    "validate_roots",
    "DirectoryState",
    "TraversalEngine",
    "WorkItem",
]
