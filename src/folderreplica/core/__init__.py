"""
FolderReplica Core - shared service layer.

Contains configuration, logging, error kinds and data models used by the
sync engine and the CLI.
"""

from folderreplica.core.config import FolderReplicaConfig, SyncConfig
from folderreplica.core.exceptions import (
    InvalidRootError,
    IOFailure,
    NotAFile,
    NotFound,
    SyncError,
)
from folderreplica.core.logging import get_logger, setup_logging
from folderreplica.core.models import AuditKind, AuditRecord, SyncOutcome, SyncStats

__all__ = [
    "FolderReplicaConfig",
    "SyncConfig",
    "SyncError",
    "IOFailure",
    "NotFound",
    "NotAFile",
    "InvalidRootError",
    "get_logger",
    "setup_logging",
    "AuditKind",
    "AuditRecord",
    "SyncOutcome",
    "SyncStats",
]
