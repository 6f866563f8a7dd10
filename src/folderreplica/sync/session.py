"""
Sync Session: one complete pass over the source tree.

A session keeps no state between passes; every run recomputes everything
from the two trees as they are now.
"""

from __future__ import annotations

import traceback
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path

from folderreplica.core.config import SyncConfig
from folderreplica.core.exceptions import InvalidRootError
from folderreplica.core.logging import OperationLogger, get_logger
from folderreplica.core.models import SyncOutcome, SyncStats
from folderreplica.sync.apply import ApplyEngine
from folderreplica.sync.audit import AuditSink, NullAuditSink
from folderreplica.sync.comparator import ContentComparator
from folderreplica.sync.filesystem import LocalFileSystem
from folderreplica.sync.traversal import TraversalEngine, WorkItem

logger = get_logger(__name__)


def _is_relative_to(child: Path, parent: Path) -> bool:
    try:
        child.relative_to(parent)
        return True
    except ValueError:
        return False


def validate_roots(source_root: Path, replica_root: Path) -> tuple[Path, Path]:
    """Resolve both roots and reject combinations a pass cannot handle."""
    source = Path(source_root).expanduser().resolve()
    replica = Path(replica_root).expanduser().resolve()

    if not source.is_dir():
        raise InvalidRootError(f"Source is not a directory: {source}", source, "validate")
    if replica.exists() and not replica.is_dir():
        raise InvalidRootError(f"Replica is not a directory: {replica}", replica, "validate")
    if source == replica:
        raise InvalidRootError("Source and replica must be different directories", replica, "validate")
    if _is_relative_to(replica, source):
        raise InvalidRootError(f"Replica {replica} is inside source {source}", replica, "validate")
    if _is_relative_to(source, replica):
        raise InvalidRootError(f"Source {source} is inside replica {replica}", source, "validate")

    return source, replica


class SyncSession:
    """Runs a single pass reconciling the replica tree with the source tree."""

    def __init__(
        self,
        source_root: Path,
        replica_root: Path,
        config: SyncConfig | None = None,
        audit_sink: AuditSink | None = None,
        filesystem: LocalFileSystem | None = None,
    ) -> None:
        self.source_root = Path(source_root)
        self.replica_root = Path(replica_root)
        self.config = config or SyncConfig()
        self.audit_sink = audit_sink or NullAuditSink()
        self.fs = filesystem or LocalFileSystem()

    def run(self) -> SyncOutcome:
        """Run the pass; failures are returned in the outcome, not raised."""
        stats = SyncStats()
        outcome = SyncOutcome(
            success=False,
            source_root=self.source_root,
            replica_root=self.replica_root,
            stats=stats,
            start_time=datetime.now(),
        )

        try:
            with OperationLogger(
                "sync pass",
                logger,
                source=str(self.source_root),
                replica=str(self.replica_root),
            ) as op:
                self._run(stats)
                op.update(**stats.to_dict())
            outcome.success = True
        except Exception as e:
            outcome.error = e
            outcome.error_traceback = traceback.format_exc()
        finally:
            outcome.end_time = datetime.now()

        return outcome

    def _run(self, stats: SyncStats) -> None:
        source_root, replica_root = validate_roots(self.source_root, self.replica_root)
        apply = ApplyEngine(self.fs, self.audit_sink)

        if not self.fs.exists(replica_root):
            stats.record(apply.create_directory(replica_root, parents=True))

        if self.fs.has_entries(replica_root):
            root = WorkItem.existing(source_root)
        else:
            root = WorkItem.fresh(source_root)

        comparator = ContentComparator(
            self.fs,
            algorithm=self.config.digest_algorithm,
            chunk_size=self.config.chunk_size_bytes,
        )

        with ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix="folderreplica",
        ) as executor:
            engine = TraversalEngine(
                source_root,
                replica_root,
                apply=apply,
                comparator=comparator,
                executor=executor,
                fs=self.fs,
                hash_set_threshold=self.config.hash_set_threshold,
                stats=stats,
            )
            engine.drain([root])


def run_sync_pass(
    source_root: Path,
    replica_root: Path,
    *,
    config: SyncConfig | None = None,
    audit_sink: AuditSink | None = None,
    filesystem: LocalFileSystem | None = None,
) -> SyncOutcome:
    """Reconcile ``replica_root`` with ``source_root`` once."""
    return SyncSession(
        source_root,
        replica_root,
        config=config,
        audit_sink=audit_sink,
        filesystem=filesystem,
    ).run()
