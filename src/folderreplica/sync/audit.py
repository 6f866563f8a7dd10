"""
Audit sinks for replica mutations.

Worker threads emit records; a single writer thread serializes them to the
configured destinations.
"""

from __future__ import annotations

import queue
import threading
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Protocol

import structlog

from folderreplica.core.logging import get_logger
from folderreplica.core.models import AuditKind, AuditRecord

logger = get_logger(__name__)

AuditWriter = Callable[[AuditRecord], None]


class AuditSink(Protocol):
    """Anything that accepts audit records."""

    def emit(self, record: AuditRecord) -> None: ...


class NullAuditSink:
    """Discards every record."""

    def emit(self, record: AuditRecord) -> None:
        return None


class MemoryAuditSink:
    """Keeps records in memory; safe to share between worker threads."""

    def __init__(self) -> None:
        self._records: list[AuditRecord] = []
        self._lock = threading.Lock()

    def emit(self, record: AuditRecord) -> None:
        with self._lock:
            self._records.append(record)

    @property
    def records(self) -> list[AuditRecord]:
        with self._lock:
            return list(self._records)

    def paths(self, kind: AuditKind | None = None) -> list[Path]:
        return [r.path for r in self.records if kind is None or r.kind is kind]

    def clear(self) -> None:
        with self._lock:
            self._records.clear()


class LogFileWriter:
    """Appends one line per record to a plain text audit log."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def __call__(self, record: AuditRecord) -> None:
        with open(self.path, "a", encoding="utf-8") as handle:
            handle.write(f"{record.timestamp.isoformat()} {record.message}\n")


class LoggerWriter:
    """Echoes records to the structured logger."""

    def __init__(self, audit_logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self.logger = audit_logger or get_logger("folderreplica.audit")

    def __call__(self, record: AuditRecord) -> None:
        self.logger.info(
            record.message,
            kind=record.kind.value,
            path=str(record.path),
            is_directory=record.is_directory,
        )


class AuditChannel:
    """Single serialized writer fed by a queue.

    Use as a context manager, or call ``start``/``close`` explicitly. Records
    emitted before ``close`` returns are all written.
    """

    def __init__(self, writers: Sequence[AuditWriter]) -> None:
        self._writers = list(writers)
        # None tells the writer thread to stop
        self._queue: queue.Queue[AuditRecord | None] = queue.Queue()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self.written = 0

    def start(self) -> AuditChannel:
        with self._lock:
            if self._thread is None:
                self._thread = threading.Thread(
                    target=self._drain,
                    name="audit-writer",
                    daemon=True,
                )
                self._thread.start()
        return self

    def emit(self, record: AuditRecord) -> None:
        if self._thread is None:
            self.start()
        self._queue.put(record)

    def close(self) -> None:
        with self._lock:
            thread, self._thread = self._thread, None
        if thread is None:
            return
        self._queue.put(None)
        thread.join()

    def __enter__(self) -> AuditChannel:
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _drain(self) -> None:
        while True:
            record = self._queue.get()
            if record is None:
                break
            for writer in self._writers:
                try:
                    writer(record)
                except Exception as e:
                    logger.warning("Audit writer error", error=str(e), path=str(record.path))
            self.written += 1


def build_audit_channel(log_file: Path | None, echo_to_logger: bool = True) -> AuditChannel:
    """Create a channel writing to ``log_file`` and, optionally, the logger."""
    writers: list[AuditWriter] = []
    if log_file is not None:
        writers.append(LogFileWriter(log_file))
    if echo_to_logger:
        writers.append(LoggerWriter())
    return AuditChannel(writers)
