"""
Replication scheduler.

Re-runs a sync pass on a fixed interval until stopped. A stop request never
interrupts a pass; it takes effect once the running pass has finished.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from folderreplica.core.config import SyncConfig
from folderreplica.core.logging import get_logger
from folderreplica.core.models import SyncOutcome
from folderreplica.sync.audit import AuditSink
from folderreplica.sync.session import SyncSession

logger = get_logger(__name__)

PassCallback = Callable[[int, SyncOutcome], None]


@dataclass
class ScheduleReport:
    passes: int = 0
    failures: int = 0
    last_outcome: SyncOutcome | None = None


class ReplicationScheduler:
    """Runs passes back to back, spaced by ``interval_seconds``."""

    def __init__(
        self,
        source_root: Path,
        replica_root: Path,
        config: SyncConfig | None = None,
        audit_sink: AuditSink | None = None,
        on_pass_complete: PassCallback | None = None,
    ) -> None:
        self.source_root = source_root
        self.replica_root = replica_root
        self.config = config or SyncConfig()
        self.audit_sink = audit_sink
        self.on_pass_complete = on_pass_complete
        self._stop = threading.Event()

    @property
    def stop_requested(self) -> bool:
        return self._stop.is_set()

    def stop(self) -> None:
        """Request the loop to end after the current pass."""
        self._stop.set()

    def run(self, max_passes: int | None = None) -> ScheduleReport:
        report = ScheduleReport()

        while not self._stop.is_set():
            started = time.monotonic()
            outcome = SyncSession(
                self.source_root,
                self.replica_root,
                config=self.config,
                audit_sink=self.audit_sink,
            ).run()

            report.passes += 1
            report.last_outcome = outcome
            if not outcome.success:
                report.failures += 1
                logger.error(
                    "Sync pass failed; retrying on next interval",
                    pass_number=report.passes,
                    error=str(outcome.error),
                )

            if self.on_pass_complete is not None:
                try:
                    self.on_pass_complete(report.passes, outcome)
                except Exception as e:
                    logger.warning("Pass callback error", error=str(e))

            if max_passes is not None and report.passes >= max_passes:
                break

            remaining = self.config.interval_seconds - (time.monotonic() - started)
            if remaining > 0 and self._stop.wait(remaining):
                break

        logger.info("Scheduler stopped", passes=report.passes, failures=report.failures)
        return report
