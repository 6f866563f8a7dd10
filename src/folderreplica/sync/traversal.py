"""
Traversal Engine.

Walks the source tree with an explicit stack of work items instead of
recursion. Each item carries whether its replica directory is freshly
created; fresh subtrees are copied without any diffing or deletion.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Executor, as_completed
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

from folderreplica.core.exceptions import NotFound
from folderreplica.core.logging import get_logger
from folderreplica.core.models import ApplyResult, SyncStats
from folderreplica.sync.apply import ApplyEngine, CopyPolicy
from folderreplica.sync.comparator import ContentComparator
from folderreplica.sync.diff import (
    EntryAction,
    classify_subdirectories,
    diff_directory,
    resolve_verification,
)
from folderreplica.sync.entries import (
    DEFAULT_HASH_SET_THRESHOLD,
    DirectoryListing,
    list_directory,
)
from folderreplica.sync.filesystem import LocalFileSystem

logger = get_logger(__name__)

Task = Callable[[], ApplyResult | None]


class DirectoryState(Enum):
    """Whether a replica directory is known to be new in this pass."""

    FRESH = auto()
    EXISTING = auto()


class WorkState(Enum):
    """Lifecycle of a work item within one pass."""

    PENDING = auto()
    PROCESSING = auto()
    DONE = auto()


@dataclass(frozen=True)
class WorkItem:
    """One source directory still to be reconciled."""

    source_path: Path
    state: DirectoryState

    @property
    def is_fresh(self) -> bool:
        return self.state is DirectoryState.FRESH

    @classmethod
    def fresh(cls, source_path: Path) -> WorkItem:
        return cls(source_path, DirectoryState.FRESH)

    @classmethod
    def existing(cls, source_path: Path) -> WorkItem:
        return cls(source_path, DirectoryState.EXISTING)


class TraversalEngine:
    """Drains the work stack for one pass."""

    def __init__(
        self,
        source_root: Path,
        replica_root: Path,
        apply: ApplyEngine,
        comparator: ContentComparator,
        executor: Executor,
        fs: LocalFileSystem | None = None,
        hash_set_threshold: int = DEFAULT_HASH_SET_THRESHOLD,
        stats: SyncStats | None = None,
    ) -> None:
        self.source_root = source_root
        self.replica_root = replica_root
        self.apply = apply
        self.comparator = comparator
        self.executor = executor
        self.fs = fs or apply.fs
        self.hash_set_threshold = hash_set_threshold
        self.stats = stats or SyncStats()

    def replica_path_for(self, source_path: Path) -> Path:
        relative = source_path.relative_to(self.source_root)
        if not relative.parts:
            return self.replica_root
        return self.replica_root / relative

    def drain(self, stack: list[WorkItem]) -> SyncStats:
        """Pop and reconcile work items until the stack is empty."""
        for item in stack:
            self._transition(item, WorkState.PENDING)
        while stack:
            item = stack.pop()
            self._transition(item, WorkState.PROCESSING)
            try:
                children = self.process(item)
            except NotFound as exc:
                # directory removed from under us after its parent was listed
                self.stats.vanished += 1
                logger.warning(
                    "Directory vanished during sync",
                    path=str(exc.path),
                    operation=exc.operation,
                )
                children = []
            for child in children:
                self._transition(child, WorkState.PENDING)
            stack.extend(children)
            self._transition(item, WorkState.DONE, children=len(children))
        return self.stats

    def process(self, item: WorkItem) -> list[WorkItem]:
        """Reconcile one directory and return the work items for its children."""
        replica_dir = self.replica_path_for(item.source_path)
        self.stats.directories_scanned += 1

        if item.is_fresh and item.source_path != self.source_root:
            return self._process_fresh(item.source_path, replica_dir)
        return self._process_existing(item.source_path, replica_dir)

    def _process_fresh(self, source_dir: Path, replica_dir: Path) -> list[WorkItem]:
        source = self._list(source_dir)

        created = self.apply.create_directory(replica_dir)
        if created.performed:
            self.stats.record(created)
        self._run_parallel(
            [
                self._copy_task(source_dir / name, replica_dir / name, CopyPolicy.OVERWRITE)
                for name in source.files
            ]
        )
        return [WorkItem.fresh(source_dir / name) for name in source.directories]

    def _process_existing(self, source_dir: Path, replica_dir: Path) -> list[WorkItem]:
        source = self._list(source_dir)
        replica = self._list(replica_dir, include_other=True)
        diff = diff_directory(source, replica)

        if diff.is_noop:
            logger.debug("Directory has no file changes", replica=str(replica_dir))
        else:
            # Deletions are joined before copies so the two never race on one name.
            removal_tasks = [self._delete_task(replica_dir / name) for name in diff.delete]
            removal_tasks += [
                self._verify_task(source_dir / name, replica_dir / name) for name in diff.verify
            ]
            self._run_parallel(removal_tasks)

            self._run_parallel(
                [
                    self._copy_task(
                        source_dir / name, replica_dir / name, CopyPolicy.SKIP_IF_EXISTS
                    )
                    for name in diff.copy
                ]
            )

        children: list[WorkItem] = []
        for child in classify_subdirectories(source, replica):
            path = source_dir / child.name
            children.append(WorkItem.fresh(path) if child.fresh else WorkItem.existing(path))
        return children

    def _list(self, path: Path, include_other: bool = False) -> DirectoryListing:
        return list_directory(self.fs, path, self.hash_set_threshold, include_other)

    def _delete_task(self, path: Path) -> Task:
        return lambda: self.apply.delete_entry(path)

    def _copy_task(self, source: Path, destination: Path, policy: CopyPolicy) -> Task:
        return lambda: self.apply.copy_file(source, destination, policy)

    def _verify_task(self, source_file: Path, replica_file: Path) -> Task:
        def verify() -> ApplyResult | None:
            equal = self.comparator.contents_equal(source_file, replica_file)
            if resolve_verification(equal) is EntryAction.DELETE:
                return self.apply.delete_entry(replica_file)
            # kept; the skipped copy that follows accounts for it
            return None

        return verify

    def _run_parallel(self, tasks: list[Task]) -> None:
        """Run tasks on the pool, wait for all of them, then raise the first failure."""
        if not tasks:
            return

        futures = [self.executor.submit(task) for task in tasks]
        first_error: BaseException | None = None

        for future in as_completed(futures):
            try:
                result = future.result()
            except NotFound as exc:
                self.stats.vanished += 1
                logger.warning(
                    "Entry vanished during sync",
                    path=str(exc.path),
                    operation=exc.operation,
                )
            except Exception as exc:
                if first_error is None:
                    first_error = exc
            else:
                if result is not None:
                    self.stats.record(result)

        if first_error is not None:
            raise first_error

    def _transition(self, item: WorkItem, state: WorkState, **context: object) -> None:
        logger.debug(
            "Work item transition",
            source=str(item.source_path),
            directory_state=item.state.name,
            work_state=state.name,
            **context,
        )
