"""
Tests for folderreplica.sync.apply module.
"""

from pathlib import Path

import pytest

from folderreplica.core.exceptions import IOFailure, NotFound
from folderreplica.core.models import AuditKind
from folderreplica.sync.apply import ApplyEngine, CopyPolicy
from folderreplica.sync.audit import MemoryAuditSink


@pytest.fixture
def engine(memory_sink: MemoryAuditSink) -> ApplyEngine:
    return ApplyEngine(sink=memory_sink)


class TestCreateDirectory:
    """Tests for ApplyEngine.create_directory."""

    def test_creates_and_reports(self, engine: ApplyEngine, memory_sink, temp_dir: Path) -> None:
        result = engine.create_directory(temp_dir / "new")

        assert (temp_dir / "new").is_dir()
        assert result.kind is AuditKind.CREATED
        records = memory_sink.records
        assert len(records) == 1
        assert records[0].is_directory is True
        assert records[0].message == f"Created directory: {temp_dir / 'new'}"

    def test_existing_directory_is_noop(self, engine: ApplyEngine, memory_sink, temp_dir: Path) -> None:
        (temp_dir / "d").mkdir()
        result = engine.create_directory(temp_dir / "d")
        assert result.performed is False
        assert memory_sink.records == []

    def test_file_in_the_way(self, engine: ApplyEngine, temp_dir: Path) -> None:
        (temp_dir / "d").write_text("x")
        with pytest.raises(IOFailure):
            engine.create_directory(temp_dir / "d")


class TestCopyFile:
    """Tests for ApplyEngine.copy_file."""

    def test_overwrite_replaces_content(self, engine: ApplyEngine, memory_sink, temp_dir: Path) -> None:
        (temp_dir / "src").write_text("new")
        (temp_dir / "dst").write_text("old")

        result = engine.copy_file(temp_dir / "src", temp_dir / "dst")

        assert (temp_dir / "dst").read_text() == "new"
        assert result.kind is AuditKind.COPIED
        assert result.bytes_copied == 3
        assert memory_sink.paths(AuditKind.COPIED) == [temp_dir / "dst"]

    def test_skip_if_exists_leaves_destination(self, engine: ApplyEngine, memory_sink, temp_dir: Path) -> None:
        (temp_dir / "src").write_text("new")
        (temp_dir / "dst").write_text("old")

        result = engine.copy_file(temp_dir / "src", temp_dir / "dst", CopyPolicy.SKIP_IF_EXISTS)

        assert (temp_dir / "dst").read_text() == "old"
        assert result.performed is False
        assert memory_sink.records == []

    def test_skip_if_exists_copies_missing(self, engine: ApplyEngine, temp_dir: Path) -> None:
        (temp_dir / "src").write_text("new")
        result = engine.copy_file(temp_dir / "src", temp_dir / "dst", CopyPolicy.SKIP_IF_EXISTS)
        assert (temp_dir / "dst").read_text() == "new"
        assert result.performed is True

    def test_vanished_source(self, engine: ApplyEngine, temp_dir: Path) -> None:
        with pytest.raises(NotFound) as exc_info:
            engine.copy_file(temp_dir / "missing", temp_dir / "dst")
        assert exc_info.value.path == temp_dir / "missing"

    def test_missing_destination_directory_names_destination(
        self, engine: ApplyEngine, memory_sink, temp_dir: Path
    ) -> None:
        (temp_dir / "src").write_text("x")
        destination = temp_dir / "gone" / "dst"

        with pytest.raises(NotFound) as exc_info:
            engine.copy_file(temp_dir / "src", destination)

        assert exc_info.value.path == destination
        assert exc_info.value.operation == "copy"
        assert memory_sink.records == []

    def test_replica_symlink_is_replaced_by_file(self, engine: ApplyEngine, temp_dir: Path) -> None:
        (temp_dir / "src").write_text("new")
        (temp_dir / "target").write_text("old")
        (temp_dir / "dst").symlink_to(temp_dir / "target")

        engine.delete_entry(temp_dir / "dst")
        engine.copy_file(temp_dir / "src", temp_dir / "dst", CopyPolicy.SKIP_IF_EXISTS)

        assert not (temp_dir / "dst").is_symlink()
        assert (temp_dir / "dst").read_text() == "new"
        assert (temp_dir / "target").read_text() == "old"


class TestDeleteEntry:
    """Tests for ApplyEngine.delete_entry."""

    def test_deletes_file(self, engine: ApplyEngine, memory_sink, temp_dir: Path) -> None:
        (temp_dir / "f").write_text("x")
        engine.delete_entry(temp_dir / "f")
        assert not (temp_dir / "f").exists()
        assert memory_sink.records[0].message == f"Deleted file: {temp_dir / 'f'}"

    def test_deletes_directory_recursively(self, engine: ApplyEngine, memory_sink, temp_dir: Path, make_tree) -> None:
        make_tree(temp_dir / "d", {"a": "1", "sub": {"b": "2"}})

        result = engine.delete_entry(temp_dir / "d")

        assert not (temp_dir / "d").exists()
        assert result.kind is AuditKind.DELETED
        # A recursive delete is reported once, for the directory itself.
        assert len(memory_sink.records) == 1
        assert memory_sink.records[0].is_directory is True

    def test_vanished_entry(self, engine: ApplyEngine, memory_sink, temp_dir: Path) -> None:
        with pytest.raises(NotFound):
            engine.delete_entry(temp_dir / "missing")
        assert memory_sink.records == []
