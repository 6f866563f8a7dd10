"""
Tests for folderreplica.core.config module.
"""

import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from folderreplica.core.config import (
    AuditConfig,
    FolderReplicaConfig,
    LoggingConfig,
    SyncConfig,
    load_config,
)


class TestLoggingConfig:
    """Tests for LoggingConfig."""

    def test_default_values(self) -> None:
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.file_enabled is True
        assert config.console_enabled is True
        assert config.json_format is False

    def test_custom_values(self) -> None:
        config = LoggingConfig(level="DEBUG", json_format=True)
        assert config.level == "DEBUG"
        assert config.json_format is True

    def test_path_expansion(self) -> None:
        config = LoggingConfig(log_directory="~/logs")
        assert "~" not in str(config.log_directory)


class TestSyncConfig:
    """Tests for SyncConfig."""

    def test_default_values(self) -> None:
        config = SyncConfig()
        assert config.hash_set_threshold == 20
        assert config.max_workers == 8
        assert config.interval_seconds == 60.0
        assert config.digest_algorithm == "md5"
        assert config.chunk_size_bytes == 1024 * 1024

    def test_algorithm_is_normalized(self) -> None:
        config = SyncConfig(digest_algorithm="SHA256")
        assert config.digest_algorithm == "sha256"

    def test_unknown_algorithm_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SyncConfig(digest_algorithm="not-a-digest")

    def test_worker_bounds(self) -> None:
        with pytest.raises(ValidationError):
            SyncConfig(max_workers=0)

    def test_interval_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            SyncConfig(interval_seconds=0)


class TestAuditConfig:
    """Tests for AuditConfig."""

    def test_default_values(self) -> None:
        config = AuditConfig()
        assert config.log_file is None
        assert config.echo_to_logger is True

    def test_log_file_expansion(self) -> None:
        config = AuditConfig(log_file="~/replica.log")
        assert config.log_file is not None
        assert "~" not in str(config.log_file)


class TestFolderReplicaConfig:
    """Tests for FolderReplicaConfig."""

    def test_default_config(self) -> None:
        config = FolderReplicaConfig()
        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.sync, SyncConfig)
        assert isinstance(config.audit, AuditConfig)

    def test_save_and_load(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"

            original = FolderReplicaConfig(
                sync=SyncConfig(hash_set_threshold=5, interval_seconds=2.5),
            )
            original.save(config_path)

            loaded = FolderReplicaConfig.load(config_path)

            assert loaded.sync.hash_set_threshold == 5
            assert loaded.sync.interval_seconds == 2.5

    def test_load_nonexistent(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "nonexistent.json"
            config = FolderReplicaConfig.load(config_path)
            assert config.sync.hash_set_threshold == 20

    def test_audit_log_path_defaults_to_log_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = FolderReplicaConfig(logging=LoggingConfig(log_directory=tmpdir))
            assert config.audit_log_path() == Path(tmpdir).resolve() / "replication.log"

    def test_audit_log_path_override(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = FolderReplicaConfig(audit=AuditConfig(log_file=Path(tmpdir) / "a.log"))
            assert config.audit_log_path().name == "a.log"

    def test_ensure_directories(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = FolderReplicaConfig(
                logging=LoggingConfig(log_directory=Path(tmpdir) / "logs"),
                audit=AuditConfig(log_file=Path(tmpdir) / "audit" / "replica.log"),
            )
            config.ensure_directories()

            assert config.logging.log_directory.exists()
            assert (Path(tmpdir) / "audit").exists()

    def test_load_config_creates_directories(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"
            FolderReplicaConfig(
                logging=LoggingConfig(log_directory=Path(tmpdir) / "logs"),
            ).save(config_path)

            config = load_config(config_path)
            assert config.logging.log_directory.exists()
