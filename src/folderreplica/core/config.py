"""
FolderReplica configuration management.

Provides centralized configuration with validation using Pydantic.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_PATH = Path.home() / ".folderreplica" / "config.json"


class LoggingConfig(BaseModel):
    """Configuration for structured logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_enabled: bool = True
    console_enabled: bool = True
    json_format: bool = False
    log_directory: Path = Field(default_factory=lambda: Path.home() / ".folderreplica" / "logs")

    @field_validator("log_directory", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser().resolve()


class SyncConfig(BaseModel):
    """Configuration for replication passes."""

    hash_set_threshold: int = Field(default=20, ge=0)
    max_workers: int = Field(default=8, ge=1, le=256)
    interval_seconds: float = Field(default=60.0, gt=0)
    digest_algorithm: str = "md5"
    chunk_size_kb: int = Field(default=1024, ge=1, le=65536)

    @field_validator("digest_algorithm")
    @classmethod
    def check_algorithm(cls, v: str) -> str:
        name = v.lower()
        if name not in hashlib.algorithms_available:
            raise ValueError(f"Unsupported digest algorithm: {v}")
        return name

    @property
    def chunk_size_bytes(self) -> int:
        return self.chunk_size_kb * 1024


class AuditConfig(BaseModel):
    """Configuration for the audit trail of replica mutations."""

    log_file: Path | None = None
    echo_to_logger: bool = True

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_log_file(cls, v: str | Path | None) -> Path | None:
        if v is None:
            return None
        return Path(v).expanduser().resolve()


class FolderReplicaConfig(BaseModel):
    """Main FolderReplica configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)

    @classmethod
    def load(cls, config_path: Path | None = None) -> FolderReplicaConfig:
        """Load configuration from file or create default."""
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        if config_path.exists():
            with open(config_path) as f:
                data = json.load(f)
            return cls.model_validate(data)

        return cls()

    def save(self, config_path: Path | None = None) -> None:
        """Save configuration to file."""
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2, default=str)

    def ensure_directories(self) -> None:
        """Create all required directories."""
        self.logging.log_directory.mkdir(parents=True, exist_ok=True)
        self.audit_log_path().parent.mkdir(parents=True, exist_ok=True)

    def audit_log_path(self) -> Path:
        """Get the file audit records are appended to."""
        if self.audit.log_file is not None:
            return self.audit.log_file
        return self.logging.log_directory / "replication.log"


def get_default_config() -> FolderReplicaConfig:
    """Get the default configuration."""
    return FolderReplicaConfig()


def load_config(config_path: Path | None = None) -> FolderReplicaConfig:
    """Load or create configuration."""
    config = FolderReplicaConfig.load(config_path)
    config.ensure_directories()
    return config
