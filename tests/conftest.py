"""
Pytest configuration and fixtures for FolderReplica tests.
"""

import sys
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any, Generator

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

Tree = dict[str, Any]


def write_tree(root: Path, tree: Tree) -> Path:
    """Create files (str/bytes values) and directories (dict values) under root."""
    root.mkdir(parents=True, exist_ok=True)
    for name, content in tree.items():
        path = root / name
        if isinstance(content, dict):
            write_tree(path, content)
        elif isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content)
    return root


def snapshot_tree(root: Path) -> Tree:
    """Read a directory back into the nested dict form used by write_tree."""
    tree: Tree = {}
    for path in sorted(root.iterdir()):
        if path.is_dir():
            tree[path.name] = snapshot_tree(path)
        else:
            tree[path.name] = path.read_text()
    return tree


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_tree() -> Callable[[Path, Tree], Path]:
    return write_tree


@pytest.fixture
def read_tree() -> Callable[[Path], Tree]:
    return snapshot_tree


@pytest.fixture
def source_dir(temp_dir: Path) -> Path:
    path = temp_dir / "source"
    path.mkdir()
    return path


@pytest.fixture
def replica_dir(temp_dir: Path) -> Path:
    path = temp_dir / "replica"
    path.mkdir()
    return path


@pytest.fixture
def memory_sink() -> "MemoryAuditSink":
    from folderreplica.sync.audit import MemoryAuditSink

    return MemoryAuditSink()


@pytest.fixture
def sample_config(temp_dir: Path) -> "FolderReplicaConfig":
    """Create a sample configuration for testing."""
    from folderreplica.core.config import FolderReplicaConfig, LoggingConfig

    config = FolderReplicaConfig(
        logging=LoggingConfig(
            log_directory=temp_dir / "logs",
            console_enabled=False,
            file_enabled=False,
        ),
    )
    config.audit.log_file = temp_dir / "logs" / "audit.log"
    config.ensure_directories()
    return config


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow running tests")
