"""Content comparison for deciding whether a replica file is stale."""

from __future__ import annotations

import hashlib
from pathlib import Path

from folderreplica.core.exceptions import NotAFile, NotFound
from folderreplica.sync.filesystem import LocalFileSystem

DEFAULT_CHUNK_SIZE = 1024 * 1024

ContentFingerprint = str


class ContentComparator:
    """Compares files by a digest of their full byte content.

    Nothing is cached: every comparison re-reads both files.
    """

    def __init__(
        self,
        fs: LocalFileSystem | None = None,
        algorithm: str = "md5",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.fs = fs or LocalFileSystem()
        self.algorithm = algorithm
        self.chunk_size = chunk_size

    def fingerprint(self, path: Path) -> ContentFingerprint:
        """Return the hex digest of the file at ``path``."""
        digest = hashlib.new(self.algorithm)
        for chunk in self.fs.read_chunks(path, self.chunk_size):
            digest.update(chunk)
        return digest.hexdigest()

    def contents_equal(self, path_a: Path, path_b: Path) -> bool:
        for path in (path_a, path_b):
            if not self.fs.exists(path):
                raise NotFound(f"compare: {path} no longer exists", path, "compare")
            if not self.fs.is_file(path):
                raise NotAFile(f"compare: {path} is not a regular file", path, "compare")
        return self.fingerprint(path_a) == self.fingerprint(path_b)
