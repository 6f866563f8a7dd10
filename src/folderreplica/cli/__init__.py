"""
FolderReplica CLI Module.

Provides command-line interface for FolderReplica operations.
"""

from folderreplica.cli.main import main, cli

__all__ = ["main", "cli"]
