"""
FolderReplica - one-way folder replication.

Keeps a replica directory tree identical to a source tree by creating,
updating and removing entries on a fixed interval.
"""

__version__ = "1.0.0"
__author__ = "FolderReplica Team"

from folderreplica.core.config import FolderReplicaConfig
from folderreplica.sync.session import SyncSession, run_sync_pass

__all__ = ["FolderReplicaConfig", "SyncSession", "run_sync_pass", "__version__"]
