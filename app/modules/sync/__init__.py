"""Reconciliation of cached content with the remote repository."""

from modules.sync.backups import BACKUP_PREFIX, BackupStore
from modules.sync.coordinator import LAST_SYNC_KEY, SyncCoordinator
from modules.sync.models import (
    BackupEntry,
    SyncFailedError,
    SyncInProgressError,
    SyncLabel,
    SyncPhase,
    SyncStatus,
)

__all__ = [
    "BACKUP_PREFIX",
    "BackupEntry",
    "BackupStore",
    "LAST_SYNC_KEY",
    "SyncCoordinator",
    "SyncFailedError",
    "SyncInProgressError",
    "SyncLabel",
    "SyncPhase",
    "SyncStatus",
]
