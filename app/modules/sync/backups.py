"""Local backup snapshots.

A backup is a JSON object ``{navigation, site, resources, timestamp}``
stored under ``backup_<epoch milliseconds>`` in local storage. Only the
most recent ``retention`` backups are kept.
"""

import json
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from infrastructure.logging import get_module_logger
from infrastructure.persistence import LocalStorage
from modules.sync.models import BackupEntry

logger = get_module_logger()

BACKUP_PREFIX = "backup_"


def _millis(key: str) -> Optional[int]:
    suffix = key[len(BACKUP_PREFIX) :]
    return int(suffix) if suffix.isdigit() else None


class BackupStore:
    """Backup snapshots kept in local storage.

    Example:
        backups = BackupStore(storage, retention=5)
        entry = backups.save({"navigation": [...], "site": {...}, ...})
        snapshot = backups.load(entry.id)
    """

    def __init__(self, storage: LocalStorage, retention: int = 5):
        if retention < 1:
            raise ValueError("retention must be at least 1")
        self.storage = storage
        self.retention = retention

    def save(self, snapshot: Dict[str, Any]) -> BackupEntry:
        """Persist ``snapshot`` and prune old backups."""
        millis = int(time.time() * 1000)
        entries = self.entries()
        # Ids must sort after every stored backup, even within one millisecond
        if entries and millis <= _millis(entries[-1].id):
            millis = _millis(entries[-1].id) + 1
        key = f"{BACKUP_PREFIX}{millis}"

        raw = json.dumps(snapshot, ensure_ascii=False)
        self.storage.set_item(key, raw)
        self.prune()

        logger.info("backup_saved", backup_id=key, size=len(raw))
        return BackupEntry(
            id=key,
            created_at=datetime.fromtimestamp(millis / 1000, tz=timezone.utc),
            size=len(raw),
        )

    def entries(self) -> List[BackupEntry]:
        """Stored backups, oldest first."""
        entries = []
        for key in self.storage.keys():
            if not key.startswith(BACKUP_PREFIX):
                continue
            millis = _millis(key)
            raw = self.storage.get_item(key)
            if millis is None or raw is None:
                continue
            entries.append(
                BackupEntry(
                    id=key,
                    created_at=datetime.fromtimestamp(millis / 1000, tz=timezone.utc),
                    size=len(raw),
                )
            )
        return sorted(entries, key=lambda entry: _millis(entry.id))

    def load(self, backup_id: str) -> Optional[Dict[str, Any]]:
        """Return the snapshot stored under ``backup_id``, or None."""
        if not backup_id.startswith(BACKUP_PREFIX) or _millis(backup_id) is None:
            return None
        raw = self.storage.get_item(backup_id)
        return None if raw is None else json.loads(raw)

    def delete(self, backup_id: str) -> bool:
        return self.storage.remove_item(backup_id)

    def prune(self) -> int:
        """Delete all but the newest ``retention`` backups; returns the count removed."""
        entries = self.entries()
        stale = entries[: max(len(entries) - self.retention, 0)]
        for entry in stale:
            self.storage.remove_item(entry.id)
        if stale:
            logger.debug("backups_pruned", removed=[entry.id for entry in stale])
        return len(stale)
