"""Local persistence for sync state and backups.

Holds the ``last_sync_time`` marker and local backup snapshots on disk.
"""

from infrastructure.persistence.local_storage import LocalStorage

__all__ = ["LocalStorage"]
