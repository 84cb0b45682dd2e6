"""Sync coordinator state models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from infrastructure.errors import AppError, ErrorKind


class SyncPhase(str, Enum):
    """What the coordinator is doing right now."""

    IDLE = "idle"
    CHECKING = "checking"
    SYNCING = "syncing"


class SyncLabel(str, Enum):
    """User-facing sync state."""

    SYNCING = "syncing"
    NEEDS_SYNC = "needs-sync"
    SYNCED = "synced"


@dataclass
class SyncStatus:
    """Coordinator state.

    Mutated only by the owning SyncCoordinator, under its lock; callers get
    copies.

    Fields:
        last_checked_at: End of the last check or successful forced sync
        last_synced_at: When ``last_sync_time`` was last written
        phase: Current SyncPhase
        interval: Seconds between automatic checks
        auto_sync_enabled: Whether the periodic check is running
    """

    last_checked_at: Optional[datetime] = None
    last_synced_at: Optional[datetime] = None
    phase: SyncPhase = SyncPhase.IDLE
    interval: float = 300.0
    auto_sync_enabled: bool = False

    @property
    def in_progress(self) -> bool:
        return self.phase is not SyncPhase.IDLE


@dataclass(frozen=True)
class BackupEntry:
    """A locally stored backup snapshot.

    Fields:
        id: Storage key, ``backup_<epoch milliseconds>``
        created_at: When the snapshot was taken
        size: Size of the stored JSON text in characters
    """

    id: str
    created_at: datetime
    size: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "size": self.size,
        }


class SyncInProgressError(RuntimeError):
    """A forced sync was requested while a check or sync was running."""


class SyncFailedError(Exception):
    """One or more collections failed during a multi-collection operation.

    Attributes:
        failures: Collection name -> exception
        code: Shared ErrorKind of the failures, or UNKNOWN_ERROR when they differ
    """

    def __init__(self, operation: str, failures: Dict[str, BaseException]):
        self.operation = operation
        self.failures = dict(failures)
        kinds = {
            failure.code if isinstance(failure, AppError) else None
            for failure in self.failures.values()
        }
        kind = kinds.pop() if len(kinds) == 1 else None
        self.code = kind or ErrorKind.UNKNOWN_ERROR

        names = ", ".join(sorted(self.failures))
        first = next(iter(self.failures.values()))
        super().__init__(f"{operation} failed for {names}: {first}")
