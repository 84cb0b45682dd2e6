"""Sync coordinator.

Keeps the locally cached content consistent with the remote repository:

- a periodic check reloads collections that changed remotely since the last
  sync (failures are logged and the cycle counts as "no update");
- ``force_sync`` reloads every collection in parallel and raises a
  classified error if any reload fails;
- local backups can be taken and restored.

States: IDLE -> CHECKING -> IDLE for checks, IDLE -> SYNCING -> IDLE for
forced syncs. A timer tick is skipped while another operation runs.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

import schedule

from infrastructure.cache import Cache
from infrastructure.errors import AppError, ErrorClassifier, ErrorKind
from infrastructure.logging import bind_operation_context, get_module_logger
from infrastructure.notifications import NotificationCenter
from infrastructure.persistence import LocalStorage
from modules.content import ContentService, TrackedCollection
from modules.sync.backups import BackupStore
from modules.sync.models import (
    BackupEntry,
    SyncFailedError,
    SyncInProgressError,
    SyncLabel,
    SyncPhase,
    SyncStatus,
)

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()

LAST_SYNC_KEY = "last_sync_time"

# Upper bound on how late a scheduled check may start
TIMER_POLL_SECONDS = 1.0


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SyncCoordinator:
    """Periodic and forced reconciliation of the tracked collections.

    Args:
        content: Content service owning the tracked collections.
        classifier: Funnel for forced sync, backup and restore failures.
        storage: Local storage for ``last_sync_time`` and backups.
        cache: Cache shared with the content service.
        notifications: Receives sync and backup notices.
        interval: Seconds between automatic checks.
        backup_retention: Local backups kept.
        ready: Called before each timer tick; the tick is skipped when it
            returns False (e.g. while the application is still starting).

    Example:
        coordinator = SyncCoordinator(content, classifier, storage, cache, center)
        coordinator.start_auto_sync()
        ...
        coordinator.teardown()
    """

    def __init__(
        self,
        content: ContentService,
        classifier: ErrorClassifier,
        storage: LocalStorage,
        cache: Cache,
        notifications: Optional[NotificationCenter] = None,
        interval: float = 300.0,
        backup_retention: int = 5,
        ready: Optional[Callable[[], bool]] = None,
    ):
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self.content = content
        self.classifier = classifier
        self.storage = storage
        self.cache = cache
        self.notifications = notifications
        self.backups = BackupStore(storage, retention=backup_retention)
        self._ready = ready or (lambda: True)
        self._default_interval = interval
        self._status = SyncStatus(interval=interval)
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._timer_lock = threading.RLock()
        self._timer_thread: Optional[threading.Thread] = None
        self._timer_stop: Optional[threading.Event] = None
        self._scheduler = schedule.Scheduler()
        self._job: Optional[schedule.Job] = None

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        content: ContentService,
        classifier: ErrorClassifier,
        storage: LocalStorage,
        cache: Cache,
        notifications: Optional[NotificationCenter] = None,
        ready: Optional[Callable[[], bool]] = None,
    ) -> "SyncCoordinator":
        return cls(
            content,
            classifier,
            storage,
            cache,
            notifications=notifications,
            interval=settings.sync.interval_seconds,
            backup_retention=settings.sync.backup_retention,
            ready=ready,
        )

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    @property
    def status(self) -> SyncStatus:
        """Copy of the current status."""
        with self._lock:
            return SyncStatus(**vars(self._status))

    def _begin(self, phase: SyncPhase) -> bool:
        with self._lock:
            if self._status.in_progress:
                return False
            self._status.phase = phase
            return True

    def _end(self, checked: bool) -> None:
        with self._idle:
            self._status.phase = SyncPhase.IDLE
            if checked:
                self._status.last_checked_at = _now()
            self._idle.notify_all()

    @property
    def needs_sync(self) -> bool:
        """True before the first check or once a full interval has passed."""
        status = self.status
        if status.last_checked_at is None:
            return True
        elapsed = (_now() - status.last_checked_at).total_seconds()
        return elapsed > status.interval

    @property
    def status_label(self) -> SyncLabel:
        if self.status.in_progress:
            return SyncLabel.SYNCING
        if self.needs_sync:
            return SyncLabel.NEEDS_SYNC
        return SyncLabel.SYNCED

    def stats(self) -> Dict[str, Any]:
        status = self.status
        return {
            "last_checked_at": (
                status.last_checked_at.isoformat() if status.last_checked_at else None
            ),
            "last_synced_at": (
                status.last_synced_at.isoformat() if status.last_synced_at else None
            ),
            "last_sync_time": self.storage.get_item(LAST_SYNC_KEY),
            "phase": status.phase.value,
            "in_progress": status.in_progress,
            "interval_seconds": status.interval,
            "auto_sync_enabled": status.auto_sync_enabled,
            "needs_sync": self.needs_sync,
            "status": self.status_label.value,
        }

    def last_sync_time(self) -> Optional[datetime]:
        raw = self.storage.get_item(LAST_SYNC_KEY)
        if not raw:
            return None
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            logger.warning("last_sync_time_invalid", value=raw)
            return None

    def _mark_synced(self, started_at: datetime) -> None:
        # Commits dated after the cycle started are picked up by the next one
        self.storage.set_item(LAST_SYNC_KEY, started_at.isoformat())
        with self._lock:
            self._status.last_synced_at = _now()

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def _is_stale(
        self, collection: TrackedCollection, last_sync: Optional[datetime]
    ) -> bool:
        if last_sync is None:
            return True
        latest = self.content.latest_revision_time(collection.name)
        return latest is not None and latest > last_sync

    def check_sync(self) -> bool:
        """Reload the collections that changed remotely.

        Never raises: a failed cycle is logged and reported as no update.

        Returns:
            True if at least one collection was reloaded.
        """
        if not self._begin(SyncPhase.CHECKING):
            logger.debug("sync_check_skipped", reason="in_progress")
            return False

        has_updates = False
        with bind_operation_context(operation="check_sync"):
            try:
                started_at = _now()
                last_sync = self.last_sync_time()
                updated = []
                for collection in self.content.tracked_collections():
                    if self._is_stale(collection, last_sync):
                        self.content.reload(collection.name)
                        updated.append(collection.name)
                self._mark_synced(started_at)
                has_updates = bool(updated)
                logger.info("sync_check_completed", updated=updated)
            except Exception as e:
                has_updates = False
                logger.error(
                    "sync_check_failed",
                    error=str(e),
                    code=e.code.value if isinstance(e, AppError) else None,
                )
            finally:
                self._end(checked=True)

        if has_updates and self.notifications is not None:
            self.notifications.info(
                "Data updated", "Newer content was loaded from the repository"
            )
        return has_updates

    def _tick(self) -> None:
        if not self._ready():
            logger.debug("sync_tick_skipped", reason="not_ready")
            return
        self.check_sync()

    def force_sync(self) -> Dict[str, Any]:
        """Reload every tracked collection in parallel.

        All reloads are joined before the outcome is decided; any failure
        fails the whole sync.

        Returns:
            Collection name -> reloaded document.

        Raises:
            AppError: Classified failure (aggregated when several
                collections failed).
            SyncInProgressError: A check or sync is already running.
        """
        if not self._begin(SyncPhase.SYNCING):
            raise SyncInProgressError("A sync is already in progress")

        succeeded = False
        with bind_operation_context(operation="force_sync"):
            try:
                started_at = _now()
                documents = self._reload_all()
                self._mark_synced(started_at)
                succeeded = True
            except Exception as exc:
                app_error = self.classifier.handle(exc, context="Force sync failed")
                if app_error is exc:
                    raise
                raise app_error from exc
            finally:
                self._end(checked=succeeded)

        logger.info("force_sync_completed", collections=list(documents))
        if self.notifications is not None:
            self.notifications.success("Sync complete", "All data reloaded")
        return documents

    def _reload_all(self) -> Dict[str, Any]:
        collections = self.content.tracked_collections()
        failures: Dict[str, BaseException] = {}
        documents: Dict[str, Any] = {}

        with ThreadPoolExecutor(max_workers=max(len(collections), 1)) as pool:
            futures = {
                c.name: pool.submit(self.content.reload, c.name) for c in collections
            }
            for name, future in futures.items():
                try:
                    documents[name] = future.result()
                except Exception as exc:
                    failures[name] = exc

        if failures:
            raise SyncFailedError("Sync", failures)
        return documents

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------

    def _safe_tick(self) -> None:
        try:
            self._tick()
        except Exception as e:
            logger.error("sync_tick_failed", error=str(e))

    def _run_timer(self, stop: threading.Event, poll: float) -> None:
        while not stop.wait(poll):
            self._scheduler.run_pending()

    def _schedule_check(self, interval: float) -> None:
        # Caller holds self._timer_lock and no timer thread is running
        if self._job is not None:
            self._scheduler.cancel_job(self._job)
        self._job = self._scheduler.every(interval).seconds.do(self._safe_tick)

    def start_auto_sync(self) -> None:
        """Start the periodic check. No-op when already running."""
        with self._timer_lock:
            if self._timer_thread is not None:
                return
            interval = self.status.interval
            self._schedule_check(interval)
            stop = threading.Event()
            thread = threading.Thread(
                target=self._run_timer,
                args=(stop, min(interval, TIMER_POLL_SECONDS)),
                name="sync-coordinator-timer",
                daemon=True,
            )
            self._timer_stop, self._timer_thread = stop, thread
            with self._lock:
                self._status.auto_sync_enabled = True
            thread.start()
        logger.info("auto_sync_started", interval_seconds=interval)

    def stop_auto_sync(self) -> None:
        """Stop the periodic check.

        Once this returns no further tick runs. A tick already running is
        waited for, unless this is called from the tick itself.
        """
        with self._timer_lock:
            stop, thread = self._timer_stop, self._timer_thread
            self._timer_stop, self._timer_thread = None, None
            with self._lock:
                self._status.auto_sync_enabled = False
            if thread is None:
                return
            stop.set()
            if thread is not threading.current_thread():
                thread.join()
            self._scheduler.clear()
            self._job = None
        logger.info("auto_sync_stopped")

    def set_sync_interval(self, seconds: float) -> None:
        """Change the interval; a running timer is replaced, never duplicated."""
        if seconds <= 0:
            raise ValueError("interval must be > 0")
        with self._timer_lock:
            with self._lock:
                self._status.interval = seconds
            if self._timer_thread is not None:
                self.stop_auto_sync()
                self.start_auto_sync()

    def toggle_auto_sync(self, enabled: Optional[bool] = None) -> bool:
        """Enable, disable or flip the periodic check; returns the new state."""
        with self._timer_lock:
            running = self._timer_thread is not None
            target = (not running) if enabled is None else enabled
            if target and not running:
                self.start_auto_sync()
            elif not target and running:
                self.stop_auto_sync()
        return target

    @property
    def auto_sync_running(self) -> bool:
        with self._timer_lock:
            return self._timer_thread is not None

    def teardown(self) -> None:
        """Stop the timer and reset the status to its initial values."""
        self.stop_auto_sync()
        with self._lock:
            self._status = SyncStatus(interval=self._default_interval)

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    def clear_cache(self) -> None:
        self.cache.clear()
        if self.notifications is not None:
            self.notifications.success("Cache cleared", "Cached data was removed")

    def cache_stats(self) -> Dict[str, Any]:
        return self.cache.stats()

    def preload_data(self) -> List[str]:
        """Warm the cache with every tracked collection.

        Failures are logged and skipped.

        Returns:
            Names of the collections that were loaded.
        """
        loaded = []
        for collection in self.content.tracked_collections():
            try:
                self.content.load(collection.name)
                loaded.append(collection.name)
            except Exception as e:
                logger.warning(
                    "preload_failed", collection=collection.name, error=str(e)
                )
        return loaded

    # ------------------------------------------------------------------
    # Backups
    # ------------------------------------------------------------------

    def create_backup(self) -> BackupEntry:
        """Snapshot every tracked collection into a local backup.

        The snapshot is read collection by collection and is not atomic
        against concurrent remote writes.

        Raises:
            AppError: A collection could not be read or the backup not stored.
        """
        with bind_operation_context(operation="create_backup"):
            try:
                snapshot: Dict[str, Any] = self._reload_all()
                snapshot["timestamp"] = _now().isoformat()
                entry = self.backups.save(snapshot)
            except Exception as exc:
                app_error = self.classifier.handle(exc, context="Create backup failed")
                if app_error is exc:
                    raise
                raise app_error from exc

        if self.notifications is not None:
            self.notifications.success("Backup created", entry.id)
        return entry

    def list_local_backups(self) -> List[BackupEntry]:
        """Local backups, oldest first."""
        return self.backups.entries()

    def load_local_backup(self, backup_id: str) -> Optional[Dict[str, Any]]:
        return self.backups.load(backup_id)

    def restore_local_backup(
        self, backup_id: str, sync_timeout: float = 30.0
    ) -> Dict[str, Any]:
        """Write a backup back to the remote store, then force a full sync.

        Each collection is written independently; a failed write does not
        undo the others. The forced sync only runs when every write succeeded;
        if a check is running it waits up to ``sync_timeout`` seconds for it.

        Returns:
            The documents reloaded by the forced sync.

        Raises:
            AppError: NOT_FOUND for an unknown backup, or the classified
                write or sync failure.
        """
        try:
            snapshot = self.backups.load(backup_id)
        except ValueError as exc:
            corrupted = AppError(
                ErrorKind.VALIDATION_ERROR,
                f"Backup is corrupted: {backup_id}",
                details={"backup_id": backup_id, "reason": str(exc)},
            )
            raise self.classifier.handle(corrupted, context="Restore backup") from exc
        if snapshot is None:
            raise self.classifier.handle(
                AppError(ErrorKind.NOT_FOUND, f"Backup not found: {backup_id}"),
                context="Restore backup",
            )

        with bind_operation_context(operation="restore_backup", backup_id=backup_id):
            failures: Dict[str, BaseException] = {}
            for collection in self.content.tracked_collections():
                if collection.name not in snapshot:
                    continue
                try:
                    self.content.save(
                        collection.name,
                        snapshot[collection.name],
                        message=f"Restore {collection.name} from {backup_id}",
                        notify=False,
                    )
                except Exception as exc:
                    failures[collection.name] = exc

            if failures:
                error = SyncFailedError("Restore", failures)
                raise self.classifier.handle(
                    error, context="Restore backup failed"
                ) from error

            logger.info("backup_restored", backup_id=backup_id)
            documents = self._force_sync_when_idle(sync_timeout)

        if self.notifications is not None:
            self.notifications.success("Backup restored", backup_id)
        return documents

    def _force_sync_when_idle(self, timeout: float) -> Dict[str, Any]:
        deadline = time.monotonic() + timeout
        while True:
            try:
                return self.force_sync()
            except SyncInProgressError as exc:
                with self._idle:
                    idle = self._idle.wait_for(
                        lambda: not self._status.in_progress,
                        max(deadline - time.monotonic(), 0),
                    )
                if not idle:
                    raise self.classifier.handle(
                        exc, context="Restore backup"
                    ) from exc
