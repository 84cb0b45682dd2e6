"""Bounded in-memory TTL cache.

Entries expire lazily: an expired entry is removed the next time it is read
(``get``/``has``/``get_or_set``) or when ``keys``/``size``/``stats`` purge.
When the cache is full, inserting a new key evicts the entry with the
smallest creation time; one entry is evicted per insertion. Reads do
not refresh an entry's position.

Absence is reported with a default value (``None`` unless given), never with
an exception.
"""

import threading
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, TYPE_CHECKING

from infrastructure.cache.models import CacheItem
from infrastructure.logging import get_module_logger

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()

_MISSING = object()


class Cache:
    """Thread-safe key/value cache with TTL expiry and insertion-order eviction.

    Args:
        max_entries: Capacity. Default 100.
        default_ttl: Lifetime in seconds for entries set without ``ttl``.
            Default 300 (5 minutes).

    Example:
        cache = Cache(max_entries=100, default_ttl=300)
        cache.set("site", {"title": "Docs"}, ttl=1800)
        site = cache.get("site")
        navigation = cache.get_or_set("navigation", load_navigation, ttl=600)
    """

    def __init__(self, max_entries: int = 100, default_ttl: float = 300.0):
        self._validate(max_entries, default_ttl)
        self.max_entries = max_entries
        self.default_ttl = default_ttl
        self._items: Dict[str, CacheItem] = {}
        self._lock = threading.Lock()
        self._inflight: Dict[str, threading.Lock] = {}

    @classmethod
    def from_settings(cls, settings: "Settings") -> "Cache":
        return cls(
            max_entries=settings.cache.max_entries,
            default_ttl=settings.cache.default_ttl_seconds,
        )

    @staticmethod
    def _validate(max_entries: Optional[int], ttl: Optional[float]) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        if ttl is not None and ttl <= 0:
            raise ValueError("ttl must be > 0")

    def configure(
        self, max_entries: Optional[int] = None, default_ttl: Optional[float] = None
    ) -> None:
        """Change the defaults used by future ``set`` calls.

        Existing entries keep their expiry. Lowering ``max_entries`` does not
        evict immediately; each later insertion of a new key evicts one
        entry while the cache is at or above the new capacity.
        """
        self._validate(max_entries, default_ttl)
        with self._lock:
            if max_entries is not None:
                self.max_entries = max_entries
            if default_ttl is not None:
                self.default_ttl = default_ttl
        logger.debug(
            "cache_configured",
            max_entries=self.max_entries,
            default_ttl=self.default_ttl,
        )

    def set(
        self,
        key: str,
        value: Any,
        ttl: Optional[float] = None,
        max_entries: Optional[int] = None,
    ) -> None:
        """Insert or overwrite ``key``.

        Args:
            key: Cache key.
            value: Any value, including None.
            ttl: Lifetime in seconds; defaults to ``default_ttl``.
            max_entries: Capacity to enforce for this insertion; defaults to
                the configured capacity.
        """
        self._validate(max_entries, ttl)
        with self._lock:
            self._store(key, value, ttl, max_entries)

    def _store(
        self,
        key: str,
        value: Any,
        ttl: Optional[float] = None,
        max_entries: Optional[int] = None,
    ) -> None:
        # Caller holds self._lock
        capacity = max_entries if max_entries is not None else self.max_entries
        lifetime = ttl if ttl is not None else self.default_ttl

        if key not in self._items:
            # One eviction per insertion, even when capacity was lowered
            if self._items and len(self._items) >= capacity:
                oldest = min(self._items.values(), key=lambda item: item.created_at)
                del self._items[oldest.key]
                logger.debug("cache_entry_evicted", key=oldest.key)
        else:
            # Overwrite moves the key to the newest insertion position
            del self._items[key]

        now = time.time()
        self._items[key] = CacheItem(
            key=key, value=value, created_at=now, expires_at=now + lifetime
        )

    def _lookup(self, key: str) -> Any:
        # Caller holds self._lock
        item = self._items.get(key)
        if item is None:
            return _MISSING
        if item.is_expired(time.time()):
            del self._items[key]
            return _MISSING
        return item.value

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for ``key`` or ``default`` if absent or expired."""
        with self._lock:
            value = self._lookup(key)
        return default if value is _MISSING else value

    def has(self, key: str) -> bool:
        """True if ``key`` holds a live entry."""
        with self._lock:
            return self._lookup(key) is not _MISSING

    def get_or_set(
        self,
        key: str,
        factory: Callable[[], Any],
        ttl: Optional[float] = None,
        single_flight: bool = False,
    ) -> Any:
        """Return the cached value, or compute it with ``factory`` and cache it.

        The factory runs outside the cache lock. Without ``single_flight``,
        concurrent misses on the same key each call ``factory``. With
        ``single_flight=True`` one caller computes while the others wait and
        then read the stored value. If the factory raises, nothing is stored
        and the exception propagates to its caller.
        """
        with self._lock:
            value = self._lookup(key)
            if value is not _MISSING:
                return value
            flight = None
            if single_flight:
                flight = self._inflight.setdefault(key, threading.Lock())

        if flight is None:
            value = factory()
            self.set(key, value, ttl=ttl)
            return value

        with flight:
            with self._lock:
                value = self._lookup(key)
            if value is not _MISSING:
                return value
            try:
                value = factory()
                self.set(key, value, ttl=ttl)
                return value
            finally:
                with self._lock:
                    if self._inflight.get(key) is flight:
                        del self._inflight[key]

    def set_batch(self, items: Dict[str, Any], ttl: Optional[float] = None) -> None:
        """Set each item; entries are inserted one at a time."""
        for key, value in items.items():
            self.set(key, value, ttl=ttl)

    def get_batch(self, keys: Iterable[str]) -> Dict[str, Any]:
        """Return ``{key: value or None}`` for each requested key."""
        return {key: self.get(key) for key in keys}

    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns True if an entry was removed."""
        with self._lock:
            return self._items.pop(key, None) is not None

    def delete_batch(self, keys: Iterable[str]) -> int:
        """Remove each key; returns the number of entries removed."""
        return sum(1 for key in keys if self.delete(key))

    def clear(self) -> None:
        with self._lock:
            count = len(self._items)
            self._items.clear()
        logger.debug("cache_cleared", removed=count)

    def _purge_expired(self) -> int:
        # Caller holds self._lock
        now = time.time()
        expired = [key for key, item in self._items.items() if item.is_expired(now)]
        for key in expired:
            del self._items[key]
        return len(expired)

    def keys(self) -> List[str]:
        """Live keys in insertion order; expired entries are purged first."""
        with self._lock:
            self._purge_expired()
            return list(self._items)

    def size(self) -> int:
        """Number of live entries; expired entries are purged first."""
        with self._lock:
            self._purge_expired()
            return len(self._items)

    def stats(self) -> Dict[str, Any]:
        """Cache statistics (for monitoring/debugging).

        Returns:
            Dict with total_items, expired_items (purged by this call),
            max_entries, default_ttl, oldest_key and newest_key.
        """
        with self._lock:
            expired = self._purge_expired()
            items = sorted(self._items.values(), key=lambda item: item.created_at)
            return {
                "total_items": len(items),
                "expired_items": expired,
                "max_entries": self.max_entries,
                "default_ttl": self.default_ttl,
                "oldest_key": items[0].key if items else None,
                "newest_key": items[-1].key if items else None,
            }
