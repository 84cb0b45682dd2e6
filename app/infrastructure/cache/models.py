"""Cache entry model."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheItem:
    """A cached value with its lifetime.

    Timestamps are epoch seconds (``time.time()``). ``expires_at`` is always
    strictly greater than ``created_at``.
    """

    key: str
    value: Any
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        """An item is expired strictly after its expiry instant."""
        return now > self.expires_at

    @property
    def ttl(self) -> float:
        return self.expires_at - self.created_at
