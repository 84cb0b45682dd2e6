"""Bounded in-memory TTL cache."""

from infrastructure.cache.models import CacheItem
from infrastructure.cache.service import Cache

__all__ = ["Cache", "CacheItem"]
