"""Cache infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class CacheSettings(InfrastructureSettings):
    """In-memory TTL cache configuration.

    Environment Variables:
        CACHE_MAX_ENTRIES: Capacity before the oldest entry is evicted (default: 100)
        CACHE_DEFAULT_TTL_SECONDS: Lifetime of entries set without a ttl (default: 300)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        cache = Cache(
            max_entries=settings.cache.max_entries,
            default_ttl=settings.cache.default_ttl_seconds,
        )
        ```
    """

    max_entries: int = Field(
        default=100,
        ge=1,
        alias="CACHE_MAX_ENTRIES",
        description="Maximum number of cached entries before eviction",
    )
    default_ttl_seconds: float = Field(
        default=300.0,
        gt=0,
        alias="CACHE_DEFAULT_TTL_SECONDS",
        description="Default entry lifetime (seconds, 5 minutes)",
    )
