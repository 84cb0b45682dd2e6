"""Infrastructure configuration module - public API.

This module provides centralized configuration management for the
data-access layer using Pydantic BaseSettings with domain-based organization.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    CacheSettings, RetrySettings, ErrorSettings, NotificationSettings,
    SyncFeatureSettings, RemoteStoreSettings: Section classes (for testing)

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    ttl = settings.cache.default_ttl_seconds
    attempts = settings.retry.max_attempts
    owner = settings.remote_store.owner
    ```
"""

from infrastructure.configuration.settings import Settings, settings
from infrastructure.configuration.infrastructure import (
    CacheSettings,
    ErrorSettings,
    NotificationSettings,
    RetrySettings,
)
from infrastructure.configuration.features import SyncFeatureSettings
from infrastructure.configuration.integrations import RemoteStoreSettings

__all__ = [
    "Settings",
    "settings",
    "CacheSettings",
    "ErrorSettings",
    "NotificationSettings",
    "RetrySettings",
    "SyncFeatureSettings",
    "RemoteStoreSettings",
]
