"""
Dependency injection services.

Provides application-scoped provider functions for the data-access layer.
"""

from infrastructure.services.providers import (
    get_cache,
    get_content_service,
    get_error_classifier,
    get_event_bus,
    get_local_storage,
    get_notification_center,
    get_remote_store,
    get_retry_engine,
    get_settings,
    get_sync_coordinator,
)

__all__ = [
    "get_cache",
    "get_content_service",
    "get_error_classifier",
    "get_event_bus",
    "get_local_storage",
    "get_notification_center",
    "get_remote_store",
    "get_retry_engine",
    "get_settings",
    "get_sync_coordinator",
]
