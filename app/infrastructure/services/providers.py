"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for the data-access layer.
Each provider builds its service from the providers it depends on, so the
whole graph shares one cache, one classifier and one notification center.
Tests build their own instances instead of calling these.
"""

from functools import lru_cache

from infrastructure.cache import Cache
from infrastructure.configuration import Settings
from infrastructure.errors import ErrorClassifier
from infrastructure.events import EventBus
from infrastructure.notifications import NotificationCenter
from infrastructure.persistence import LocalStorage
from infrastructure.resilience import RetryEngine
from integrations.remote_store import GitHubContentsStore, RemoteFileStore
from modules.content import ContentService
from modules.sync import SyncCoordinator


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    The @lru_cache decorator ensures only ONE instance is created per process.

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_event_bus() -> EventBus:
    """
    Get application-scoped event bus.

    The auth collaborator subscribes to ``AUTH_LOGOUT`` here.

    Usage:
        from infrastructure.events import AUTH_LOGOUT
        get_event_bus().subscribe(AUTH_LOGOUT, lambda event: session.clear())
    """
    return EventBus()


@lru_cache
def get_notification_center() -> NotificationCenter:
    return NotificationCenter.from_settings(get_settings())


@lru_cache
def get_cache() -> Cache:
    return Cache.from_settings(get_settings())


@lru_cache
def get_error_classifier() -> ErrorClassifier:
    """
    Get application-scoped error classifier.

    Returns:
        ErrorClassifier: Wired to the shared notification center and event bus.
    """
    return ErrorClassifier.from_settings(
        get_settings(),
        notifications=get_notification_center(),
        event_bus=get_event_bus(),
    )


@lru_cache
def get_retry_engine() -> RetryEngine:
    return RetryEngine.from_settings(
        get_settings(),
        classifier=get_error_classifier(),
        notifications=get_notification_center(),
    )


@lru_cache
def get_local_storage() -> LocalStorage:
    return LocalStorage(get_settings().sync.state_dir)


@lru_cache
def get_remote_store() -> RemoteFileStore:
    """
    Get the remote file store configured by REMOTE_STORE_* settings.

    Raises:
        ValueError: REMOTE_STORE_OWNER or REMOTE_STORE_REPO is not set.
    """
    return GitHubContentsStore.from_settings(get_settings().remote_store)


@lru_cache
def get_content_service() -> ContentService:
    return ContentService(
        store=get_remote_store(),
        cache=get_cache(),
        retry=get_retry_engine(),
        classifier=get_error_classifier(),
        notifications=get_notification_center(),
    )


@lru_cache
def get_sync_coordinator() -> SyncCoordinator:
    """
    Get application-scoped sync coordinator.

    The periodic check is not started here; call ``start_auto_sync`` once
    the application is ready (see ``settings.sync.auto_enabled``).
    """
    return SyncCoordinator.from_settings(
        get_settings(),
        content=get_content_service(),
        classifier=get_error_classifier(),
        storage=get_local_storage(),
        cache=get_cache(),
        notifications=get_notification_center(),
    )
