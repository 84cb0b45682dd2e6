"""Shared fixtures for the data-access layer tests.

Every fixture builds a fresh instance; nothing here touches the provider
singletons in ``infrastructure.services``.
"""

import json

import pytest

from infrastructure.cache import Cache
from infrastructure.errors import ErrorClassifier
from infrastructure.events import EventBus
from infrastructure.notifications import NotificationCenter
from infrastructure.persistence import LocalStorage
from infrastructure.resilience import RetryEngine
from modules.content import ContentService
from modules.content.schemas import DEFAULT_NAVIGATION, DEFAULT_SITE_CONFIG
from modules.sync import SyncCoordinator
from tests.factories.remote_store import InMemoryRemoteStore


@pytest.fixture
def notification_center():
    """Notification center whose timers never fire during a test."""
    center = NotificationCenter(default_duration=60.0)
    yield center
    center.clear_all()


@pytest.fixture
def notifications_of(notification_center):
    """Return the active notifications, optionally filtered by type."""

    def _of(notification_type=None):
        return [
            n
            for n in notification_center.active()
            if notification_type is None or n.type == notification_type
        ]

    return _of


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def classifier(notification_center, event_bus):
    return ErrorClassifier(notifications=notification_center, event_bus=event_bus)


@pytest.fixture
def sleeps():
    """Delays requested by the retry engine, in order."""
    return []


@pytest.fixture
def retry_engine(classifier, notification_center, sleeps):
    return RetryEngine(classifier, notification_center, sleep=sleeps.append)


@pytest.fixture
def cache():
    return Cache(max_entries=100, default_ttl=300)


@pytest.fixture
def local_storage(tmp_path):
    return LocalStorage(tmp_path / "state")


@pytest.fixture
def remote_store():
    return InMemoryRemoteStore()


@pytest.fixture
def sample_documents():
    """Valid navigation, site and resources documents."""
    navigation = json.loads(json.dumps(DEFAULT_NAVIGATION))
    site = json.loads(json.dumps(DEFAULT_SITE_CONFIG))
    resources = [{"title": "Guides", "links": ["https://example.org/guide"]}]
    return {"navigation": navigation, "site": site, "resources": resources}


@pytest.fixture
def seeded_store(sample_documents):
    """Remote store holding all three tracked documents."""
    return InMemoryRemoteStore(
        {
            "navigation.json": json.dumps(sample_documents["navigation"]),
            "site.json": json.dumps(sample_documents["site"]),
            "resources.json": json.dumps(sample_documents["resources"]),
        }
    )


@pytest.fixture
def content_factory(cache, retry_engine, classifier, notification_center):
    """Build a ContentService over the given store."""

    def _factory(store):
        return ContentService(
            store=store,
            cache=cache,
            retry=retry_engine,
            classifier=classifier,
            notifications=notification_center,
        )

    return _factory


@pytest.fixture
def content_service(content_factory, seeded_store):
    return content_factory(seeded_store)


@pytest.fixture
def coordinator_factory(classifier, local_storage, cache, notification_center):
    """Build a SyncCoordinator; every coordinator is torn down after the test."""
    created = []

    def _factory(content, **kwargs):
        kwargs.setdefault("interval", 300.0)
        coordinator = SyncCoordinator(
            content,
            classifier,
            local_storage,
            cache,
            notifications=notification_center,
            **kwargs,
        )
        created.append(coordinator)
        return coordinator

    yield _factory
    for coordinator in created:
        coordinator.teardown()


@pytest.fixture
def coordinator(coordinator_factory, content_service):
    return coordinator_factory(content_service)
