"""Unit tests for ContentService."""

import json

import pytest

from infrastructure.errors import AppError, ErrorKind
from infrastructure.notifications import NotificationType
from integrations.remote_store import ConflictError, TransportError
from modules.content import NAVIGATION, RESOURCES, SITE
from modules.content.schemas import DEFAULT_NAVIGATION, DEFAULT_SITE_CONFIG
from tests.factories.remote_store import InMemoryRemoteStore


@pytest.mark.unit
class TestLoad:
    def test_load_returns_document(self, content_service, sample_documents):
        assert content_service.load(SITE) == sample_documents["site"]

    def test_load_is_cached(self, content_service, seeded_store):
        content_service.load(NAVIGATION)
        content_service.load(NAVIGATION)

        assert seeded_store.count("get_file_content", "navigation.json") == 1

    def test_force_refetches(self, content_service, seeded_store):
        content_service.load(NAVIGATION)
        content_service.load(NAVIGATION, force=True)
        content_service.reload(NAVIGATION)

        assert seeded_store.count("get_file_content", "navigation.json") == 3

    def test_cache_ttl_per_collection(self, content_service, cache):
        content_service.load(SITE)

        item = cache._items["content:site"]
        assert item.ttl == 1800

    def test_unknown_collection(self, content_service):
        with pytest.raises(ValueError):
            content_service.load("bookmarks")

    def test_missing_file_writes_default(self, content_factory):
        store = InMemoryRemoteStore()
        content = content_factory(store)

        document = content.load(NAVIGATION)

        assert document == DEFAULT_NAVIGATION
        assert json.loads(store.files["navigation.json"].content) == DEFAULT_NAVIGATION
        assert store.count("create_file", "navigation.json") == 1

    def test_missing_resources_not_written(self, content_factory):
        store = InMemoryRemoteStore()
        content = content_factory(store)

        assert content.load(RESOURCES) == []
        assert "resources.json" not in store.files

    def test_default_is_a_fresh_copy(self, content_factory):
        content = content_factory(InMemoryRemoteStore())

        site = content.load(SITE)
        site["basic"]["title"] = "Changed"

        assert DEFAULT_SITE_CONFIG["basic"]["title"] == "Navigation"

    def test_empty_file_yields_default(self, content_factory):
        store = InMemoryRemoteStore({"site.json": "  \n"})
        content = content_factory(store)

        assert content.load(SITE) == DEFAULT_SITE_CONFIG
        assert store.count("update_file") == 0

    def test_invalid_json_raises(self, content_factory):
        content = content_factory(InMemoryRemoteStore({"site.json": "{not json"}))

        with pytest.raises(AppError) as exc_info:
            content.load(SITE)

        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)
        assert exc_info.value.details["context"] == "Invalid JSON in site.json"

    def test_malformed_document_loaded_with_warning(
        self, content_factory, notifications_of
    ):
        malformed = [{"id": "tools", "title": ""}]
        content = content_factory(
            InMemoryRemoteStore({"navigation.json": json.dumps(malformed)})
        )

        assert content.load(NAVIGATION) == malformed
        [warning] = notifications_of(NotificationType.WARNING)
        assert "navigation.json" in warning.message

    def test_transient_failure_retried(self, content_service, seeded_store, sleeps):
        seeded_store.fail("get_file_content", "site.json", TransportError("Failed to fetch"))

        content_service.load(SITE)

        assert seeded_store.count("get_file_content", "site.json") == 2
        assert sleeps == [1.0]

    def test_persistent_failure_raises_without_notification(
        self, content_service, seeded_store, notifications_of
    ):
        seeded_store.fail(
            "get_file_content",
            "site.json",
            *[TransportError("Failed to fetch") for _ in range(3)],
        )

        with pytest.raises(AppError) as exc_info:
            content_service.load(SITE)

        assert exc_info.value.code is ErrorKind.NETWORK_ERROR
        assert notifications_of() == []
        assert content_service.cached() == {}


@pytest.mark.unit
class TestSave:
    def test_save_updates_remote_and_cache(
        self, content_service, seeded_store, sample_documents, notifications_of
    ):
        site = sample_documents["site"]
        site["basic"]["title"] = "Team links"

        revision = content_service.save(SITE, site, message="Rename site")

        stored = seeded_store.files["site.json"]
        assert stored.sha == revision
        assert json.loads(stored.content)["basic"]["title"] == "Team links"
        assert seeded_store.history[0][1].message == "Rename site"
        assert content_service.load(SITE)["basic"]["title"] == "Team links"
        assert seeded_store.count("get_file_content", "site.json") == 0
        assert len(notifications_of(NotificationType.SUCCESS)) == 1

    def test_save_keeps_unicode_and_indentation(self, content_service, seeded_store):
        content_service.save(RESOURCES, [{"title": "Café"}], notify=False)

        content = seeded_store.files["resources.json"].content
        assert "Café" in content
        assert content.startswith("[\n  {")

    def test_save_creates_missing_file(self, content_factory):
        store = InMemoryRemoteStore()
        content = content_factory(store)

        content.save(RESOURCES, [{"title": "Guides"}])

        assert store.count("update_file", "resources.json") == 1
        assert store.count("create_file", "resources.json") == 1
        assert json.loads(store.files["resources.json"].content) == [{"title": "Guides"}]

    def test_invalid_document_rejected(self, content_service, seeded_store, classifier):
        with pytest.raises(AppError) as exc_info:
            content_service.save(SITE, {"basic": {"title": ""}})

        error = exc_info.value
        assert error.code is ErrorKind.VALIDATION_ERROR
        assert error.message.startswith("Validation failed:")
        assert seeded_store.count("update_file") == 0

    def test_duplicate_category_ids_rejected(self, content_service, sample_documents):
        category = sample_documents["navigation"][0]

        with pytest.raises(AppError) as exc_info:
            content_service.save(NAVIGATION, [category, dict(category)])

        codes = {issue["code"] for issue in exc_info.value.details["validation_errors"]}
        assert "DUPLICATE" in codes

    def test_conflict_not_retried(self, content_service, seeded_store, sleeps):
        seeded_store.fail("update_file", "site.json", ConflictError("409 stale sha"))

        with pytest.raises(AppError) as exc_info:
            content_service.save(SITE, DEFAULT_SITE_CONFIG)

        assert exc_info.value.code is ErrorKind.UNKNOWN_ERROR
        assert exc_info.value.details["remote_error"] == "conflict"
        assert seeded_store.count("update_file", "site.json") == 1
        assert sleeps == []


@pytest.mark.unit
class TestRevisionsAndCache:
    def test_latest_revision_time(self, content_service, seeded_store):
        [site_commit] = [c for path, c in seeded_store.history if path == "site.json"]

        assert content_service.latest_revision_time(SITE) == site_commit.author_date

    def test_latest_revision_time_for_untracked_file(self, content_factory):
        content = content_factory(InMemoryRemoteStore())

        assert content.latest_revision_time(SITE) is None

    def test_invalidate_one_and_all(self, content_service):
        content_service.load(SITE)
        content_service.load(NAVIGATION)

        content_service.invalidate(SITE)
        assert set(content_service.cached()) == {NAVIGATION}

        content_service.invalidate()
        assert content_service.cached() == {}

    def test_tracked_collections(self, content_service):
        names = [c.name for c in content_service.tracked_collections()]

        assert names == [NAVIGATION, SITE, RESOURCES]
        assert content_service.collection(SITE).path == "site.json"
