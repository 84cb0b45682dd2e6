"""Unit tests for the dependency providers."""

import pytest

from infrastructure.services import providers

pytestmark = pytest.mark.unit

PROVIDERS = [
    providers.get_settings,
    providers.get_event_bus,
    providers.get_notification_center,
    providers.get_cache,
    providers.get_error_classifier,
    providers.get_retry_engine,
    providers.get_local_storage,
    providers.get_remote_store,
    providers.get_content_service,
    providers.get_sync_coordinator,
]


@pytest.fixture(autouse=True)
def fresh_providers(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("REMOTE_STORE_OWNER", "octo")
    monkeypatch.setenv("REMOTE_STORE_REPO", "site-content")
    monkeypatch.setenv("SYNC_STATE_DIR", str(tmp_path / "state"))
    for provider in PROVIDERS:
        provider.cache_clear()
    yield
    for provider in PROVIDERS:
        provider.cache_clear()


class TestProviders:
    def test_singletons(self):
        assert providers.get_cache() is providers.get_cache()
        assert providers.get_sync_coordinator() is providers.get_sync_coordinator()

    def test_graph_shares_collaborators(self):
        coordinator = providers.get_sync_coordinator()
        content = providers.get_content_service()

        assert coordinator.content is content
        assert coordinator.cache is content.cache is providers.get_cache()
        assert content.retry.classifier is providers.get_error_classifier()
        assert providers.get_error_classifier().event_bus is providers.get_event_bus()
        assert (
            providers.get_error_classifier().notifications
            is providers.get_notification_center()
        )

    def test_settings_flow_into_services(self, monkeypatch):
        monkeypatch.setenv("CACHE_MAX_ENTRIES", "42")
        monkeypatch.setenv("SYNC_INTERVAL_SECONDS", "90")

        assert providers.get_cache().max_entries == 42
        assert providers.get_sync_coordinator().status.interval == 90

    def test_coordinator_not_started(self):
        assert providers.get_sync_coordinator().auto_sync_running is False

    def test_remote_store_requires_configuration(self, monkeypatch):
        monkeypatch.delenv("REMOTE_STORE_REPO")

        with pytest.raises(ValueError):
            providers.get_remote_store()
