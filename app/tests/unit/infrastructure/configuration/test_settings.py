"""Unit tests for the settings aggregator and its sections."""

import pytest
from pydantic import ValidationError

from infrastructure.configuration import (
    CacheSettings,
    NotificationSettings,
    RemoteStoreSettings,
    RetrySettings,
    Settings,
    SyncFeatureSettings,
)

pytestmark = pytest.mark.unit

ENV_NAMES = [
    "PREFIX",
    "CACHE_MAX_ENTRIES",
    "CACHE_DEFAULT_TTL_SECONDS",
    "RETRY_MAX_ATTEMPTS",
    "RETRY_DELAY_SECONDS",
    "SYNC_INTERVAL_SECONDS",
    "SYNC_AUTO_ENABLED",
    "REMOTE_STORE_OWNER",
    "REMOTE_STORE_REPO",
    "REMOTE_STORE_TOKEN",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)


class TestDefaults:
    def test_sections_built_automatically(self):
        settings = Settings()

        assert settings.cache.max_entries == 100
        assert settings.cache.default_ttl_seconds == 300.0
        assert settings.retry.max_attempts == 3
        assert settings.retry.delay_seconds == 1.0
        assert settings.retry.max_delay_seconds == 30.0
        assert settings.sync.interval_seconds == 300.0
        assert settings.sync.backup_retention == 5
        assert settings.notifications.default_duration_seconds == 4.0
        assert settings.errors.recent_count == 10
        assert settings.remote_store.branch == "main"

    def test_is_production(self):
        assert Settings().is_production is True
        assert Settings(PREFIX="dev-").is_production is False

    def test_section_override(self):
        settings = Settings(cache=CacheSettings(max_entries=5))

        assert settings.cache.max_entries == 5


class TestEnvironment:
    def test_values_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("CACHE_MAX_ENTRIES", "25")
        monkeypatch.setenv("RETRY_MAX_ATTEMPTS", "5")
        monkeypatch.setenv("SYNC_INTERVAL_SECONDS", "60")
        monkeypatch.setenv("SYNC_AUTO_ENABLED", "false")

        settings = Settings()

        assert settings.cache.max_entries == 25
        assert settings.retry.max_attempts == 5
        assert settings.sync.interval_seconds == 60.0
        assert settings.sync.auto_enabled is False

    def test_invalid_values_rejected(self, monkeypatch):
        monkeypatch.setenv("CACHE_MAX_ENTRIES", "0")

        with pytest.raises(ValidationError):
            CacheSettings()

    def test_remote_store_configured(self, monkeypatch):
        assert RemoteStoreSettings().is_configured is False

        monkeypatch.setenv("REMOTE_STORE_OWNER", "octo")
        monkeypatch.setenv("REMOTE_STORE_REPO", "site-content")

        assert RemoteStoreSettings().is_configured is True


class TestSectionValidation:
    def test_retry_bounds(self):
        with pytest.raises(ValidationError):
            RetrySettings(backoff_multiplier=0.5)

    def test_sync_interval_positive(self):
        with pytest.raises(ValidationError):
            SyncFeatureSettings(interval_seconds=0)

    def test_notification_duration_non_negative(self):
        assert NotificationSettings(default_duration_seconds=0).default_duration_seconds == 0
        with pytest.raises(ValidationError):
            NotificationSettings(default_duration_seconds=-1)
