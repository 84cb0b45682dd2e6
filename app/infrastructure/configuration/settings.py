"""Top-level settings object composed of the per-concern sections."""

from typing import Any, Dict, Type

from pydantic_settings import BaseSettings, SettingsConfigDict

from infrastructure.configuration.features import SyncFeatureSettings
from infrastructure.configuration.infrastructure import (
    CacheSettings,
    ErrorSettings,
    NotificationSettings,
    RetrySettings,
)
from infrastructure.configuration.integrations import RemoteStoreSettings

# Section attribute -> settings class; each reads its own variables
SECTIONS: Dict[str, Type[BaseSettings]] = {
    "remote_store": RemoteStoreSettings,
    "sync": SyncFeatureSettings,
    "cache": CacheSettings,
    "retry": RetrySettings,
    "errors": ErrorSettings,
    "notifications": NotificationSettings,
}


class Settings(BaseSettings):
    """All configuration of the data-access layer.

    Environment Variables:
        PREFIX: Environment prefix; empty means production.
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR).

    Sections (see each class for its variables): ``remote_store``, ``sync``,
    ``cache``, ``retry``, ``errors``, ``notifications``.

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        interval = settings.sync.interval_seconds
        ```
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"

    remote_store: RemoteStoreSettings
    sync: SyncFeatureSettings
    cache: CacheSettings
    retry: RetrySettings
    errors: ErrorSettings
    notifications: NotificationSettings

    @property
    def is_production(self) -> bool:
        """True when no environment PREFIX is set."""
        return not self.PREFIX

    def __init__(self, **kwargs: Any):
        # Sections not passed explicitly are read from the environment
        for name, section_class in SECTIONS.items():
            kwargs.setdefault(name, section_class())
        super().__init__(**kwargs)


settings = Settings()
