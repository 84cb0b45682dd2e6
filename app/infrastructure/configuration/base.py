"""Base classes for the settings sections.

Each section reads its own environment variables (and ``.env``) by alias,
ignores variables that belong to other sections, and can also be built
with field names in tests, e.g. ``CacheSettings(max_entries=10)``.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    case_sensitive=True,
    extra="ignore",
    populate_by_name=True,
)


class SectionSettings(BaseSettings):
    """Common behaviour of every settings section."""

    model_config = SECTION_CONFIG


class InfrastructureSettings(SectionSettings):
    """Cache, retry, error history and notification settings."""


class FeatureSettings(SectionSettings):
    """Settings owned by a feature module (sync)."""


class IntegrationSettings(SectionSettings):
    """Settings for an external collaborator (the remote store)."""
