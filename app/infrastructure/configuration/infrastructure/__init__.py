"""Infrastructure settings __init__ - exports all infrastructure settings."""

from infrastructure.configuration.infrastructure.cache import CacheSettings
from infrastructure.configuration.infrastructure.errors import ErrorSettings
from infrastructure.configuration.infrastructure.notifications import (
    NotificationSettings,
)
from infrastructure.configuration.infrastructure.retry import RetrySettings

__all__ = [
    "CacheSettings",
    "ErrorSettings",
    "NotificationSettings",
    "RetrySettings",
]
