"""Infrastructure components of the data-access layer.

Centralized infrastructure components:
- configuration: Settings management (settings, Settings)
- logging: Structured logging (get_module_logger)
- events: In-process event bus (EventBus, AUTH_LOGOUT)
- notifications: User-facing notification center
- cache: Bounded TTL cache
- errors: Error taxonomy and classifier (ErrorClassifier, AppError)
- resilience: Retry engine and HTTP convenience
- persistence: Local key/value storage
- services: Dependency injection providers (get_settings, get_cache, ...)
"""

# Configuration
from infrastructure.configuration import settings

# Logging
from infrastructure.logging import get_module_logger

__all__ = [
    "settings",
    "get_module_logger",
]
