"""Resilience patterns for the data-access layer.

Exports the retry engine, its configuration and presets, and the HTTP
convenience that runs a request through the engine.
"""

from infrastructure.resilience.http import fetch_with_retry
from infrastructure.resilience.retry import (
    RetryConfig,
    RetryEngine,
    RetryInfo,
    RetryNotAllowedError,
    RetryState,
    RetryStats,
)

__all__ = [
    "RetryConfig",
    "RetryEngine",
    "RetryInfo",
    "RetryNotAllowedError",
    "RetryState",
    "RetryStats",
    "fetch_with_retry",
]
