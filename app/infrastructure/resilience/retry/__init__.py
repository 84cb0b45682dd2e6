"""Retry engine with exponential backoff and error classification."""

from infrastructure.resilience.retry.config import (
    RetryConfig,
    always_retry,
    is_retryable_api_error,
    is_retryable_database_error,
    is_retryable_file_error,
    never_retry,
)
from infrastructure.resilience.retry.engine import (
    RetryEngine,
    RetryNotAllowedError,
)
from infrastructure.resilience.retry.models import RetryInfo, RetryState, RetryStats

__all__ = [
    "RetryConfig",
    "RetryEngine",
    "RetryInfo",
    "RetryNotAllowedError",
    "RetryState",
    "RetryStats",
    "always_retry",
    "is_retryable_api_error",
    "is_retryable_database_error",
    "is_retryable_file_error",
    "never_retry",
]
