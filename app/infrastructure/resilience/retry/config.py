"""Retry policy configuration.

``RetryConfig`` describes how one operation is retried: how many attempts,
how long to wait between them, which failures are worth retrying and which
callbacks to invoke. Presets cover the common cases.
"""

from dataclasses import dataclass, replace
from typing import Any, Callable, Optional, TYPE_CHECKING

from infrastructure.errors import HttpStatusError, is_transient_error
from integrations.remote_store.errors import RemoteStoreError

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

RetryCondition = Callable[[BaseException], bool]
OnRetry = Callable[[int, BaseException], None]
OnSuccess = Callable[[Any, int], None]
OnFailure = Callable[[BaseException, int], None]


def always_retry(error: BaseException) -> bool:
    return True


def never_retry(error: BaseException) -> bool:
    return False


def _status_of(error: BaseException) -> Optional[int]:
    if isinstance(error, (HttpStatusError, RemoteStoreError)):
        return error.status
    return None


def is_retryable_api_error(error: BaseException) -> bool:
    """Retry only 500, 502 and 503 responses."""
    status = _status_of(error)
    if status is not None:
        return status in (500, 502, 503)
    message = str(error)
    return any(code in message for code in ("500", "502", "503"))


def is_retryable_file_error(error: BaseException) -> bool:
    """Retry I/O failures other than a missing file or a permission error."""
    if isinstance(error, (FileNotFoundError, PermissionError)):
        return False
    if isinstance(error, OSError):
        return True
    message = str(error).lower()
    return any(word in message for word in ("file", "read", "write"))


def is_retryable_database_error(error: BaseException) -> bool:
    """Retry connection drops, timeouts and lock contention."""
    if isinstance(error, (ConnectionError, TimeoutError)):
        return True
    message = str(error).lower()
    return any(word in message for word in ("connection", "timeout", "lock"))


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy for a single ``RetryEngine.execute`` call.

    Attributes:
        max_attempts: Total attempts, including the first one (>= 1)
        delay: Base delay between attempts in seconds (>= 0)
        backoff: Grow the delay geometrically between attempts
        backoff_multiplier: Growth factor when backoff is enabled (>= 1)
        max_delay: Cap for a single backed-off delay in seconds
        retry_condition: Predicate deciding whether a failure is retried
        on_retry: Called with (attempt, error) before waiting
        on_success: Called with (result, attempt) when an attempt succeeds
        on_failure: Called with (last error, attempts made) on final failure
        notify: Raise user notifications (final failure, success after retry)
        context: Description added to the classified error

    Example:
        config = RetryConfig(max_attempts=5, delay=0.5, max_delay=10)
        config = RetryConfig.network(max_attempts=4)
    """

    max_attempts: int = 3
    delay: float = 1.0
    backoff: bool = True
    backoff_multiplier: float = 2.0
    max_delay: float = 30.0
    retry_condition: RetryCondition = always_retry
    on_retry: Optional[OnRetry] = None
    on_success: Optional[OnSuccess] = None
    on_failure: Optional[OnFailure] = None
    notify: bool = True
    context: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay < 0:
            raise ValueError("delay must be >= 0")
        if self.backoff_multiplier < 1:
            raise ValueError("backoff_multiplier must be >= 1")
        if self.max_delay < 0:
            raise ValueError("max_delay must be >= 0")

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after failed attempt ``attempt`` (1-based).

        With backoff: min(delay * multiplier ^ (attempt - 1), max_delay).
        Without backoff: always ``delay``.
        """
        if not self.backoff:
            return self.delay
        return min(self.delay * self.backoff_multiplier ** (attempt - 1), self.max_delay)

    def with_options(self, **changes: Any) -> "RetryConfig":
        """Copy of this config with ``changes`` applied."""
        return replace(self, **changes)

    @classmethod
    def from_settings(cls, settings: "Settings", **overrides: Any) -> "RetryConfig":
        values = dict(
            max_attempts=settings.retry.max_attempts,
            delay=settings.retry.delay_seconds,
            backoff=settings.retry.backoff,
            backoff_multiplier=settings.retry.backoff_multiplier,
            max_delay=settings.retry.max_delay_seconds,
        )
        values.update(overrides)
        return cls(**values)

    # Presets

    @classmethod
    def network(cls, **overrides: Any) -> "RetryConfig":
        """3 attempts from 1s, backing off; transient network failures only."""
        values = dict(
            max_attempts=3, delay=1.0, backoff=True, retry_condition=is_transient_error
        )
        values.update(overrides)
        return cls(**values)

    @classmethod
    def api(cls, **overrides: Any) -> "RetryConfig":
        """2 attempts, fixed 0.5s delay; 500/502/503 only."""
        values = dict(
            max_attempts=2,
            delay=0.5,
            backoff=False,
            retry_condition=is_retryable_api_error,
        )
        values.update(overrides)
        return cls(**values)

    @classmethod
    def file(cls, **overrides: Any) -> "RetryConfig":
        """5 attempts from 2s, capped at 10s; I/O failures only."""
        values = dict(
            max_attempts=5,
            delay=2.0,
            backoff=True,
            max_delay=10.0,
            retry_condition=is_retryable_file_error,
        )
        values.update(overrides)
        return cls(**values)

    @classmethod
    def database(cls, **overrides: Any) -> "RetryConfig":
        """3 attempts from 1.5s; connection, timeout and lock failures only."""
        values = dict(
            max_attempts=3,
            delay=1.5,
            backoff=True,
            retry_condition=is_retryable_database_error,
        )
        values.update(overrides)
        return cls(**values)

    @classmethod
    def none(cls, **overrides: Any) -> "RetryConfig":
        """Single attempt; failures are still classified."""
        values = dict(max_attempts=1, retry_condition=never_retry)
        values.update(overrides)
        return cls(**values)

