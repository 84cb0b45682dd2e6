"""Retry engine infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class RetrySettings(InfrastructureSettings):
    """Default policy for the retry engine.

    These values seed ``RetryConfig.from_settings``; callers can still pass a
    preset or an explicit config per call.

    Environment Variables:
        RETRY_MAX_ATTEMPTS: Maximum attempts per operation (default: 3)
        RETRY_DELAY_SECONDS: Base delay between attempts (default: 1.0)
        RETRY_BACKOFF: Enable exponential backoff (default: True)
        RETRY_BACKOFF_MULTIPLIER: Backoff growth factor (default: 2.0)
        RETRY_MAX_DELAY_SECONDS: Upper bound for a single delay (default: 30.0)
        RETRY_BATCH_CONCURRENCY: Operations per batch chunk (default: 3)

    Exponential Backoff:
        Delay before attempt i+1: min(delay * multiplier ^ (i - 1), max_delay)

        Example with defaults (delay=1s, multiplier=2, max=30s):
            After attempt 1: 1s
            After attempt 2: 2s
            After attempt 3: 4s
    """

    max_attempts: int = Field(
        default=3,
        ge=1,
        alias="RETRY_MAX_ATTEMPTS",
        description="Maximum attempts per operation",
    )
    delay_seconds: float = Field(
        default=1.0,
        ge=0,
        alias="RETRY_DELAY_SECONDS",
        description="Base delay between attempts (seconds)",
    )
    backoff: bool = Field(
        default=True,
        alias="RETRY_BACKOFF",
        description="Grow the delay geometrically between attempts",
    )
    backoff_multiplier: float = Field(
        default=2.0,
        ge=1,
        alias="RETRY_BACKOFF_MULTIPLIER",
        description="Growth factor applied per attempt when backoff is enabled",
    )
    max_delay_seconds: float = Field(
        default=30.0,
        ge=0,
        alias="RETRY_MAX_DELAY_SECONDS",
        description="Maximum delay between attempts (seconds)",
    )
    batch_concurrency: int = Field(
        default=3,
        ge=1,
        alias="RETRY_BATCH_CONCURRENCY",
        description="Number of operations run in parallel per batch chunk",
    )
