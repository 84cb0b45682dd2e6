"""Unit tests for RetryConfig, its presets and retry predicates."""

from types import SimpleNamespace

import pytest

from infrastructure.errors import HttpStatusError, is_transient_error
from infrastructure.resilience import RetryConfig
from infrastructure.resilience.retry import (
    always_retry,
    is_retryable_api_error,
    is_retryable_database_error,
    is_retryable_file_error,
    never_retry,
)
from integrations.remote_store import TransportError

pytestmark = pytest.mark.unit


class TestRetryConfig:
    def test_defaults(self):
        config = RetryConfig()

        assert config.max_attempts == 3
        assert config.delay == 1.0
        assert config.backoff is True
        assert config.backoff_multiplier == 2.0
        assert config.max_delay == 30.0
        assert config.retry_condition is always_retry
        assert config.notify is True

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_attempts": 0},
            {"delay": -1},
            {"backoff_multiplier": 0.5},
            {"max_delay": -1},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            RetryConfig(**kwargs)

    def test_delay_for_with_backoff(self):
        config = RetryConfig(delay=1.0, backoff_multiplier=2.0, max_delay=30.0)

        assert [config.delay_for(n) for n in range(1, 7)] == [1, 2, 4, 8, 16, 30]

    def test_delay_for_without_backoff(self):
        config = RetryConfig(delay=0.75, backoff=False)

        assert config.delay_for(1) == config.delay_for(5) == 0.75

    def test_with_options_copies(self):
        base = RetryConfig()
        changed = base.with_options(max_attempts=5)

        assert changed.max_attempts == 5
        assert base.max_attempts == 3

    def test_frozen(self):
        with pytest.raises(AttributeError):
            RetryConfig().max_attempts = 10

    def test_from_settings(self):
        settings = SimpleNamespace(
            retry=SimpleNamespace(
                max_attempts=4,
                delay_seconds=0.2,
                backoff=False,
                backoff_multiplier=3.0,
                max_delay_seconds=9.0,
            )
        )

        config = RetryConfig.from_settings(settings, notify=False)

        assert config.max_attempts == 4
        assert config.delay == 0.2
        assert config.backoff is False
        assert config.backoff_multiplier == 3.0
        assert config.max_delay == 9.0
        assert config.notify is False


class TestPresets:
    def test_network(self):
        config = RetryConfig.network()

        assert (config.max_attempts, config.delay, config.backoff) == (3, 1.0, True)
        assert config.retry_condition is is_transient_error

    def test_api(self):
        config = RetryConfig.api()

        assert (config.max_attempts, config.delay, config.backoff) == (2, 0.5, False)
        assert config.retry_condition is is_retryable_api_error

    def test_file(self):
        config = RetryConfig.file()

        assert (config.max_attempts, config.delay, config.max_delay) == (5, 2.0, 10.0)

    def test_database(self):
        config = RetryConfig.database()

        assert (config.max_attempts, config.delay) == (3, 1.5)

    def test_none(self):
        config = RetryConfig.none()

        assert config.max_attempts == 1
        assert config.retry_condition is never_retry

    def test_overrides(self):
        config = RetryConfig.network(max_attempts=6, context="Load site")

        assert config.max_attempts == 6
        assert config.context == "Load site"


class TestPredicates:
    @pytest.mark.parametrize(
        "error,expected",
        [
            (HttpStatusError(500, "Internal Server Error"), True),
            (HttpStatusError(502, "Bad Gateway"), True),
            (HttpStatusError(503, "Service Unavailable"), True),
            (HttpStatusError(504, "Gateway Timeout"), False),
            (HttpStatusError(404, "Not Found"), False),
            (TransportError("upstream", status=503), True),
            (ValueError("HTTP 502: Bad Gateway"), True),
            (ValueError("nope"), False),
        ],
    )
    def test_api(self, error, expected):
        assert is_retryable_api_error(error) is expected

    @pytest.mark.parametrize(
        "error,expected",
        [
            (OSError("disk busy"), True),
            (FileNotFoundError("missing"), False),
            (PermissionError("denied"), False),
            (ValueError("could not read file"), True),
            (ValueError("nope"), False),
        ],
    )
    def test_file(self, error, expected):
        assert is_retryable_file_error(error) is expected

    @pytest.mark.parametrize(
        "error,expected",
        [
            (ConnectionError(), True),
            (TimeoutError(), True),
            (ValueError("database is locked"), True),
            (ValueError("Connection reset"), True),
            (ValueError("syntax error"), False),
        ],
    )
    def test_database(self, error, expected):
        assert is_retryable_database_error(error) is expected
