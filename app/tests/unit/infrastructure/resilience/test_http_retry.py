"""Unit tests for fetch_with_retry."""

from unittest.mock import MagicMock

import pytest
import requests

from infrastructure.errors import AppError, ErrorKind
from infrastructure.resilience import RetryConfig, fetch_with_retry

pytestmark = pytest.mark.unit

FAST = RetryConfig.network(delay=0.1)


def _response(status, reason="OK"):
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    response.reason = reason
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


class TestFetchWithRetry:
    def test_returns_successful_response(self, retry_engine, session):
        ok = _response(200)
        session.request.return_value = ok

        response = fetch_with_retry(
            retry_engine, "https://example.org/site.json", session=session, config=FAST
        )

        assert response is ok
        session.request.assert_called_once_with(
            "GET", "https://example.org/site.json", timeout=10.0
        )

    def test_retries_server_errors(self, retry_engine, session, sleeps, classifier):
        ok = _response(200)
        session.request.side_effect = [_response(503, "Service Unavailable"), ok]

        response = fetch_with_retry(
            retry_engine, "https://example.org/api", session=session, config=FAST
        )

        assert response is ok
        assert sleeps == [0.1]
        [record] = classifier.network_errors
        assert record.status == 503
        assert record.status_text == "Service Unavailable"

    def test_client_error_not_retried(self, retry_engine, session, sleeps):
        session.request.return_value = _response(404, "Not Found")

        with pytest.raises(AppError) as exc_info:
            fetch_with_retry(
                retry_engine, "https://example.org/missing", session=session, config=FAST
            )

        assert exc_info.value.code is ErrorKind.NETWORK_ERROR
        assert str(exc_info.value.__cause__) == "HTTP 404: Not Found"
        assert session.request.call_count == 1
        assert sleeps == []

    def test_redirect_status_is_failure(self, retry_engine, session):
        session.request.return_value = _response(304, "Not Modified")

        with pytest.raises(AppError):
            fetch_with_retry(
                retry_engine, "https://example.org/x", session=session, config=FAST
            )

    def test_connection_errors_retried(self, retry_engine, session, sleeps):
        ok = _response(200)
        session.request.side_effect = [requests.ConnectionError("reset"), ok]

        response = fetch_with_retry(
            retry_engine, "https://example.org/x", session=session, config=FAST
        )

        assert response is ok
        assert sleeps == [0.1]

    def test_request_kwargs_forwarded(self, retry_engine, session):
        session.request.return_value = _response(201, "Created")

        fetch_with_retry(
            retry_engine,
            "https://example.org/items",
            method="POST",
            session=session,
            config=FAST,
            timeout=3,
            json={"a": 1},
        )

        session.request.assert_called_once_with(
            "POST", "https://example.org/items", timeout=3, json={"a": 1}
        )
