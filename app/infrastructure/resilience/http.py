"""HTTP convenience built on the retry engine.

Usage:
    from infrastructure.resilience.http import fetch_with_retry

    response = fetch_with_retry(engine, "https://example.org/site.json")
    data = response.json()
"""

from typing import Any, Optional

import requests

from infrastructure.errors import HttpStatusError
from infrastructure.resilience.retry import RetryConfig, RetryEngine


def fetch_with_retry(
    engine: RetryEngine,
    url: str,
    method: str = "GET",
    session: Optional[requests.Session] = None,
    config: Optional[RetryConfig] = None,
    timeout: Optional[float] = 10.0,
    **request_kwargs: Any,
) -> requests.Response:
    """Send an HTTP request through ``engine.execute``.

    Each non-2xx response is recorded with the classifier's network error
    history (without a notification) and raised as
    ``HttpStatusError("HTTP <status>: <reason>")``, which classifies as
    NETWORK_ERROR. Retries follow ``config``, by default the network preset.

    Args:
        engine: Retry engine to run the request with.
        url: Request URL.
        method: HTTP method.
        session: Session to send with; a new one is created if omitted.
        config: Retry policy; defaults to ``RetryConfig.network()``.
        timeout: Per-request timeout in seconds.
        **request_kwargs: Passed to ``Session.request`` (headers, json, ...).

    Returns:
        The successful response.

    Raises:
        AppError: When the request keeps failing.
    """
    http = session or requests.Session()

    def send() -> requests.Response:
        response = http.request(method, url, timeout=timeout, **request_kwargs)
        if not 200 <= response.status_code < 300:
            error = HttpStatusError(response.status_code, response.reason or "", url)
            engine.classifier.handle_network_error(
                error,
                url=url,
                method=method,
                status=response.status_code,
                status_text=response.reason or "",
                notify=False,
            )
            raise error
        return response

    return engine.execute(send, config or RetryConfig.network())
