"""Error classifiers for raw failures.

Maps exceptions onto the ``ErrorKind`` taxonomy. Typed failures (remote
store errors, HTTP status errors, ``requests`` and builtin OS errors,
pydantic validation errors) are mapped by type; anything else falls back to
matching the message text.

Key Functions:
- classify_exception(): exception -> (ErrorKind, details)
- classify_message(): message text -> ErrorKind
- is_transient_error(): retry predicate for failures worth retrying

Usage:
    from infrastructure.errors.classifiers import classify_exception

    try:
        store.get_file_content("site.json")
    except Exception as exc:
        kind, details = classify_exception(exc)
"""

from typing import Any, Dict, List, Tuple

import requests
from pydantic import ValidationError

from infrastructure.errors.models import (
    AppError,
    ErrorKind,
    HttpStatusError,
    ValidationIssue,
)
from integrations.remote_store.errors import (
    ConflictError,
    NotFoundError,
    RateLimitedError,
    RemoteStoreError,
    TransportError,
    UnauthorizedError,
)

# Checked in order; the first match wins.
_MESSAGE_PATTERNS = (
    (("fetch",), ErrorKind.NETWORK_ERROR),
    (("401", "Unauthorized"), ErrorKind.AUTH_ERROR),
    (("403", "Forbidden"), ErrorKind.PERMISSION_DENIED),
    (("404", "Not Found"), ErrorKind.NOT_FOUND),
    (("timeout",), ErrorKind.TIMEOUT_ERROR),
)


def classify_message(message: str) -> ErrorKind:
    """Classify unstructured error text by substring.

    Case-sensitive, in priority order: "fetch", "401"/"Unauthorized",
    "403"/"Forbidden", "404"/"Not Found", "timeout". Used only when the
    exception type tells us nothing.
    """
    for needles, kind in _MESSAGE_PATTERNS:
        if any(needle in message for needle in needles):
            return kind
    return ErrorKind.UNKNOWN_ERROR


def validation_issues_from(exc: ValidationError) -> List[ValidationIssue]:
    """Flatten a pydantic ValidationError into field/message/code issues."""
    return [
        ValidationIssue(
            field=".".join(str(part) for part in error["loc"]) or "__root__",
            message=error["msg"],
            code=error["type"].upper(),
        )
        for error in exc.errors()
    ]


def _remote_details(exc: RemoteStoreError) -> Dict[str, Any]:
    details: Dict[str, Any] = {}
    if exc.path is not None:
        details["path"] = exc.path
    if exc.status is not None:
        details["status"] = exc.status
    return details


def classify_exception(exc: BaseException) -> Tuple[ErrorKind, Dict[str, Any]]:
    """Classify an exception into an ErrorKind plus structured details.

    Args:
        exc: Any exception.

    Returns:
        Tuple of the ErrorKind and a details dict (may be empty).
    """
    if isinstance(exc, AppError):
        return exc.code, dict(exc.details)

    # Errors from other layers that already carry a taxonomy code
    recognized = ErrorKind.from_code(getattr(exc, "code", None))
    if recognized is not None:
        return recognized, {}

    if isinstance(exc, RemoteStoreError):
        details = _remote_details(exc)
        if isinstance(exc, NotFoundError):
            return ErrorKind.NOT_FOUND, details
        if isinstance(exc, UnauthorizedError):
            if exc.status == 403:
                return ErrorKind.PERMISSION_DENIED, details
            return ErrorKind.AUTH_ERROR, details
        if isinstance(exc, RateLimitedError):
            details["retry_after"] = exc.retry_after
            details["rate_limited"] = True
            return ErrorKind.NETWORK_ERROR, details
        if isinstance(exc, ConflictError):
            details["remote_error"] = "conflict"
            return ErrorKind.UNKNOWN_ERROR, details
        if isinstance(exc, TransportError):
            if exc.timeout:
                return ErrorKind.TIMEOUT_ERROR, details
            return ErrorKind.NETWORK_ERROR, details
        return classify_message(exc.message), details

    if isinstance(exc, HttpStatusError):
        return ErrorKind.NETWORK_ERROR, {"status": exc.status, "url": exc.url}

    if isinstance(exc, ValidationError):
        return ErrorKind.VALIDATION_ERROR, {
            "validation_errors": [
                issue.to_dict() for issue in validation_issues_from(exc)
            ]
        }

    # requests.Timeout must be checked before ConnectionError (ConnectTimeout is both)
    if isinstance(exc, (requests.Timeout, TimeoutError)):
        return ErrorKind.TIMEOUT_ERROR, {}
    if isinstance(exc, (requests.ConnectionError, ConnectionError)):
        return ErrorKind.NETWORK_ERROR, {}
    if isinstance(exc, PermissionError):
        return ErrorKind.PERMISSION_DENIED, {}
    if isinstance(exc, FileNotFoundError):
        return ErrorKind.NOT_FOUND, {}

    return classify_message(str(exc)), {}


def is_transient_error(exc: BaseException) -> bool:
    """True for failures that a retry may fix.

    Transport failures, timeouts, rate limiting and 5xx responses are
    transient. Not-found, auth, conflict and validation failures are not.

    Example:
        engine.execute(load, RetryConfig(retry_condition=is_transient_error))
    """
    if isinstance(exc, AppError):
        return exc.code in (ErrorKind.NETWORK_ERROR, ErrorKind.TIMEOUT_ERROR)
    if isinstance(exc, (TransportError, RateLimitedError)):
        return True
    if isinstance(exc, RemoteStoreError):
        return False
    if isinstance(exc, HttpStatusError):
        return exc.status >= 500 or exc.status in (408, 429)
    if isinstance(exc, (requests.Timeout, requests.ConnectionError)):
        return True
    if isinstance(exc, (TimeoutError, ConnectionError)):
        return True

    kind = classify_message(str(exc))
    return kind in (ErrorKind.NETWORK_ERROR, ErrorKind.TIMEOUT_ERROR)
