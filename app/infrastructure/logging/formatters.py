"""structlog processors for the content data-access layer.

Usage:
    from infrastructure.logging.formatters import redact_credentials
"""

import re
from typing import Any

# Keys whose values never reach the log output
CREDENTIAL_KEYS = frozenset(
    {
        "token",
        "authorization",
        "password",
        "secret",
        "api_key",
        "cookie",
    }
)

# Bearer headers and GitHub personal/app tokens embedded in messages or URLs
_TOKEN_PATTERN = re.compile(
    r"(Bearer\s+\S+|gh[pousr]_[A-Za-z0-9]{8,}|github_pat_\w+)",
    re.IGNORECASE,
)


def redact_credentials(
    replacement: str = "***REDACTED***",
    extra_keys: frozenset[str] | None = None,
):
    """Build a processor hiding the remote store token.

    A value is replaced when its key contains one of ``CREDENTIAL_KEYS``
    (case-insensitive). Other string values are scrubbed of anything that
    looks like a bearer header or GitHub token, which covers error messages
    that echo request headers.

    Args:
        replacement: Text written in place of a credential.
        extra_keys: More key fragments to treat as credentials.
    """
    keys = CREDENTIAL_KEYS | extra_keys if extra_keys else CREDENTIAL_KEYS

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        for key, value in event_dict.items():
            if value is None:
                continue
            lowered = key.lower()
            if any(fragment in lowered for fragment in keys):
                event_dict[key] = replacement
            elif isinstance(value, str):
                event_dict[key] = _TOKEN_PATTERN.sub(replacement, value)
        return event_dict

    return processor


def summarize_documents(max_length: int = 500):
    """Build a processor keeping content documents out of log lines.

    Lists and dicts are logged as a short summary; long strings (raw JSON
    file content) are cut at ``max_length``. The ``event`` key is never
    touched.
    """

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        for key, value in event_dict.items():
            if key == "event":
                continue
            if isinstance(value, list) and len(value) > 10:
                event_dict[key] = f"<list of {len(value)} items>"
            elif isinstance(value, dict) and len(value) > 10:
                event_dict[key] = f"<object with {len(value)} keys>"
            elif isinstance(value, str) and len(value) > max_length:
                event_dict[key] = f"{value[:max_length]}...<{len(value)} chars>"
        return event_dict

    return processor
