"""Classified error models.

``AppError`` is the one error type that leaves the data-access layer after
classification. Its attributes are fixed at construction.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


class ErrorKind(str, Enum):
    """Error taxonomy shared by every component."""

    NETWORK_ERROR = "NETWORK_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"

    @classmethod
    def from_code(cls, code: Any) -> Optional["ErrorKind"]:
        """Return the kind for a recognized code, else None."""
        if isinstance(code, cls):
            return code
        try:
            return cls(code)
        except ValueError:
            return None


class AppError(Exception):
    """Typed, taxonomy-tagged wrapper around a raw failure.

    Attributes:
        code: ErrorKind of the failure
        message: Human-readable message
        details: Read-only mapping of extra context
        occurred_at: When the error was classified (UTC)
    """

    def __init__(
        self,
        code: ErrorKind,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(message)
        self.code = ErrorKind(code)
        self.message = message
        self.details = MappingProxyType(dict(details or {}))
        self.occurred_at = occurred_at or datetime.now(timezone.utc)
        self._frozen = True

    def __setattr__(self, name: str, value: Any) -> None:
        # Dunder attributes (__cause__, __traceback__, ...) belong to the
        # raise machinery and stay writable.
        if getattr(self, "_frozen", False) and not name.startswith("__"):
            raise AttributeError(f"AppError is immutable; cannot set {name!r}")
        super().__setattr__(name, value)

    def __repr__(self) -> str:
        return f"AppError(code={self.code.value!r}, message={self.message!r})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": dict(self.details),
            "occurred_at": self.occurred_at.isoformat(),
        }


class HttpStatusError(Exception):
    """Raised for a non-2xx HTTP response.

    The message reads ``HTTP <status>: <status_text>``.
    """

    def __init__(self, status: int, status_text: str = "", url: Optional[str] = None):
        super().__init__(f"HTTP {status}: {status_text}")
        self.status = status
        self.status_text = status_text
        self.url = url


@dataclass(frozen=True)
class NetworkErrorRecord:
    """Diagnostic record of a failed HTTP exchange."""

    url: str
    method: str
    status: Optional[int] = None
    status_text: str = ""
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "method": self.method,
            "status": self.status,
            "status_text": self.status_text,
            "occurred_at": self.occurred_at.isoformat(),
        }


@dataclass(frozen=True)
class ValidationIssue:
    """One failed validation rule."""

    field: str
    message: str
    code: str = "INVALID"

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message, "code": self.code}
