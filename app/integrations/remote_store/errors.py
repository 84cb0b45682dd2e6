"""Typed failures raised by remote file store adapters.

Every adapter maps its transport-level failures onto these classes so that
the error classifier can tag them without looking at message text.
"""

from typing import Optional


class RemoteStoreError(Exception):
    """Base class for remote store failures.

    Attributes:
        path: Repository path the operation targeted, if any
        status: HTTP status code reported by the remote, if any
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        status: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.path = path
        self.status = status


class NotFoundError(RemoteStoreError):
    """The file (or repository) does not exist."""


class ConflictError(RemoteStoreError):
    """The write was rejected because the revision token is stale."""


class RateLimitedError(RemoteStoreError):
    """The remote throttled the request.

    Attributes:
        retry_after: Seconds the remote asked us to wait, if it said so
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        status: Optional[int] = 429,
        retry_after: Optional[float] = None,
    ):
        super().__init__(message, path=path, status=status)
        self.retry_after = retry_after


class UnauthorizedError(RemoteStoreError):
    """Credentials are missing, invalid (401) or lack permission (403)."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        status: Optional[int] = 401,
    ):
        super().__init__(message, path=path, status=status)


class TransportError(RemoteStoreError):
    """The request did not complete: connection failure, timeout or 5xx.

    Attributes:
        timeout: True when the request timed out
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        status: Optional[int] = None,
        timeout: bool = False,
    ):
        super().__init__(message, path=path, status=status)
        self.timeout = timeout
