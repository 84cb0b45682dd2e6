"""Remote versioned file store integration.

Exports:
    RemoteFileStore: Protocol consumed by the content module
    GitHubContentsStore: GitHub contents API implementation
    RemoteStoreError and subclasses: Typed failures raised by adapters
"""

from integrations.remote_store.errors import (
    ConflictError,
    NotFoundError,
    RateLimitedError,
    RemoteStoreError,
    TransportError,
    UnauthorizedError,
)
from integrations.remote_store.github import GitHubContentsStore
from integrations.remote_store.protocol import (
    RemoteCommit,
    RemoteFile,
    RemoteFileStore,
)

__all__ = [
    "ConflictError",
    "GitHubContentsStore",
    "NotFoundError",
    "RateLimitedError",
    "RemoteCommit",
    "RemoteFile",
    "RemoteFileStore",
    "RemoteStoreError",
    "TransportError",
    "UnauthorizedError",
]
