"""Contract for remote, versioned file stores.

Content is addressed by repository path. Every write returns a revision
token (the new blob sha for GitHub). Adapters raise the typed failures in
``integrations.remote_store.errors``.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class RemoteFile:
    """A file as stored remotely."""

    path: str
    content: str
    sha: str


@dataclass(frozen=True)
class RemoteCommit:
    """A commit touching the repository."""

    sha: str
    author_date: datetime
    message: str = ""


@runtime_checkable
class RemoteFileStore(Protocol):
    """Operations the data-access layer consumes from the remote store."""

    def get_file(self, path: str) -> RemoteFile:
        """Fetch a file with its revision token."""
        ...

    def get_file_content(self, path: str) -> str:
        """Fetch a file's decoded text content."""
        ...

    def create_file(self, path: str, content: str, message: str) -> str:
        """Create a new file; returns the revision token."""
        ...

    def update_file(
        self, path: str, content: str, message: str, sha: Optional[str] = None
    ) -> str:
        """Replace an existing file; returns the new revision token."""
        ...

    def delete_file(self, path: str, message: str) -> str:
        """Delete a file; returns the revision token of the deleting commit."""
        ...

    def list_commits(
        self, limit: int = 1, path: Optional[str] = None
    ) -> List[RemoteCommit]:
        """Newest-first commits, optionally restricted to one path."""
        ...
