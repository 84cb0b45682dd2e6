"""In-memory remote file store for tests."""

import hashlib
import threading
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from integrations.remote_store import (
    ConflictError,
    NotFoundError,
    RemoteCommit,
    RemoteFile,
)

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class InMemoryRemoteStore:
    """Dict-backed stand-in for the GitHub adapter.

    Every write records a commit one minute after the previous one, starting
    at ``BASE_TIME``. ``failures`` queues exceptions per (operation, path);
    each call pops and raises the next one.

    Example:
        store = InMemoryRemoteStore({"site.json": "{}"})
        store.fail("get_file_content", "site.json", TransportError("down"))
    """

    def __init__(self, files: Optional[Dict[str, str]] = None):
        self.files: Dict[str, RemoteFile] = {}
        self.history: List[Tuple[str, RemoteCommit]] = []
        self.calls: List[Tuple[str, Optional[str]]] = []
        self.failures: Dict[Tuple[str, Optional[str]], List[BaseException]] = {}
        self._clock = BASE_TIME
        self._counter = 0
        self._lock = threading.Lock()
        for path, content in (files or {}).items():
            self._commit(path, content, f"Seed {path}")

    def set_commit_time(self, when: datetime) -> None:
        """The next commit is dated ``when``."""
        with self._lock:
            self._clock = when - timedelta(minutes=1)

    def fail(self, operation: str, path: Optional[str], *errors: BaseException) -> None:
        self.failures.setdefault((operation, path), []).extend(errors)

    def count(self, operation: str, path: Optional[str] = None) -> int:
        return sum(
            1
            for name, target in self.calls
            if name == operation and (path is None or target == path)
        )

    def _record(self, operation: str, path: Optional[str]) -> None:
        self.calls.append((operation, path))
        queue = self.failures.get((operation, path))
        if queue:
            raise queue.pop(0)

    def _commit(self, path: str, content: Optional[str], message: str) -> str:
        self._counter += 1
        self._clock = self._clock + timedelta(minutes=1)
        sha = hashlib.sha1(f"{self._counter}:{content}".encode("utf-8")).hexdigest()
        if content is None:
            self.files.pop(path, None)
        else:
            self.files[path] = RemoteFile(path=path, content=content, sha=sha)
        commit = RemoteCommit(sha=f"commit-{self._counter}", author_date=self._clock, message=message)
        self.history.insert(0, (path, commit))
        return sha

    def _existing(self, path: str) -> RemoteFile:
        try:
            return self.files[path]
        except KeyError:
            raise NotFoundError(f"404 Not Found: {path}", path=path, status=404) from None

    def get_file(self, path: str) -> RemoteFile:
        with self._lock:
            self._record("get_file", path)
            return self._existing(path)

    def get_file_content(self, path: str) -> str:
        with self._lock:
            self._record("get_file_content", path)
            return self._existing(path).content

    def create_file(self, path: str, content: str, message: str) -> str:
        with self._lock:
            self._record("create_file", path)
            if path in self.files:
                raise ConflictError(f"422 File exists: {path}", path=path, status=422)
            return self._commit(path, content, message)

    def update_file(
        self, path: str, content: str, message: str, sha: Optional[str] = None
    ) -> str:
        with self._lock:
            self._record("update_file", path)
            current = self._existing(path)
            if sha is not None and sha != current.sha:
                raise ConflictError(f"409 Stale sha: {path}", path=path, status=409)
            return self._commit(path, content, message)

    def delete_file(self, path: str, message: str) -> str:
        with self._lock:
            self._record("delete_file", path)
            self._existing(path)
            self._commit(path, None, message)
            return self.history[0][1].sha

    def list_commits(
        self, limit: int = 1, path: Optional[str] = None
    ) -> List[RemoteCommit]:
        with self._lock:
            self._record("list_commits", path)
            commits = [
                commit
                for commit_path, commit in self.history
                if path is None or commit_path == path
            ]
            return commits[:limit]
