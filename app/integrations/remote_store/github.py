"""GitHub contents API adapter.

Implements ``RemoteFileStore`` on top of the repository contents and commits
endpoints of the GitHub REST API.

Status Code Mapping:
- 401: UnauthorizedError
- 403: RateLimitedError when the rate limit is exhausted, else
  UnauthorizedError(status=403)
- 404: NotFoundError
- 409, 422: ConflictError
- 429: RateLimitedError
- 5xx and connection failures: TransportError (timeouts flagged)
"""

import base64
from datetime import datetime
from typing import Any, Dict, List, Optional, TYPE_CHECKING

import requests

from infrastructure.logging import get_module_logger
from integrations.remote_store.errors import (
    ConflictError,
    NotFoundError,
    RateLimitedError,
    RemoteStoreError,
    TransportError,
    UnauthorizedError,
)
from integrations.remote_store.protocol import RemoteCommit, RemoteFile

if TYPE_CHECKING:
    from infrastructure.configuration import RemoteStoreSettings

logger = get_module_logger()


def _parse_date(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _retry_after(response: requests.Response) -> Optional[float]:
    header_value = response.headers.get("Retry-After")
    if header_value:
        try:
            return float(header_value)
        except ValueError:
            return None
    return None


class GitHubContentsStore:
    """Remote file store backed by a GitHub repository branch.

    Usage:
        store = GitHubContentsStore("octo", "site-content", token="ghp_...")
        content = store.get_file_content("navigation.json")
        sha = store.update_file("navigation.json", content, "Update navigation")
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        branch: str = "main",
        token: Optional[str] = None,
        api_url: str = "https://api.github.com",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.owner = owner
        self.repo = repo
        self.branch = branch
        self.timeout = timeout
        self.base_url = f"{api_url.rstrip('/')}/repos/{owner}/{repo}"
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    @classmethod
    def from_settings(
        cls,
        settings: "RemoteStoreSettings",
        session: Optional[requests.Session] = None,
    ) -> "GitHubContentsStore":
        if not settings.is_configured:
            raise ValueError("REMOTE_STORE_OWNER and REMOTE_STORE_REPO must be set")
        return cls(
            owner=settings.owner,
            repo=settings.repo,
            branch=settings.branch,
            token=settings.token,
            api_url=settings.api_url,
            timeout=settings.timeout_seconds,
            session=session,
        )

    def _request(
        self, method: str, endpoint: str, path: Optional[str] = None, **kwargs: Any
    ) -> requests.Response:
        url = f"{self.base_url}/{endpoint}"
        try:
            response = self.session.request(
                method, url, timeout=self.timeout, **kwargs
            )
        except requests.Timeout as e:
            raise TransportError(
                f"Request timeout: {method} {url}", path=path, timeout=True
            ) from e
        except requests.RequestException as e:
            raise TransportError(
                f"Failed to fetch {method} {url}: {e}", path=path
            ) from e

        if not response.ok:
            self._raise_for_status(response, path)
        return response

    def _raise_for_status(
        self, response: requests.Response, path: Optional[str]
    ) -> None:
        status = response.status_code
        message = f"{status} {response.reason}: {self._error_message(response)}"

        logger.warning(
            "remote_store_request_failed",
            status=status,
            path=path,
            method=response.request.method if response.request else None,
        )

        if status == 404:
            raise NotFoundError(message, path=path, status=status)
        if status in (409, 422):
            raise ConflictError(message, path=path, status=status)
        if status == 429 or (
            status == 403 and response.headers.get("X-RateLimit-Remaining") == "0"
        ):
            raise RateLimitedError(
                message,
                path=path,
                status=status,
                retry_after=_retry_after(response),
            )
        if status in (401, 403):
            raise UnauthorizedError(message, path=path, status=status)
        if status >= 500:
            raise TransportError(message, path=path, status=status)
        raise RemoteStoreError(message, path=path, status=status)

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            return response.json().get("message", "")
        except ValueError:
            return response.text[:200]

    def get_file(self, path: str) -> RemoteFile:
        response = self._request(
            "GET", f"contents/{path}", path=path, params={"ref": self.branch}
        )
        data = response.json()
        if isinstance(data, list) or data.get("type") != "file":
            raise NotFoundError(f"Not a file: {path}", path=path)
        raw = data.get("content") or ""
        content = base64.b64decode(raw).decode("utf-8") if raw else ""
        return RemoteFile(path=path, content=content, sha=data["sha"])

    def get_file_content(self, path: str) -> str:
        return self.get_file(path).content

    def _put(
        self, path: str, content: str, message: str, sha: Optional[str]
    ) -> str:
        body: Dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": self.branch,
        }
        if sha is not None:
            body["sha"] = sha
        response = self._request("PUT", f"contents/{path}", path=path, json=body)
        revision = response.json()["content"]["sha"]
        logger.info("remote_file_written", path=path, revision=revision)
        return revision

    def create_file(self, path: str, content: str, message: str) -> str:
        return self._put(path, content, message, sha=None)

    def update_file(
        self, path: str, content: str, message: str, sha: Optional[str] = None
    ) -> str:
        """Replace a file. Without ``sha`` the current revision is fetched first."""
        if sha is None:
            sha = self.get_file(path).sha
        return self._put(path, content, message, sha=sha)

    def delete_file(self, path: str, message: str) -> str:
        sha = self.get_file(path).sha
        response = self._request(
            "DELETE",
            f"contents/{path}",
            path=path,
            json={"message": message, "sha": sha, "branch": self.branch},
        )
        logger.info("remote_file_deleted", path=path)
        return response.json()["commit"]["sha"]

    def list_commits(
        self, limit: int = 1, path: Optional[str] = None
    ) -> List[RemoteCommit]:
        params: Dict[str, Any] = {"sha": self.branch, "per_page": limit}
        if path is not None:
            params["path"] = path
        response = self._request("GET", "commits", path=path, params=params)
        return [
            RemoteCommit(
                sha=item["sha"],
                author_date=_parse_date(item["commit"]["author"]["date"]),
                message=item["commit"].get("message", ""),
            )
            for item in response.json()[:limit]
        ]
