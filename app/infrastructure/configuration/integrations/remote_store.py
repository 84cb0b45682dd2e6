"""Remote file store integration settings."""

from typing import Optional

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class RemoteStoreSettings(IntegrationSettings):
    """Connection settings for the GitHub-backed content repository.

    Environment Variables:
        REMOTE_STORE_API_URL: REST API base URL (default: https://api.github.com)
        REMOTE_STORE_OWNER: Repository owner (user or organization)
        REMOTE_STORE_REPO: Repository name
        REMOTE_STORE_BRANCH: Branch holding the content files (default: main)
        REMOTE_STORE_TOKEN: Personal access token used for writes
        REMOTE_STORE_TIMEOUT_SECONDS: Per-request timeout (default: 10)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        if settings.remote_store.is_configured:
            store = GitHubContentsStore.from_settings(settings.remote_store)
        ```
    """

    api_url: str = Field(
        default="https://api.github.com",
        alias="REMOTE_STORE_API_URL",
        description="Base URL of the GitHub REST API",
    )
    owner: Optional[str] = Field(
        default=None,
        alias="REMOTE_STORE_OWNER",
        description="Owner of the content repository",
    )
    repo: Optional[str] = Field(
        default=None,
        alias="REMOTE_STORE_REPO",
        description="Name of the content repository",
    )
    branch: str = Field(
        default="main",
        alias="REMOTE_STORE_BRANCH",
        description="Branch the content files are read from and committed to",
    )
    token: Optional[str] = Field(
        default=None,
        alias="REMOTE_STORE_TOKEN",
        description="Access token sent as a bearer token",
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        alias="REMOTE_STORE_TIMEOUT_SECONDS",
        description="Timeout applied to every HTTP request (seconds)",
    )

    @property
    def is_configured(self) -> bool:
        """True when both owner and repo are set."""
        return bool(self.owner and self.repo)
