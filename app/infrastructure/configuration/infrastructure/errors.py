"""Error classifier infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class ErrorSettings(InfrastructureSettings):
    """Bounds for the error classifier's in-memory history.

    Environment Variables:
        ERROR_HISTORY_LIMIT: Classified errors kept in memory (default: 100)
        NETWORK_ERROR_HISTORY_LIMIT: Network error records kept (default: 100)
        ERROR_RECENT_COUNT: Errors reported as "recent" in stats (default: 10)
    """

    history_limit: int = Field(
        default=100,
        ge=1,
        alias="ERROR_HISTORY_LIMIT",
        description="Maximum number of classified errors retained",
    )
    network_history_limit: int = Field(
        default=100,
        ge=1,
        alias="NETWORK_ERROR_HISTORY_LIMIT",
        description="Maximum number of network error records retained",
    )
    recent_count: int = Field(
        default=10,
        ge=0,
        alias="ERROR_RECENT_COUNT",
        description="Number of most recent errors included in stats",
    )
