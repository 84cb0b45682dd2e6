"""Notification center infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class NotificationSettings(InfrastructureSettings):
    """Notification center configuration.

    Environment Variables:
        NOTIFICATION_DEFAULT_DURATION_SECONDS: Auto-dismiss delay when a
            notification does not specify one (default: 4.0). 0 disables
            auto-dismiss.
    """

    default_duration_seconds: float = Field(
        default=4.0,
        ge=0,
        alias="NOTIFICATION_DEFAULT_DURATION_SECONDS",
        description="Default auto-dismiss delay (seconds)",
    )
