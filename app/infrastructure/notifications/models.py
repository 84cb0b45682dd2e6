"""Notification models.

The notification center only records what should be shown to the user;
rendering is left to whoever subscribes to the center.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class NotificationType(str, Enum):
    """Severity of a user-facing notification."""

    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class NotificationAction(str, Enum):
    """Change reported to notification listeners."""

    ADDED = "added"
    DISMISSED = "dismissed"


class Notification(BaseModel):
    """A single user-facing notification.

    Attributes:
        id: Unique identifier used to dismiss the notification
        type: NotificationType severity
        title: Short headline
        message: Optional body text
        duration: Seconds before auto-dismiss; 0 keeps it until dismissed
        closable: Whether the user may dismiss it manually
        created_at: When it was raised (UTC)

    Example:
        notification = Notification(
            type=NotificationType.ERROR,
            title="Authentication failed",
            duration=0,
        )
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    type: NotificationType
    title: str
    message: Optional[str] = None
    duration: float = Field(default=4.0, ge=0)
    closable: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_persistent(self) -> bool:
        """True when the notification never auto-dismisses."""
        return self.duration == 0
