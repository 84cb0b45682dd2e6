"""User-facing notification center.

Exports:
    NotificationCenter: Holds active notifications and auto-dismisses them
    Notification: Immutable notification record
    NotificationType: success / error / warning / info
    NotificationAction: added / dismissed, passed to listeners
"""

from infrastructure.notifications.models import (
    Notification,
    NotificationAction,
    NotificationType,
)
from infrastructure.notifications.service import (
    NotificationCenter,
    NotificationListener,
)

__all__ = [
    "Notification",
    "NotificationAction",
    "NotificationCenter",
    "NotificationListener",
    "NotificationType",
]
