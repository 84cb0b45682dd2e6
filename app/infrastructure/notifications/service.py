"""Notification center.

Process-wide sink for user-facing notifications. Every component that needs
to tell the user something (the error classifier, the retry engine, the sync
coordinator) receives the same ``NotificationCenter`` instance.
"""

import threading
from typing import Callable, Dict, List, Optional, TYPE_CHECKING

from infrastructure.logging import get_module_logger
from infrastructure.notifications.models import (
    Notification,
    NotificationAction,
    NotificationType,
)

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()

NotificationListener = Callable[[NotificationAction, Notification], None]


class NotificationCenter:
    """Holds active notifications and auto-dismisses them on a timer.

    Usage:
        center = NotificationCenter(default_duration=4.0)
        notification_id = center.error("Network error", "Check your connection")
        center.dismiss(notification_id)

    Listeners registered with :meth:`subscribe` are told about every added and
    dismissed notification. A failing listener is logged and skipped.
    """

    def __init__(self, default_duration: float = 4.0):
        self.default_duration = default_duration
        self._active: Dict[str, Notification] = {}
        self._timers: Dict[str, threading.Timer] = {}
        self._listeners: List[NotificationListener] = []
        self._lock = threading.Lock()
        self.log = logger.bind(component="notification_center")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "NotificationCenter":
        return cls(default_duration=settings.notifications.default_duration_seconds)

    def notify(
        self,
        type: NotificationType,
        title: str,
        message: Optional[str] = None,
        duration: Optional[float] = None,
        closable: bool = True,
    ) -> str:
        """Record a notification and schedule its auto-dismiss.

        Args:
            type: Severity of the notification.
            title: Short headline.
            message: Optional body text.
            duration: Seconds before auto-dismiss. ``None`` uses the default;
                0 keeps the notification until it is dismissed.
            closable: Whether the user may dismiss it.

        Returns:
            The notification id.
        """
        notification = Notification(
            type=type,
            title=title,
            message=message,
            duration=self.default_duration if duration is None else duration,
            closable=closable,
        )

        with self._lock:
            self._active[notification.id] = notification
            if not notification.is_persistent:
                timer = threading.Timer(
                    notification.duration, self.dismiss, args=(notification.id,)
                )
                timer.daemon = True
                self._timers[notification.id] = timer
                timer.start()

        self.log.debug(
            "notification_added",
            notification_id=notification.id,
            type=notification.type.value,
            title=title,
            duration=notification.duration,
        )
        self._emit(NotificationAction.ADDED, notification)
        return notification.id

    def success(self, title: str, message: Optional[str] = None, **options) -> str:
        return self.notify(NotificationType.SUCCESS, title, message, **options)

    def error(self, title: str, message: Optional[str] = None, **options) -> str:
        return self.notify(NotificationType.ERROR, title, message, **options)

    def warning(self, title: str, message: Optional[str] = None, **options) -> str:
        return self.notify(NotificationType.WARNING, title, message, **options)

    def info(self, title: str, message: Optional[str] = None, **options) -> str:
        return self.notify(NotificationType.INFO, title, message, **options)

    def dismiss(self, notification_id: str) -> bool:
        """Remove a notification.

        Returns:
            True if the notification was active, False otherwise.
        """
        with self._lock:
            notification = self._active.pop(notification_id, None)
            timer = self._timers.pop(notification_id, None)

        if timer is not None:
            timer.cancel()
        if notification is None:
            return False

        self._emit(NotificationAction.DISMISSED, notification)
        return True

    def clear_all(self) -> None:
        """Dismiss every active notification and cancel pending timers."""
        with self._lock:
            notifications = list(self._active.values())
            timers = list(self._timers.values())
            self._active.clear()
            self._timers.clear()

        for timer in timers:
            timer.cancel()
        for notification in notifications:
            self._emit(NotificationAction.DISMISSED, notification)

    def active(self) -> List[Notification]:
        """Snapshot of active notifications, oldest first."""
        with self._lock:
            return list(self._active.values())

    def get(self, notification_id: str) -> Optional[Notification]:
        with self._lock:
            return self._active.get(notification_id)

    def subscribe(self, listener: NotificationListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, action: NotificationAction, notification: Notification) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(action, notification)
            except Exception as e:
                self.log.error(
                    "notification_listener_failed",
                    action=action.value,
                    notification_id=notification.id,
                    error=str(e),
                )
