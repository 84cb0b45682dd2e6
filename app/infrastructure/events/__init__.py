"""In-process event bus used for cross-component signals."""

from infrastructure.events.dispatcher import EventBus, EventHandler
from infrastructure.events.models import AUTH_LOGOUT, Event

__all__ = [
    "AUTH_LOGOUT",
    "Event",
    "EventBus",
    "EventHandler",
]
