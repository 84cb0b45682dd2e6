"""In-process event bus.

Handlers are registered per event type on an ``EventBus`` instance and are
called synchronously, in registration order, when an event is dispatched.
Each component receives the bus it publishes to, so tests can use a fresh
bus per case.
"""

from threading import Lock
from typing import Any, Callable, Dict, List

from infrastructure.events.models import Event
from infrastructure.logging import get_module_logger

logger = get_module_logger()

EventHandler = Callable[[Event], Any]


class EventBus:
    """Registry of event handlers keyed by event type."""

    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = {}
        self._lock = Lock()

    def subscribe(self, event_type: str, handler: EventHandler) -> Callable[[], None]:
        """Register ``handler`` for ``event_type``.

        Args:
            event_type: The type of event to handle (e.g., 'auth.logout').
            handler: Callable receiving the dispatched Event.

        Returns:
            A callable that removes the subscription.
        """
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)
            total = len(self._handlers[event_type])

        logger.debug(
            "registered_event_handler",
            handler=getattr(handler, "__name__", "unknown"),
            event_type=event_type,
            total_handlers=total,
        )

        def unsubscribe() -> None:
            with self._lock:
                handlers = self._handlers.get(event_type, [])
                if handler in handlers:
                    handlers.remove(handler)

        return unsubscribe

    def on(self, event_type: str):
        """Decorator form of :meth:`subscribe`.

        Example:
            @bus.on(AUTH_LOGOUT)
            def drop_session(event):
                session.clear()
        """

        def decorator(handler_func: EventHandler) -> EventHandler:
            self.subscribe(event_type, handler_func)
            return handler_func

        return decorator

    def handlers_for(self, event_type: str) -> List[EventHandler]:
        with self._lock:
            return list(self._handlers.get(event_type, []))

    def dispatch(self, event: Event) -> List[Any]:
        """Dispatch event synchronously to all registered handlers.

        If a handler raises, the failure is logged and the remaining
        handlers still run.

        Args:
            event: The event to dispatch.

        Returns:
            List of return values from the handlers that succeeded.
        """
        results = []
        handlers = self.handlers_for(event.event_type)

        logger.info(
            "dispatching_event",
            event_type=event.event_type,
            handler_count=len(handlers),
            correlation_id=event.correlation_id,
        )

        for handler in handlers:
            try:
                results.append(handler(event))
            except Exception as e:
                logger.error(
                    "event_handler_failed",
                    handler=getattr(handler, "__name__", "unknown"),
                    event_type=event.event_type,
                    error=str(e),
                    correlation_id=event.correlation_id,
                )

        return results
