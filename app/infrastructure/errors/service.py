"""Error classifier service.

Single funnel for failures in the data-access layer: every raw exception
that needs to reach the user goes through ``ErrorClassifier.handle`` and
comes out as an ``AppError``. The classifier keeps a bounded history,
raises notifications, forwards to an optional reporting sink and broadcasts
logout on authentication failures.
"""

import threading
from collections import Counter, deque
from datetime import datetime, timezone
from typing import (
    Any,
    Callable,
    Deque,
    Dict,
    Iterable,
    List,
    Optional,
    Tuple,
    Union,
    TYPE_CHECKING,
)

from infrastructure.errors.classifiers import classify_exception, classify_message
from infrastructure.errors.models import (
    AppError,
    ErrorKind,
    NetworkErrorRecord,
    ValidationIssue,
)
from infrastructure.events import AUTH_LOGOUT, Event, EventBus
from infrastructure.logging import get_module_logger
from infrastructure.notifications import NotificationCenter, NotificationType

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()

ReportSink = Callable[[AppError], None]

DEFAULT_MESSAGE = "An unknown error occurred"

ERROR_TITLES: Dict[ErrorKind, str] = {
    ErrorKind.NETWORK_ERROR: "Network error",
    ErrorKind.AUTH_ERROR: "Authentication error",
    ErrorKind.VALIDATION_ERROR: "Validation error",
    ErrorKind.PERMISSION_DENIED: "Permission denied",
    ErrorKind.NOT_FOUND: "Resource not found",
    ErrorKind.TIMEOUT_ERROR: "Request timed out",
    ErrorKind.UNKNOWN_ERROR: "Unknown error",
}

# (notification type, duration in seconds); None duration uses the center default
NOTIFICATION_POLICY: Dict[ErrorKind, Tuple[NotificationType, Optional[float]]] = {
    ErrorKind.NETWORK_ERROR: (NotificationType.ERROR, 5.0),
    ErrorKind.AUTH_ERROR: (NotificationType.ERROR, 0),
    ErrorKind.VALIDATION_ERROR: (NotificationType.WARNING, 6.0),
}


class ErrorClassifier:
    """Converts raw failures into AppErrors and routes them.

    Args:
        notifications: Sink for user-facing notifications. Optional; without
            it ``notify`` is a no-op.
        event_bus: Bus receiving the ``auth.logout`` broadcast.
        report_sink: Callable receiving errors handled with ``report=True``.
        history_limit: Classified errors retained (oldest evicted first).
        network_history_limit: Network error records retained.
        recent_count: Errors included under ``recent`` in :meth:`stats`.

    Example:
        classifier = ErrorClassifier(notifications=center, event_bus=bus)
        try:
            store.get_file_content("site.json")
        except Exception as exc:
            raise classifier.handle(exc, context="load site") from exc
    """

    def __init__(
        self,
        notifications: Optional[NotificationCenter] = None,
        event_bus: Optional[EventBus] = None,
        report_sink: Optional[ReportSink] = None,
        history_limit: int = 100,
        network_history_limit: int = 100,
        recent_count: int = 10,
    ):
        self.notifications = notifications
        self.event_bus = event_bus
        self.report_sink = report_sink
        self.recent_count = recent_count
        self._errors: Deque[AppError] = deque(maxlen=history_limit)
        self._network_errors: Deque[NetworkErrorRecord] = deque(
            maxlen=network_history_limit
        )
        self._lock = threading.Lock()

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        notifications: Optional[NotificationCenter] = None,
        event_bus: Optional[EventBus] = None,
        report_sink: Optional[ReportSink] = None,
    ) -> "ErrorClassifier":
        return cls(
            notifications=notifications,
            event_bus=event_bus,
            report_sink=report_sink,
            history_limit=settings.errors.history_limit,
            network_history_limit=settings.errors.network_history_limit,
            recent_count=settings.errors.recent_count,
        )

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def to_app_error(
        self,
        error: Union[BaseException, str],
        context: Optional[str] = None,
        code: Optional[ErrorKind] = None,
        extra_details: Optional[Dict[str, Any]] = None,
    ) -> AppError:
        """Build an AppError without recording or routing it.

        An AppError passes through unchanged unless ``code`` or extra details
        force a rewrite.
        """
        if isinstance(error, AppError) and code is None and not extra_details:
            return error

        if isinstance(error, str):
            kind, details = classify_message(error), {}
            message = error
        else:
            kind, details = classify_exception(error)
            message = error.message if isinstance(error, AppError) else str(error)
            if not isinstance(error, AppError):
                details["exception_type"] = type(error).__name__

        if context is not None:
            details["context"] = context
        if extra_details:
            details.update(extra_details)

        return AppError(
            code=code or kind,
            message=message or DEFAULT_MESSAGE,
            details=details,
        )

    # ------------------------------------------------------------------
    # Handling
    # ------------------------------------------------------------------

    def handle(
        self,
        error: Union[BaseException, str],
        context: Optional[str] = None,
        notify: bool = True,
        log: bool = True,
        report: bool = False,
    ) -> AppError:
        """Classify, record and route a failure.

        Args:
            error: Raw exception, AppError or message text.
            context: Free-form description of what was being attempted.
            notify: Raise a user-facing notification.
            log: Emit a structured log entry.
            report: Forward to the reporting sink.

        Returns:
            The classified AppError. Callers raise it themselves.
        """
        app_error = self.to_app_error(error, context=context)

        with self._lock:
            self._errors.append(app_error)

        if log:
            logger.error(
                "error_handled",
                code=app_error.code.value,
                error=app_error.message,
                context=app_error.details.get("context"),
                exception_type=app_error.details.get("exception_type"),
            )
        if notify:
            self._notify(app_error)
        if report:
            self._report(app_error)
        if app_error.code is ErrorKind.AUTH_ERROR:
            self._broadcast_logout(app_error)

        return app_error

    def handle_network_error(
        self,
        error: Union[BaseException, str],
        url: str,
        method: str = "GET",
        status: Optional[int] = None,
        status_text: str = "",
        context: Optional[str] = None,
        notify: bool = True,
        log: bool = True,
        report: bool = False,
    ) -> AppError:
        """Record a failed HTTP exchange and handle it as NETWORK_ERROR."""
        record = NetworkErrorRecord(
            url=url, method=method.upper(), status=status, status_text=status_text
        )
        with self._lock:
            self._network_errors.append(record)

        app_error = self.to_app_error(
            error,
            context=context,
            code=ErrorKind.NETWORK_ERROR,
            extra_details={"network": record.to_dict()},
        )
        return self.handle(app_error, notify=notify, log=log, report=report)

    def handle_auth_error(
        self,
        error: Union[BaseException, str],
        context: Optional[str] = None,
        report: bool = False,
    ) -> AppError:
        """Handle a failure as AUTH_ERROR.

        Always notifies (the notification never auto-dismisses) and
        broadcasts ``auth.logout``.
        """
        app_error = self.to_app_error(
            error, context=context, code=ErrorKind.AUTH_ERROR
        )
        return self.handle(app_error, notify=True, report=report)

    def handle_validation_error(
        self,
        issues: Iterable[ValidationIssue],
        context: Optional[str] = None,
        notify: bool = True,
        log: bool = True,
    ) -> AppError:
        """Package validation issues under a single VALIDATION_ERROR."""
        issues = list(issues)
        app_error = AppError(
            code=ErrorKind.VALIDATION_ERROR,
            message=f"Validation failed: {len(issues)} error(s)",
            details={
                "validation_errors": [issue.to_dict() for issue in issues],
                "context": context,
            },
        )
        return self.handle(app_error, notify=notify, log=log)

    def _notify(self, app_error: AppError) -> None:
        if self.notifications is None:
            return
        notification_type, duration = NOTIFICATION_POLICY.get(
            app_error.code, (NotificationType.ERROR, None)
        )
        self.notifications.notify(
            notification_type,
            ERROR_TITLES.get(app_error.code, "Error"),
            app_error.message,
            duration=duration,
        )

    def _report(self, app_error: AppError) -> None:
        if self.report_sink is None:
            return
        try:
            self.report_sink(app_error)
        except Exception as e:
            logger.error(
                "error_report_failed", code=app_error.code.value, error=str(e)
            )

    def _broadcast_logout(self, app_error: AppError) -> None:
        logger.warning("auth_logout_triggered", error=app_error.message)
        if self.event_bus is None:
            return
        self.event_bus.dispatch(
            Event(event_type=AUTH_LOGOUT, metadata={"error": app_error.to_dict()})
        )

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    @property
    def errors(self) -> Tuple[AppError, ...]:
        """Snapshot of the error history, oldest first."""
        with self._lock:
            return tuple(self._errors)

    @property
    def network_errors(self) -> Tuple[NetworkErrorRecord, ...]:
        """Snapshot of the network error records, oldest first."""
        with self._lock:
            return tuple(self._network_errors)

    def clear_errors(self) -> None:
        with self._lock:
            self._errors.clear()

    def clear_network_errors(self) -> None:
        with self._lock:
            self._network_errors.clear()

    def stats(self) -> Dict[str, Any]:
        """Summary of the error history.

        Returns:
            Dict with total, by_code (code -> count), network_errors (count)
            and recent (the latest errors as dicts, newest last).
        """
        with self._lock:
            errors = list(self._errors)
            network_count = len(self._network_errors)

        recent = errors[-self.recent_count :] if self.recent_count else []
        return {
            "total": len(errors),
            "by_code": dict(Counter(error.code.value for error in errors)),
            "network_errors": network_count,
            "recent": [error.to_dict() for error in recent],
        }

    def export_log(self) -> Dict[str, Any]:
        """Full history plus stats, stamped with the export time."""
        with self._lock:
            errors = [error.to_dict() for error in self._errors]
            network_errors = [record.to_dict() for record in self._network_errors]

        return {
            "errors": errors,
            "network_errors": network_errors,
            "stats": self.stats(),
            "exported_at": datetime.now(timezone.utc).isoformat(),
        }

    def errors_by_code(self, code: ErrorKind) -> List[AppError]:
        with self._lock:
            return [error for error in self._errors if error.code is code]
