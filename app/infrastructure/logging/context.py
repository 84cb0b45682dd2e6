"""Operation context binding for structured logging.

Binds a correlation id (and any extra fields) to every log entry emitted
while an operation runs, so the log lines of one sync cycle or one forced
sync can be grouped together.

Usage:
    from infrastructure.logging import bind_operation_context

    with bind_operation_context(operation="force_sync"):
        logger.info("sync_started")

Dependencies:
    - structlog.contextvars
"""

import uuid
from contextlib import contextmanager
from typing import Optional, Any, Generator
import structlog


@contextmanager
def bind_operation_context(
    correlation_id: Optional[str] = None,
    operation: Optional[str] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind operation-scoped context to all logs within the block.

    Args:
        correlation_id: Unique operation identifier. Auto-generated if not provided.
        operation: Name of the operation (e.g. "check_sync").
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        The correlation id bound for the block.

    Example:
        with bind_operation_context(operation="check_sync") as correlation_id:
            coordinator.check_sync()
    """
    context: dict[str, Any] = {}
    context["correlation_id"] = correlation_id or str(uuid.uuid4())

    if operation is not None:
        context["operation"] = operation

    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield context["correlation_id"]
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context.

    Returns:
        The correlation ID if set, None otherwise.
    """
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("correlation_id")


def clear_operation_context() -> None:
    """Clear all operation-scoped context from the logging context."""
    structlog.contextvars.clear_contextvars()
