"""Structured logging infrastructure.

This package provides centralized logging configuration for the
data-access layer using structlog.

Public API:
    - configure_logging(): Initialize logging
    - get_module_logger(): Get a logger for the calling module
    - bind_operation_context(): Context manager binding a correlation id
    - get_correlation_id(): Get current correlation ID from context
    - clear_operation_context(): Clear all bound context

Processors:
    - redact_credentials(): Hide the remote store token
    - summarize_documents(): Keep content documents out of log lines

Example:
    from infrastructure.logging import get_module_logger, bind_operation_context

    logger = get_module_logger()

    with bind_operation_context(operation="force_sync"):
        logger.info("sync_started")
"""

from infrastructure.logging.setup import (
    configure_logging,
    get_module_logger,
)

from infrastructure.logging.context import (
    bind_operation_context,
    get_correlation_id,
    clear_operation_context,
)

from infrastructure.logging.formatters import (
    redact_credentials,
    summarize_documents,
    CREDENTIAL_KEYS,
)

__all__ = [
    "configure_logging",
    "get_module_logger",
    "bind_operation_context",
    "get_correlation_id",
    "clear_operation_context",
    "redact_credentials",
    "summarize_documents",
    "CREDENTIAL_KEYS",
]
