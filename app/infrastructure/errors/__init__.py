"""Error taxonomy and classification.

Exports:
    ErrorClassifier: Funnel turning raw failures into AppErrors
    AppError: Classified, immutable error
    ErrorKind: Error taxonomy
    classify_exception, classify_message, is_transient_error: Pure helpers
"""

from infrastructure.errors.classifiers import (
    classify_exception,
    classify_message,
    is_transient_error,
    validation_issues_from,
)
from infrastructure.errors.models import (
    AppError,
    ErrorKind,
    HttpStatusError,
    NetworkErrorRecord,
    ValidationIssue,
)
from infrastructure.errors.service import (
    ERROR_TITLES,
    ErrorClassifier,
    ReportSink,
)

__all__ = [
    "AppError",
    "ERROR_TITLES",
    "ErrorClassifier",
    "ErrorKind",
    "HttpStatusError",
    "NetworkErrorRecord",
    "ReportSink",
    "ValidationIssue",
    "classify_exception",
    "classify_message",
    "is_transient_error",
    "validation_issues_from",
]
