"""Request-failure classifier stages and their shared contracts."""

from .contracts import ClassificationOutcome, FailureListener, LogDetail
from .framework_failures import (
    COMPLEX_TYPE_NAME,
    END_OF_INPUT_MARKER,
    REQUEST_BODY_MISSING_MARKER,
    FrameworkFailureClassifier,
    is_missing_body,
    resolve_safe_type_name,
)
from .utils import DEFAULT_UTILS, EXCEPTION_MESSAGE_KEY, HandlerUtils

__all__ = [
    "COMPLEX_TYPE_NAME",
    "ClassificationOutcome",
    "DEFAULT_UTILS",
    "END_OF_INPUT_MARKER",
    "EXCEPTION_MESSAGE_KEY",
    "FailureListener",
    "FrameworkFailureClassifier",
    "HandlerUtils",
    "LogDetail",
    "REQUEST_BODY_MISSING_MARKER",
    "is_missing_body",
    "resolve_safe_type_name",
]
