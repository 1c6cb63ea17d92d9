"""Public API for Bulwark web request-failure classification."""

from .adapters import failure_from_exception
from .factory import build_classifier, build_registry
from .failures import (
    FailureKind,
    MessageConversionFailure,
    MessageNotReadableFailure,
    MessageNotWritableFailure,
    MethodNotAllowedFailure,
    MissingCookieFailure,
    MissingHeaderFailure,
    MissingParameterFailure,
    NotAcceptableFailure,
    ParameterConversionNotSupportedFailure,
    ParameterTypeMismatchFailure,
    RequestBindingFailure,
    RequestFailure,
    TypeConversionFailure,
    UnsupportedMediaTypeFailure,
)
from .listeners import (
    ClassificationOutcome,
    FailureListener,
    FrameworkFailureClassifier,
    HandlerUtils,
)

__all__ = [
    "ClassificationOutcome",
    "FailureKind",
    "FailureListener",
    "FrameworkFailureClassifier",
    "HandlerUtils",
    "MessageConversionFailure",
    "MessageNotReadableFailure",
    "MessageNotWritableFailure",
    "MethodNotAllowedFailure",
    "MissingCookieFailure",
    "MissingHeaderFailure",
    "MissingParameterFailure",
    "NotAcceptableFailure",
    "ParameterConversionNotSupportedFailure",
    "ParameterTypeMismatchFailure",
    "RequestBindingFailure",
    "RequestFailure",
    "TypeConversionFailure",
    "UnsupportedMediaTypeFailure",
    "build_classifier",
    "build_registry",
    "failure_from_exception",
]
