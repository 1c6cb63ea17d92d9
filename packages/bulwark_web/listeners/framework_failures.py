"""Classifier for one-off web framework request failures.

Maps the low-level parsing and content-negotiation failures that no
domain-specific classifier claims (type conversion, request binding, body
conversion, Accept/Content-Type negotiation, unsupported method) onto the
project's canonical errors. Raw exception messages and type names are kept in
server-side log details; client metadata only ever carries safe values.
"""

from __future__ import annotations

import ctypes
import types
from typing import Annotated, Any, Callable, Union, get_args, get_origin

from packages.bulwark_shared.errors import ErrorRegistry, ErrorSet, ErrorWithContext
from packages.bulwark_shared.logging import fields, get_logger

from ..failures import (
    FailureKind,
    MessageConversionFailure,
    MessageNotReadableFailure,
    MethodNotAllowedFailure,
    NotAcceptableFailure,
    RequestBindingFailure,
    TypeConversionFailure,
    UnsupportedMediaTypeFailure,
)
from .contracts import ClassificationOutcome, LogDetail
from .utils import HandlerUtils

logger = get_logger(__name__)

BAD_PROPERTY_NAME = "bad_property_name"
BAD_PROPERTY_VALUE = "bad_property_value"
REQUIRED_TYPE = "required_type"

# Missing-body markers. Body parsers phrase "no body" differently across
# versions; these are the two known variants. Anything else is treated as a
# generic malformed body.
REQUEST_BODY_MISSING_MARKER = "Required request body is missing"
END_OF_INPUT_MARKER = "No content to map due to end-of-input"

COMPLEX_TYPE_NAME = "[complex type]"

# Checked in order; first compatible family wins. ctypes width aliases are
# platform-dependent (on Windows ``c_long is c_int``), so an aliased type
# resolves to the earlier family that lists it.
SAFE_TYPE_NAMES: tuple[tuple[str, tuple[type, ...]], ...] = (
    ("byte", (ctypes.c_byte, ctypes.c_ubyte)),
    ("short", (ctypes.c_short, ctypes.c_ushort)),
    ("int", (int, ctypes.c_int, ctypes.c_uint)),
    ("long", (ctypes.c_long, ctypes.c_ulong, ctypes.c_longlong, ctypes.c_ulonglong)),
    ("float", (ctypes.c_float,)),
    ("double", (float, ctypes.c_double, ctypes.c_longdouble)),
    ("boolean", (bool, ctypes.c_bool)),
    ("char", (ctypes.c_char, ctypes.c_wchar)),
    ("string", (str,)),
)

_NONE_TYPE = type(None)

RuleResult = tuple[ErrorSet, tuple[LogDetail, ...]]


def _loggable(value: Any) -> str:
    return "null" if value is None else str(value)


def _unwrap_type(descriptor: Any) -> Any:
    """Strip ``Annotated`` and optional wrappers from a type descriptor."""
    origin = get_origin(descriptor)
    if origin is Annotated:
        return _unwrap_type(get_args(descriptor)[0])
    if origin is Union or origin is types.UnionType:
        members = [arg for arg in get_args(descriptor) if arg is not _NONE_TYPE]
        if len(members) == 1:
            return _unwrap_type(members[0])
    return descriptor


def _is_assignable(candidate: type, family: tuple[type, ...]) -> bool:
    # bool subclasses int but is only ever reported as "boolean".
    if int in family and issubclass(candidate, bool):
        return False
    return issubclass(candidate, family)


def resolve_safe_type_name(required_type: Any) -> str | None:
    """Map a required-type descriptor onto the client-safe type vocabulary.

    Returns None when no type information exists, one of the primitive names
    in ``SAFE_TYPE_NAMES`` for compatible types, and ``"[complex type]"`` for
    everything else so internal class names never reach clients.
    """
    if required_type is None:
        return None
    candidate = _unwrap_type(required_type)
    if get_origin(candidate) is not None or not isinstance(candidate, type):
        return COMPLEX_TYPE_NAME
    for name, family in SAFE_TYPE_NAMES:
        if _is_assignable(candidate, family):
            return name
    return COMPLEX_TYPE_NAME


def is_missing_body(failure: MessageConversionFailure) -> bool:
    """Return True when an unreadable-body failure means the body was absent.

    Deliberately narrow: only the two marker phrases count, and only the
    failure's own message or its direct cause are inspected.
    """
    if not isinstance(failure, MessageNotReadableFailure):
        return False

    if str(failure).startswith(REQUEST_BODY_MISSING_MARKER):
        return True

    cause = failure.__cause__
    return cause is not None and END_OF_INPUT_MARKER in str(cause)


class FrameworkFailureClassifier:
    """Classify framework request failures into canonical errors.

    Every rule is evaluated in a fixed order and a later match replaces the
    errors of an earlier one. The failure families are disjoint, so more than
    one match means the taxonomy has drifted and is logged as a warning.
    """

    def __init__(
        self,
        registry: ErrorRegistry,
        utils: HandlerUtils,
        *,
        warn_on_rule_overlap: bool = True,
    ) -> None:
        if registry is None:
            raise ValueError("registry cannot be None")
        if utils is None:
            raise ValueError("utils cannot be None")

        self._registry = registry
        self._utils = utils
        self._warn_on_rule_overlap = warn_on_rule_overlap
        self._rules: tuple[
            tuple[FailureKind, type[BaseException], Callable[[Any], RuleResult]], ...
        ] = (
            (FailureKind.TYPE_CONVERSION, TypeConversionFailure, self._type_conversion),
            (FailureKind.REQUEST_BINDING, RequestBindingFailure, self._request_binding),
            (
                FailureKind.MESSAGE_CONVERSION,
                MessageConversionFailure,
                self._message_conversion,
            ),
            (FailureKind.NOT_ACCEPTABLE, NotAcceptableFailure, self._not_acceptable),
            (
                FailureKind.UNSUPPORTED_MEDIA_TYPE,
                UnsupportedMediaTypeFailure,
                self._unsupported_media_type,
            ),
            (
                FailureKind.METHOD_NOT_ALLOWED,
                MethodNotAllowedFailure,
                self._method_not_allowed,
            ),
        )

    @property
    def rule_order(self) -> tuple[FailureKind, ...]:
        """Return the failure kinds in evaluation order."""
        return tuple(kind for kind, _, _ in self._rules)

    @property
    def rule_families(self) -> tuple[tuple[FailureKind, type[BaseException]], ...]:
        """Return each rule's kind paired with the failure family it matches."""
        return tuple((kind, family) for kind, family, _ in self._rules)

    def classify(self, failure: BaseException) -> ClassificationOutcome:
        """Classify one failure, or report it as not handled."""
        errors: ErrorSet | None = None
        log_details: list[LogDetail] = []
        matched: list[FailureKind] = []

        for kind, family, rule in self._rules:
            if not isinstance(failure, family):
                continue
            errors, details = rule(failure)
            log_details.extend(details)
            matched.append(kind)

        if len(matched) > 1 and self._warn_on_rule_overlap:
            logger.warning(
                "Multiple classification rules matched one failure; last rule wins",
                extra={
                    fields.EVENT: "failure_rule_overlap",
                    fields.FAILURE_TYPE: type(failure).__qualname__,
                    fields.RULES: ",".join(kind.value for kind in matched),
                },
            )

        if errors is None:
            return ClassificationOutcome.not_handled()

        logger.debug(
            "Classified request failure",
            extra={
                fields.EVENT: "failure_classified",
                fields.FAILURE_TYPE: type(failure).__qualname__,
                fields.ERROR_CODES: ",".join(errors.codes),
            },
        )
        return ClassificationOutcome.handled(errors, log_details)

    def extract_property_name(self, failure: TypeConversionFailure) -> str | None:
        """Return the offending parameter name when the variant carries one."""
        return failure.property_name

    def _type_conversion(self, failure: TypeConversionFailure) -> RuleResult:
        bad_name = self.extract_property_name(failure)
        bad_value = None if failure.value is None else str(failure.value)
        safe_type = resolve_safe_type_name(failure.required_type)

        metadata: dict[str, str] = {}
        if bad_name is not None:
            metadata[BAD_PROPERTY_NAME] = bad_name
        if bad_value is not None:
            metadata[BAD_PROPERTY_VALUE] = bad_value
        if safe_type is not None:
            metadata[REQUIRED_TYPE] = safe_type

        details = (
            *self._utils.base_exception_message_details(failure),
            (BAD_PROPERTY_NAME, _loggable(bad_name)),
            (BAD_PROPERTY_VALUE, _loggable(failure.value)),
            (REQUIRED_TYPE, _loggable(failure.required_type)),
        )
        error = ErrorWithContext(self._registry.type_conversion_error(), metadata)
        return ErrorSet.singleton(error), details

    def _request_binding(self, failure: RequestBindingFailure) -> RuleResult:
        # Binding failures are hard to trace without the framework's message.
        details = self._utils.base_exception_message_details(failure)
        return ErrorSet.singleton(self._registry.malformed_request_error()), details

    def _message_conversion(self, failure: MessageConversionFailure) -> RuleResult:
        details = self._utils.base_exception_message_details(failure)
        if is_missing_body(failure):
            error = self._registry.missing_expected_content_error()
        else:
            # Nested parser errors are not uniformly structured, so field-level
            # type conversion errors are deliberately not derived from them.
            error = self._registry.malformed_request_error()
        return ErrorSet.singleton(error), details

    def _not_acceptable(self, failure: NotAcceptableFailure) -> RuleResult:
        return ErrorSet.singleton(self._registry.no_acceptable_representation_error()), ()

    def _unsupported_media_type(self, failure: UnsupportedMediaTypeFailure) -> RuleResult:
        return ErrorSet.singleton(self._registry.unsupported_media_type_error()), ()

    def _method_not_allowed(self, failure: MethodNotAllowedFailure) -> RuleResult:
        return ErrorSet.singleton(self._registry.method_not_allowed_error()), ()
