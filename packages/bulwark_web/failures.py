"""Request-failure taxonomy raised at the web framework boundary.

Each failure family carries an explicit ``kind`` discriminant so classifiers
can check their rule tables for exhaustiveness. Framework-specific exceptions
are translated into these variants by the adapters in ``bulwark_web.adapters``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Sequence


class FailureKind(str, Enum):
    """Closed set of request-failure categories."""

    TYPE_CONVERSION = "type_conversion"
    REQUEST_BINDING = "request_binding"
    MESSAGE_CONVERSION = "message_conversion"
    NOT_ACCEPTABLE = "not_acceptable"
    UNSUPPORTED_MEDIA_TYPE = "unsupported_media_type"
    METHOD_NOT_ALLOWED = "method_not_allowed"


class RequestFailure(Exception):
    """Base error for all request-handling failures."""

    kind: ClassVar[FailureKind]

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        """Return the human-readable failure message."""
        return self.message

    def __reduce__(self) -> tuple[Any, ...]:
        # Variant constructors take fields, not the message, so rebuild from state.
        return (_restore_failure, (type(self), self.message), self.__dict__)


def _restore_failure(cls: type[RequestFailure], message: str) -> RequestFailure:
    failure = cls.__new__(cls)
    RequestFailure.__init__(failure, message)
    return failure


# ============================================================================
# Type conversion
# ============================================================================


def _type_label(value: Any) -> str:
    if isinstance(value, type):
        return value.__qualname__
    return repr(value)


class TypeConversionFailure(RequestFailure):
    """Raised when a value cannot be converted to the type a handler requires.

    ``property_name`` is only known to the parameter-level sub-variants, which
    set it at construction. Everywhere else it stays ``None``.
    """

    kind = FailureKind.TYPE_CONVERSION
    property_name: str | None = None

    def __init__(
        self,
        value: Any,
        required_type: Any = None,
        *,
        message: str | None = None,
    ) -> None:
        if message is None:
            message = (
                f"Failed to convert value of type '{type(value).__qualname__}'"
                f" to required type '{_type_label(required_type)}'"
            )
        super().__init__(message)
        self.value = value
        self.required_type = required_type


class ParameterTypeMismatchFailure(TypeConversionFailure):
    """Raised when a named handler parameter receives a value of the wrong type."""

    def __init__(
        self,
        name: str,
        value: Any,
        required_type: Any = None,
        *,
        message: str | None = None,
    ) -> None:
        if message is None:
            message = (
                f"Failed to convert value of type '{type(value).__qualname__}'"
                f" to required type '{_type_label(required_type)}'"
                f" for parameter '{name}'"
            )
        super().__init__(value, required_type, message=message)
        self.property_name = name


class ParameterConversionNotSupportedFailure(TypeConversionFailure):
    """Raised when no converter exists for a named handler parameter."""

    def __init__(
        self,
        name: str,
        value: Any,
        required_type: Any = None,
        *,
        message: str | None = None,
    ) -> None:
        if message is None:
            message = (
                f"No converter found from '{type(value).__qualname__}'"
                f" to required type '{_type_label(required_type)}'"
                f" for parameter '{name}'"
            )
        super().__init__(value, required_type, message=message)
        self.property_name = name


# ============================================================================
# Request binding
# ============================================================================


class RequestBindingFailure(RequestFailure):
    """Raised when a request cannot be bound to the handler's declared inputs."""

    kind = FailureKind.REQUEST_BINDING


class MissingParameterFailure(RequestBindingFailure):
    """Required query or path parameter is absent."""

    def __init__(self, name: str, type_name: str | None = None) -> None:
        suffix = f" for method parameter type {type_name}" if type_name else ""
        super().__init__(f"Required request parameter '{name}'{suffix} is not present")
        self.name = name
        self.type_name = type_name


class MissingHeaderFailure(RequestBindingFailure):
    """Required request header is absent."""

    def __init__(self, header_name: str) -> None:
        super().__init__(f"Required request header '{header_name}' is not present")
        self.header_name = header_name


class MissingCookieFailure(RequestBindingFailure):
    """Required request cookie is absent."""

    def __init__(self, cookie_name: str) -> None:
        super().__init__(f"Required cookie '{cookie_name}' is not present")
        self.cookie_name = cookie_name


# ============================================================================
# Message conversion
# ============================================================================


class MessageConversionFailure(RequestFailure):
    """Raised when a request or response body cannot be converted."""

    kind = FailureKind.MESSAGE_CONVERSION


class MessageNotReadableFailure(MessageConversionFailure):
    """Request body is missing or could not be parsed."""


class MessageNotWritableFailure(MessageConversionFailure):
    """Response body could not be serialized."""


# ============================================================================
# Content negotiation / protocol
# ============================================================================


class NotAcceptableFailure(RequestFailure):
    """No requested response media type can be produced."""

    kind = FailureKind.NOT_ACCEPTABLE

    def __init__(self, supported_media_types: Sequence[str] = ()) -> None:
        super().__init__("No acceptable representation")
        self.supported_media_types = tuple(supported_media_types)


class UnsupportedMediaTypeFailure(RequestFailure):
    """Request body media type is not supported by the handler."""

    kind = FailureKind.UNSUPPORTED_MEDIA_TYPE

    def __init__(
        self,
        content_type: str | None = None,
        supported_media_types: Sequence[str] = (),
    ) -> None:
        if content_type:
            message = f"Content-Type '{content_type}' is not supported"
        else:
            message = "Content-Type is not supported"
        super().__init__(message)
        self.content_type = content_type
        self.supported_media_types = tuple(supported_media_types)


class MethodNotAllowedFailure(RequestFailure):
    """HTTP method is not supported by the target resource."""

    kind = FailureKind.METHOD_NOT_ALLOWED

    def __init__(self, method: str, supported_methods: Sequence[str] = ()) -> None:
        super().__init__(f"Request method '{method}' is not supported")
        self.method = method
        self.supported_methods = tuple(supported_methods)
