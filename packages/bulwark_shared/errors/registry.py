"""Project error registry: the per-deployment source of canonical errors.

Classifiers never construct canonical errors themselves. They ask an
``ErrorRegistry`` for each identity, so HTTP status and default message stay a
deployment concern.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Protocol, runtime_checkable

from . import codes
from .types import CanonicalError, ErrorCategory

DEFAULT_ERRORS: tuple[CanonicalError, ...] = (
    CanonicalError(
        code=codes.TYPE_CONVERSION_ERROR,
        message="Type conversion error",
        http_status=400,
        category=ErrorCategory.VALIDATION,
    ),
    CanonicalError(
        code=codes.MALFORMED_REQUEST,
        message="Malformed request",
        http_status=400,
        category=ErrorCategory.VALIDATION,
    ),
    CanonicalError(
        code=codes.MISSING_EXPECTED_CONTENT,
        message="Missing expected content",
        http_status=400,
        category=ErrorCategory.VALIDATION,
    ),
    CanonicalError(
        code=codes.NO_ACCEPTABLE_REPRESENTATION,
        message="No acceptable representation",
        http_status=406,
        category=ErrorCategory.PROTOCOL,
    ),
    CanonicalError(
        code=codes.UNSUPPORTED_MEDIA_TYPE,
        message="Unsupported media type",
        http_status=415,
        category=ErrorCategory.PROTOCOL,
    ),
    CanonicalError(
        code=codes.METHOD_NOT_ALLOWED,
        message="Http method not allowed",
        http_status=405,
        category=ErrorCategory.PROTOCOL,
    ),
    CanonicalError(
        code=codes.GENERIC_SERVICE_ERROR,
        message="An error occurred while fulfilling the request",
        http_status=500,
        category=ErrorCategory.INTERNAL,
    ),
)


@runtime_checkable
class ErrorRegistry(Protocol):
    """Lookups a request-failure classifier needs from the project registry."""

    def type_conversion_error(self) -> CanonicalError:
        """Return the error for a value that could not be converted."""

    def malformed_request_error(self) -> CanonicalError:
        """Return the error for a request that could not be bound or read."""

    def missing_expected_content_error(self) -> CanonicalError:
        """Return the error for a request missing its required body."""

    def no_acceptable_representation_error(self) -> CanonicalError:
        """Return the error for an unsatisfiable Accept header."""

    def unsupported_media_type_error(self) -> CanonicalError:
        """Return the error for an unsupported request Content-Type."""

    def method_not_allowed_error(self) -> CanonicalError:
        """Return the error for an unsupported HTTP method."""


class ProjectErrorRegistry:
    """Default ``ErrorRegistry`` backed by an immutable code-to-error table."""

    def __init__(
        self,
        errors: Iterable[CanonicalError] = DEFAULT_ERRORS,
        *,
        overrides: Mapping[str, Mapping[str, object]] | None = None,
    ) -> None:
        table: dict[str, CanonicalError] = {}
        for error in errors:
            if error.code in table:
                raise ValueError(f"duplicate error code in registry: {error.code}")
            table[error.code] = error

        for code, changes in (overrides or {}).items():
            current = table.get(code)
            if current is None:
                raise ValueError(f"override references unknown error code: {code}")
            table[code] = _apply_override(current, changes)

        missing = [code for code in _REQUIRED_CODES if code not in table]
        if missing:
            raise ValueError(f"registry is missing required error codes: {', '.join(missing)}")

        self._errors = table

    def find(self, code: str) -> CanonicalError | None:
        """Return one error by code, or None when it is not registered."""
        return self._errors.get(code)

    def all_errors(self) -> tuple[CanonicalError, ...]:
        """Return every registered error ordered by code."""
        return tuple(sorted(self._errors.values(), key=lambda error: error.code))

    def type_conversion_error(self) -> CanonicalError:
        return self._errors[codes.TYPE_CONVERSION_ERROR]

    def malformed_request_error(self) -> CanonicalError:
        return self._errors[codes.MALFORMED_REQUEST]

    def missing_expected_content_error(self) -> CanonicalError:
        return self._errors[codes.MISSING_EXPECTED_CONTENT]

    def no_acceptable_representation_error(self) -> CanonicalError:
        return self._errors[codes.NO_ACCEPTABLE_REPRESENTATION]

    def unsupported_media_type_error(self) -> CanonicalError:
        return self._errors[codes.UNSUPPORTED_MEDIA_TYPE]

    def method_not_allowed_error(self) -> CanonicalError:
        return self._errors[codes.METHOD_NOT_ALLOWED]


_REQUIRED_CODES = (
    codes.TYPE_CONVERSION_ERROR,
    codes.MALFORMED_REQUEST,
    codes.MISSING_EXPECTED_CONTENT,
    codes.NO_ACCEPTABLE_REPRESENTATION,
    codes.UNSUPPORTED_MEDIA_TYPE,
    codes.METHOD_NOT_ALLOWED,
)

_OVERRIDABLE_FIELDS = frozenset({"message", "http_status"})


def _apply_override(error: CanonicalError, changes: Mapping[str, object]) -> CanonicalError:
    """Return a copy of ``error`` with message and/or status replaced."""
    unknown = set(changes) - _OVERRIDABLE_FIELDS
    if unknown:
        raise ValueError(
            f"unsupported override fields for {error.code}: {', '.join(sorted(unknown))}"
        )
    message = changes.get("message")
    http_status = changes.get("http_status")
    return CanonicalError(
        code=error.code,
        message=str(message) if message is not None else error.message,
        http_status=int(http_status) if http_status is not None else error.http_status,
        category=error.category,
    )
