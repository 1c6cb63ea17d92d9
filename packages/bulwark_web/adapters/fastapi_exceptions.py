"""Translate FastAPI/Starlette exceptions into the request-failure taxonomy.

FastAPI reports every parsing problem as one ``RequestValidationError`` and
every routing/negotiation problem as a Starlette ``HTTPException``. This
adapter inspects them and rebuilds the matching ``RequestFailure`` variant so
classifiers never depend on framework exception classes. Exceptions it does
not recognize are returned unchanged.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Mapping
from uuid import UUID

from fastapi.exceptions import RequestValidationError, StarletteHTTPException

from packages.bulwark_shared.logging import fields, get_logger

from ..failures import (
    MessageNotReadableFailure,
    MethodNotAllowedFailure,
    MissingCookieFailure,
    MissingHeaderFailure,
    MissingParameterFailure,
    NotAcceptableFailure,
    ParameterTypeMismatchFailure,
    RequestFailure,
    UnsupportedMediaTypeFailure,
)
from ..listeners.framework_failures import REQUEST_BODY_MISSING_MARKER

logger = get_logger(__name__)

UNKNOWN_METHOD = "<unknown>"

_PARAMETER_LOCATIONS = frozenset({"query", "path", "header", "cookie"})

# pydantic error types that mean "value has the wrong type", keyed to the
# Python type the handler declared.
_SCALAR_ERROR_TYPES: Mapping[str, type] = {
    "int_parsing": int,
    "int_type": int,
    "int_from_float": int,
    "float_parsing": float,
    "float_type": float,
    "bool_parsing": bool,
    "bool_type": bool,
    "string_type": str,
    "bytes_type": bytes,
    "decimal_parsing": Decimal,
    "decimal_type": Decimal,
    "uuid_parsing": UUID,
    "uuid_type": UUID,
    "date_parsing": date,
    "date_from_datetime_parsing": date,
    "datetime_parsing": datetime,
    "datetime_from_date_parsing": datetime,
    "time_parsing": time,
    "time_delta_parsing": timedelta,
}

# Body errors that mean the payload's shape could not be read at all.
_BODY_SHAPE_ERROR_TYPES = frozenset(
    {
        *_SCALAR_ERROR_TYPES,
        "missing",
        "model_type",
        "model_attributes_type",
        "dict_type",
        "list_type",
        "tuple_type",
        "set_type",
        "extra_forbidden",
    }
)


def failure_from_exception(
    exc: BaseException,
    *,
    method: str | None = None,
) -> BaseException:
    """Return the ``RequestFailure`` equivalent of one framework exception.

    ``method`` is the request's HTTP method, used for method-not-allowed
    failures since Starlette does not carry it on the exception.
    """
    if isinstance(exc, RequestFailure):
        return exc

    failure: RequestFailure | None = None
    if isinstance(exc, RequestValidationError):
        failure = _from_validation_error(exc)
    elif isinstance(exc, StarletteHTTPException):
        failure = _from_http_exception(exc, method=method)

    if failure is None:
        return exc

    failure.__cause__ = exc
    logger.debug(
        "Translated framework exception into request failure",
        extra={
            fields.EVENT: "framework_exception_translated",
            fields.FAILURE_TYPE: type(failure).__qualname__,
        },
    )
    return failure


def _from_http_exception(
    exc: StarletteHTTPException,
    *,
    method: str | None,
) -> RequestFailure | None:
    """Map routing and negotiation status codes onto failure variants."""
    headers = exc.headers or {}
    if exc.status_code == 405:
        return MethodNotAllowedFailure(
            method or UNKNOWN_METHOD,
            supported_methods=_split_header(_header(headers, "allow")),
        )
    if exc.status_code == 406:
        return NotAcceptableFailure()
    if exc.status_code == 415:
        return UnsupportedMediaTypeFailure()
    return None


def _from_validation_error(exc: RequestValidationError) -> RequestFailure | None:
    """Map the first validation error entry onto a failure variant."""
    errors = exc.errors()
    if not errors:
        return None

    error = errors[0]
    error_type = str(error.get("type", ""))
    loc = tuple(error.get("loc", ()))
    message = str(error.get("msg", ""))
    if not loc:
        return None

    location = loc[0]
    if location == "body":
        return _from_body_error(error_type, loc, message, error)

    if location not in _PARAMETER_LOCATIONS or len(loc) < 2:
        return None

    name = str(loc[1])
    if error_type == "missing":
        if location == "header":
            return MissingHeaderFailure(name)
        if location == "cookie":
            return MissingCookieFailure(name)
        return MissingParameterFailure(name)

    required_type = _SCALAR_ERROR_TYPES.get(error_type)
    if required_type is not None:
        return ParameterTypeMismatchFailure(name, error.get("input"), required_type)

    # Constraint failures (ranges, patterns, enums) belong to validation stages.
    return None


def _from_body_error(
    error_type: str,
    loc: tuple[Any, ...],
    message: str,
    error: Mapping[str, Any],
) -> RequestFailure | None:
    if error_type == "missing" and loc == ("body",):
        return MessageNotReadableFailure(f"{REQUEST_BODY_MISSING_MARKER}: {message}")

    if error_type == "json_invalid":
        ctx = error.get("ctx") or {}
        detail = ctx.get("error", message)
        return MessageNotReadableFailure(f"JSON parse error: {detail}")

    if error_type in _BODY_SHAPE_ERROR_TYPES:
        path = ".".join(str(part) for part in loc[1:]) or "<root>"
        return MessageNotReadableFailure(f"Could not read request body at {path}: {message}")

    return None


def _header(headers: Mapping[str, str], name: str) -> str | None:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def _split_header(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())
