"""Minimal stdout logging configuration for Bulwark services.

Design goals:
- Always emit logs to stdout for container log collection.
- Render structured ``extra`` fields with stable names in both output modes.
- Keep the API small enough that services only call ``configure_logging`` once.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from . import fields


class ServiceFilter(logging.Filter):
    """Stamp static service/environment fields onto each log record."""

    def __init__(self, static_fields: dict[str, str]) -> None:
        super().__init__()
        self._static_fields = dict(static_fields)

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self._static_fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def _structured_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Collect known structured fields present on one record."""
    return {
        key: getattr(record, key)
        for key in fields.STRUCTURED_FIELDS
        if getattr(record, key, None) is not None
    }


class JsonFormatter(logging.Formatter):
    """Emit newline-delimited JSON logs with stable core fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            fields.TIMESTAMP: datetime.now(UTC).isoformat(),
            fields.LEVEL: record.levelname,
            fields.LOGGER: record.name,
            fields.MESSAGE: record.getMessage(),
        }
        payload.update(_structured_fields(record))

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str, separators=(",", ":"))


class PlainFormatter(logging.Formatter):
    """Human-readable formatter that still appends structured fields."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        structured = _structured_fields(record)
        if not structured:
            return message
        suffix = " ".join(f"{key}={value}" for key, value in sorted(structured.items()))
        return f"{message} {suffix}"


def configure_logging(
    *,
    level: str = "INFO",
    json_output: bool = True,
    service: str | None = None,
    environment: str | None = None,
) -> None:
    """Configure root logging with a single stdout handler.

    This function is idempotent for handler setup: existing root handlers are
    replaced to avoid duplicate emissions when called multiple times.
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())

    static_fields: dict[str, str] = {}
    if service:
        static_fields[fields.SERVICE] = service
    if environment:
        static_fields[fields.ENVIRONMENT] = environment

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setLevel(level.upper())
    handler.addFilter(ServiceFilter(static_fields))
    handler.setFormatter(JsonFormatter() if json_output else PlainFormatter())

    root.addHandler(handler)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger using Python's standard logging hierarchy."""
    return logging.getLogger(name)
