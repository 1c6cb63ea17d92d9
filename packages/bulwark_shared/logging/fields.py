"""Canonical logging field names.

These constants define a stable key set for structured logs so formatters and
emitting call sites cannot drift apart.
"""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"

# Failure classification fields.
FAILURE_TYPE = "failure_type"
RULES = "rules"
ERROR_CODES = "error_codes"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"

# Fields copied from ``extra=`` onto structured output when present.
STRUCTURED_FIELDS = (
    EVENT,
    FAILURE_TYPE,
    RULES,
    ERROR_CODES,
    SERVICE,
    ENVIRONMENT,
)
