"""Shared helpers for building classifier log details."""

from __future__ import annotations

from .contracts import LogDetail

EXCEPTION_MESSAGE_KEY = "exception_message"


class HandlerUtils:
    """Formatting helpers shared by every classifier stage."""

    def base_exception_message_details(self, failure: BaseException) -> tuple[LogDetail, ...]:
        """Return the log detail carrying the failure's own message."""
        return ((EXCEPTION_MESSAGE_KEY, str(failure)),)


DEFAULT_UTILS = HandlerUtils()
