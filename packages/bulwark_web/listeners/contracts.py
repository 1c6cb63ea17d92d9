"""Listener contracts shared by request-failure classifiers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Protocol, runtime_checkable

from packages.bulwark_shared.errors import ErrorSet

LogDetail = tuple[str, str]


@dataclass(frozen=True)
class ClassificationOutcome:
    """Terminal answer of one classifier for one failure.

    ``log_details`` are server-only key/value pairs. They may hold raw
    exception messages and type names, so they must never be rendered to
    clients.
    """

    should_handle: bool
    errors: ErrorSet = field(default_factory=ErrorSet)
    log_details: tuple[LogDetail, ...] = ()

    @classmethod
    def handled(
        cls,
        errors: ErrorSet,
        log_details: Iterable[LogDetail] = (),
    ) -> ClassificationOutcome:
        """Build an outcome that finalizes the response with ``errors``."""
        if not errors:
            raise ValueError("a handled outcome requires at least one error")
        return cls(should_handle=True, errors=errors, log_details=tuple(log_details))

    @classmethod
    def not_handled(cls) -> ClassificationOutcome:
        """Build an outcome that delegates to the next classifier."""
        return _NOT_HANDLED


_NOT_HANDLED = ClassificationOutcome(should_handle=False)


@runtime_checkable
class FailureListener(Protocol):
    """One stage in an ordered chain of request-failure classifiers."""

    def classify(self, failure: BaseException) -> ClassificationOutcome:
        """Classify one failure or report it as not handled."""
