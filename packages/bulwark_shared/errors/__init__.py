"""Public canonical error API for Bulwark services."""

from . import codes
from .registry import DEFAULT_ERRORS, ErrorRegistry, ProjectErrorRegistry
from .types import CanonicalError, ErrorCategory, ErrorEntry, ErrorSet, ErrorWithContext

__all__ = [
    "CanonicalError",
    "DEFAULT_ERRORS",
    "ErrorCategory",
    "ErrorEntry",
    "ErrorRegistry",
    "ErrorSet",
    "ErrorWithContext",
    "ProjectErrorRegistry",
    "codes",
]
