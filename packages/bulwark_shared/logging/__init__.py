"""Public logging API for shared Bulwark services.

This package wraps Python's ``logging`` module with opinionated defaults for
stdout emission and structured field rendering.
"""

from . import fields
from .config import JsonFormatter, PlainFormatter, configure_logging, get_logger

__all__ = [
    "JsonFormatter",
    "PlainFormatter",
    "configure_logging",
    "fields",
    "get_logger",
]
