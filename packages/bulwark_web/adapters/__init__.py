"""Adapters translating web framework exceptions into request failures."""

from .fastapi_exceptions import failure_from_exception

__all__ = ["failure_from_exception"]
