"""Canonical client-facing error types.

This module defines the transport-agnostic error shapes rendered to API
clients: registry-owned ``CanonicalError`` identities, ``ErrorWithContext``
decorations carrying client-safe metadata, and the deduplicated, ordered
``ErrorSet`` produced by one classification decision.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Union

MetadataValue = Union[str, int, float, bool]


class ErrorCategory(str, Enum):
    """High-level categories for canonical errors."""

    UNSPECIFIED = "unspecified"
    VALIDATION = "validation"
    PROTOCOL = "protocol"
    INTERNAL = "internal"


@dataclass(frozen=True)
class CanonicalError:
    """Registry-defined error identity with its HTTP status and default message."""

    code: str
    message: str
    http_status: int
    category: ErrorCategory = ErrorCategory.UNSPECIFIED

    def __post_init__(self) -> None:
        """Validate the registry-owned invariants."""
        if not self.code:
            raise ValueError("code must not be empty")
        if not 400 <= self.http_status <= 599:
            raise ValueError(f"http_status must be an error status: {self.http_status}")


@dataclass(frozen=True)
class ErrorWithContext:
    """Canonical error decorated with client-safe metadata.

    The metadata is copied and frozen at construction so neither the caller's
    mapping nor the wrapped ``CanonicalError`` can be changed through it.
    """

    error: CanonicalError
    metadata: Mapping[str, MetadataValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Freeze a private copy of the metadata mapping."""
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ErrorWithContext):
            return NotImplemented
        return self.error == other.error and dict(self.metadata) == dict(other.metadata)

    def __hash__(self) -> int:
        return hash((self.error, tuple(sorted(self.metadata.items()))))

    @property
    def code(self) -> str:
        """Return the wrapped error's code."""
        return self.error.code

    @property
    def message(self) -> str:
        """Return the wrapped error's message."""
        return self.error.message

    @property
    def http_status(self) -> int:
        """Return the wrapped error's HTTP status."""
        return self.error.http_status

    @property
    def category(self) -> ErrorCategory:
        """Return the wrapped error's category."""
        return self.error.category


ErrorEntry = Union[CanonicalError, ErrorWithContext]


def _metadata_of(entry: ErrorEntry) -> Mapping[str, MetadataValue]:
    if isinstance(entry, ErrorWithContext):
        return entry.metadata
    return {}


def _sort_key(entry: ErrorEntry) -> tuple[str, int, str, tuple[tuple[str, str], ...]]:
    metadata = tuple(sorted((key, repr(value)) for key, value in _metadata_of(entry).items()))
    return (entry.code, entry.http_status, entry.message, metadata)


class ErrorSet:
    """Immutable, deduplicated set of error entries ordered by code.

    Entries sort by code first, then status, message and metadata, so the
    iteration order is stable across runs and processes.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[ErrorEntry] = ()) -> None:
        unique: dict[ErrorEntry, None] = {}
        for entry in entries:
            if not isinstance(entry, (CanonicalError, ErrorWithContext)):
                raise TypeError(f"unsupported error entry: {type(entry).__name__}")
            unique.setdefault(entry, None)
        self._entries: tuple[ErrorEntry, ...] = tuple(sorted(unique, key=_sort_key))

    @classmethod
    def of(cls, *entries: ErrorEntry) -> ErrorSet:
        """Build a set from positional entries."""
        return cls(entries)

    @classmethod
    def singleton(cls, entry: ErrorEntry) -> ErrorSet:
        """Build a set holding exactly one entry."""
        return cls((entry,))

    @property
    def codes(self) -> tuple[str, ...]:
        """Return entry codes in set order."""
        return tuple(entry.code for entry in self._entries)

    def __iter__(self) -> Iterator[ErrorEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __contains__(self, entry: object) -> bool:
        return entry in self._entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ErrorSet):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(self._entries)

    def __repr__(self) -> str:
        return f"ErrorSet({list(self._entries)!r})"
