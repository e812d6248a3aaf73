"""Document store contract shared by the SQL and Firestore implementations."""

from __future__ import annotations

import operator
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from eventpush.utils import parse_timestamp

FILTER_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def generate_document_id() -> str:
    """Return a new random document identifier."""

    return uuid.uuid4().hex


@dataclass(frozen=True)
class Document:
    """Snapshot of a stored document."""

    collection: str
    id: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FieldFilter:
    """Equality or range predicate applied to a top-level document field."""

    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in FILTER_OPERATORS:
            raise ValueError(f"Unsupported filter operator: {self.op!r}")

    def matches(self, data: Mapping[str, Any]) -> bool:
        """Return ``True`` when ``data`` satisfies the predicate.

        A datetime filter value compares against stored datetimes, epoch
        milliseconds and ISO-8601 strings alike. Documents lacking the field,
        or holding a value that cannot be compared with the filter value, never
        match.
        """

        if self.field not in data:
            return False
        candidate, expected = data[self.field], self.value
        if isinstance(expected, datetime):
            candidate, expected = parse_timestamp(candidate), parse_timestamp(expected)
            if candidate is None:
                return False
        try:
            return bool(FILTER_OPERATORS[self.op](candidate, expected))
        except TypeError:
            return False


class WriteBatch(ABC):
    """Collect document updates and apply them all-or-nothing on :meth:`commit`."""

    def __init__(self) -> None:
        self._updates: list[tuple[str, str, dict[str, Any]]] = []

    def update(
        self, collection: str, document_id: str, changes: Mapping[str, Any]
    ) -> "WriteBatch":
        self._updates.append((collection, document_id, dict(changes)))
        return self

    def __len__(self) -> int:
        return len(self._updates)

    @abstractmethod
    def commit(self) -> None:
        """Apply every queued update atomically."""


class DocumentStore(ABC):
    """Minimal document store used by the use cases.

    Implementations raise :class:`~eventpush.domain.errors.StoreError` for any
    backend failure.
    """

    #: Largest number of updates one :class:`WriteBatch` may commit, if bounded.
    max_batch_writes: int | None = None

    @abstractmethod
    def get(self, collection: str, document_id: str) -> Document | None:
        """Return the document or ``None`` when it does not exist."""

    @abstractmethod
    def query(
        self, collection: str, filters: Iterable[FieldFilter] = ()
    ) -> list[Document]:
        """Return every document of ``collection`` matching all ``filters``."""

    @abstractmethod
    def add(self, collection: str, data: Mapping[str, Any]) -> Document:
        """Create a document with a generated identifier."""

    @abstractmethod
    def set(self, collection: str, document_id: str, data: Mapping[str, Any]) -> Document:
        """Create or replace the document ``document_id``."""

    @abstractmethod
    def update(
        self, collection: str, document_id: str, changes: Mapping[str, Any]
    ) -> Document:
        """Merge ``changes`` into an existing document."""

    @abstractmethod
    def batch(self) -> WriteBatch:
        """Return an empty write batch bound to this store."""


__all__ = [
    "Document",
    "DocumentStore",
    "FILTER_OPERATORS",
    "FieldFilter",
    "WriteBatch",
    "generate_document_id",
]
