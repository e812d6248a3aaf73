"""Document store backed by a single SQLAlchemy table."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import ColumnElement, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from eventpush.domain.errors import DocumentNotFoundError, StoreError
from eventpush.infrastructure.models import DocumentModel
from eventpush.utils import ensure_app_timezone

from .base import (
    FILTER_OPERATORS,
    Document,
    DocumentStore,
    FieldFilter,
    WriteBatch,
    generate_document_id,
)

logger = logging.getLogger(__name__)

_TIMESTAMP_KEY = "__timestamp__"


def _timestamp_text(value: datetime) -> str:
    """Return ``value`` as fixed-width UTC ISO-8601, which sorts chronologically."""

    return ensure_app_timezone(value).astimezone(timezone.utc).isoformat(timespec="microseconds")


def _sql_prefilter(predicate: FieldFilter) -> ColumnElement[bool] | None:
    """Translate ``predicate`` into a SQL condition, or ``None`` to check it in Python only.

    The condition may accept documents that :meth:`FieldFilter.matches` later
    rejects, never the opposite.
    """

    compare = FILTER_OPERATORS[predicate.op]
    if isinstance(predicate.value, datetime):
        tagged = DocumentModel.data[(predicate.field, _TIMESTAMP_KEY)].as_string()
        # Epoch millis and ISO strings written by other clients are not tagged.
        return or_(tagged.is_(None), compare(tagged, _timestamp_text(predicate.value)))
    if predicate.op == "==" and isinstance(predicate.value, str):
        return DocumentModel.data[predicate.field].as_string() == predicate.value
    return None


def encode_value(value: Any) -> Any:
    """Return ``value`` with nested ``datetime`` instances tagged for JSON storage."""

    if isinstance(value, datetime):
        return {_TIMESTAMP_KEY: _timestamp_text(value)}
    if isinstance(value, Mapping):
        return {str(key): encode_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [encode_value(item) for item in value]
    return value


def decode_value(value: Any) -> Any:
    """Reverse :func:`encode_value`."""

    if isinstance(value, dict):
        if set(value) == {_TIMESTAMP_KEY}:
            return ensure_app_timezone(datetime.fromisoformat(value[_TIMESTAMP_KEY]))
        return {key: decode_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [decode_value(item) for item in value]
    return value


class SqlDocumentStore(DocumentStore):
    """Keep documents as JSON rows keyed by ``(collection, document_id)``.

    String equality and datetime range filters run in the database as JSON
    path conditions; every filter is then checked again in Python, which also
    covers values the database cannot compare.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Yield a session, committing on success and rolling back on failure."""

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(f"Document store operation failed: {exc}") from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get(self, collection: str, document_id: str) -> Document | None:
        with self.session_scope() as session:
            model = session.get(DocumentModel, (collection, document_id))
            if model is None:
                return None
            return self._to_document(model)

    def query(
        self, collection: str, filters: Iterable[FieldFilter] = ()
    ) -> list[Document]:
        predicates = list(filters)
        conditions = [DocumentModel.collection == collection]
        for predicate in predicates:
            condition = _sql_prefilter(predicate)
            if condition is not None:
                conditions.append(condition)
        with self.session_scope() as session:
            models = (
                session.query(DocumentModel)
                .filter(*conditions)
                .order_by(DocumentModel.created_at, DocumentModel.document_id)
                .all()
            )
            documents = [self._to_document(model) for model in models]
        return [
            document
            for document in documents
            if all(predicate.matches(document.data) for predicate in predicates)
        ]

    def add(self, collection: str, data: Mapping[str, Any]) -> Document:
        return self.set(collection, generate_document_id(), data)

    def set(self, collection: str, document_id: str, data: Mapping[str, Any]) -> Document:
        with self.session_scope() as session:
            model = session.get(DocumentModel, (collection, document_id))
            if model is None:
                model = DocumentModel(collection=collection, document_id=document_id)
            model.data = encode_value(dict(data))
            session.add(model)
            session.flush()
            return self._to_document(model)

    def update(
        self, collection: str, document_id: str, changes: Mapping[str, Any]
    ) -> Document:
        with self.session_scope() as session:
            model = self._apply_changes(session, collection, document_id, changes)
            session.flush()
            return self._to_document(model)

    def batch(self) -> "SqlWriteBatch":
        return SqlWriteBatch(self)

    @staticmethod
    def _apply_changes(
        session: Session,
        collection: str,
        document_id: str,
        changes: Mapping[str, Any],
    ) -> DocumentModel:
        model = session.get(DocumentModel, (collection, document_id))
        if model is None:
            raise DocumentNotFoundError(collection, document_id)
        merged = dict(model.data or {})
        merged.update(encode_value(dict(changes)))
        # Reassign so SQLAlchemy notices the JSON column changed.
        model.data = merged
        session.add(model)
        return model

    @staticmethod
    def _to_document(model: DocumentModel) -> Document:
        return Document(
            collection=model.collection,
            id=model.document_id,
            data=decode_value(dict(model.data or {})),
        )


class SqlWriteBatch(WriteBatch):
    """Apply queued updates inside one database transaction."""

    def __init__(self, store: SqlDocumentStore) -> None:
        super().__init__()
        self._store = store

    def commit(self) -> None:
        if not self._updates:
            return
        with self._store.session_scope() as session:
            for collection, document_id, changes in self._updates:
                SqlDocumentStore._apply_changes(session, collection, document_id, changes)
        logger.debug("Committed batch of %s document updates", len(self._updates))


__all__ = ["SqlDocumentStore", "SqlWriteBatch", "decode_value", "encode_value"]
