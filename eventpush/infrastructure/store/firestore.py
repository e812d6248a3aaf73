"""Document store backed by Cloud Firestore through the Firebase Admin SDK."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from google.api_core import exceptions as google_exceptions
from google.cloud.firestore_v1.base_query import FieldFilter as FirestoreFieldFilter

from eventpush.domain.errors import DocumentNotFoundError, StoreError

from .base import Document, DocumentStore, FieldFilter, WriteBatch

logger = logging.getLogger(__name__)

MAX_BATCH_WRITES = 500


@contextmanager
def _translate_errors(action: str) -> Iterator[None]:
    try:
        yield
    except google_exceptions.GoogleAPIError as exc:
        raise StoreError(f"Firestore {action} failed: {exc}") from exc


class FirestoreDocumentStore(DocumentStore):
    """Adapt a ``google.cloud.firestore.Client`` to :class:`DocumentStore`."""

    max_batch_writes = MAX_BATCH_WRITES

    def __init__(self, client: Any) -> None:
        self._client = client

    def get(self, collection: str, document_id: str) -> Document | None:
        with _translate_errors("get"):
            snapshot = self._client.collection(collection).document(document_id).get()
        if not snapshot.exists:
            return None
        return Document(collection, snapshot.id, snapshot.to_dict() or {})

    def query(
        self, collection: str, filters: Iterable[FieldFilter] = ()
    ) -> list[Document]:
        query = self._client.collection(collection)
        for predicate in filters:
            query = query.where(
                filter=FirestoreFieldFilter(predicate.field, predicate.op, predicate.value)
            )
        with _translate_errors("query"):
            return [
                Document(collection, snapshot.id, snapshot.to_dict() or {})
                for snapshot in query.stream()
            ]

    def add(self, collection: str, data: Mapping[str, Any]) -> Document:
        payload = dict(data)
        with _translate_errors("add"):
            _, reference = self._client.collection(collection).add(payload)
        return Document(collection, reference.id, payload)

    def set(self, collection: str, document_id: str, data: Mapping[str, Any]) -> Document:
        payload = dict(data)
        with _translate_errors("set"):
            self._client.collection(collection).document(document_id).set(payload)
        return Document(collection, document_id, payload)

    def update(
        self, collection: str, document_id: str, changes: Mapping[str, Any]
    ) -> Document:
        reference = self._client.collection(collection).document(document_id)
        try:
            with _translate_errors("update"):
                reference.update(dict(changes))
                snapshot = reference.get()
        except StoreError as exc:
            if isinstance(exc.__cause__, google_exceptions.NotFound):
                raise DocumentNotFoundError(collection, document_id) from exc.__cause__
            raise
        return Document(collection, document_id, snapshot.to_dict() or {})

    def batch(self) -> "FirestoreWriteBatch":
        return FirestoreWriteBatch(self._client)


class FirestoreWriteBatch(WriteBatch):
    """Queue updates and commit them as one Firestore batched write."""

    def __init__(self, client: Any) -> None:
        super().__init__()
        self._client = client

    def commit(self) -> None:
        if not self._updates:
            return
        if len(self._updates) > MAX_BATCH_WRITES:
            raise StoreError(
                f"Firestore batch of {len(self._updates)} writes exceeds the limit of {MAX_BATCH_WRITES}"
            )
        batch = self._client.batch()
        for collection, document_id, changes in self._updates:
            batch.update(self._client.collection(collection).document(document_id), changes)
        with _translate_errors("batch commit"):
            batch.commit()
        logger.debug("Committed Firestore batch of %s updates", len(self._updates))


__all__ = ["MAX_BATCH_WRITES", "FirestoreDocumentStore", "FirestoreWriteBatch"]
