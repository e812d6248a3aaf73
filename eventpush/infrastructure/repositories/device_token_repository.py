"""Persistence helpers for device push tokens."""

from __future__ import annotations

from eventpush.domain.entities import DeviceToken
from eventpush.infrastructure.store import DocumentStore

from .fields import coerce_str


class DeviceTokenRepository:
    """Look up and register the single current push token of each user."""

    def __init__(self, store: DocumentStore, collection: str) -> None:
        self.store = store
        self.collection = collection

    def get(self, user_id: str) -> DeviceToken | None:
        document = self.store.get(self.collection, user_id)
        if document is None:
            return None
        return DeviceToken(user_id=user_id, token=coerce_str(document.data.get("token")))

    def save(self, user_id: str, token: str) -> DeviceToken:
        self.store.set(self.collection, user_id, {"token": token})
        return DeviceToken(user_id=user_id, token=token)


__all__ = ["DeviceTokenRepository"]
