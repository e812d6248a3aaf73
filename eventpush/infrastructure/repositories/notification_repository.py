"""Persistence helpers for notification records."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from eventpush.domain.entities import NOTIFICATION_STATUS_UNREAD, Notification
from eventpush.infrastructure.store import DocumentStore, FieldFilter

from .fields import coerce_datetime, coerce_str


class NotificationRepository:
    """Read and write :class:`Notification` records in a notification collection."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def get(self, collection: str, notification_id: str) -> Notification | None:
        document = self.store.get(collection, notification_id)
        if document is None:
            return None
        return self.to_entity(document.id, document.data)

    def list_unread_for_recipient(
        self, collection: str, recipient_id: str
    ) -> list[Notification]:
        documents = self.store.query(
            collection,
            [
                FieldFilter("recipientId", "==", recipient_id),
                FieldFilter("status", "==", NOTIFICATION_STATUS_UNREAD),
            ],
        )
        return [self.to_entity(document.id, document.data) for document in documents]

    def count_unread_for_recipient(self, collection: str, recipient_id: str) -> int:
        return len(self.list_unread_for_recipient(collection, recipient_id))

    def create(self, collection: str, notification: Notification) -> Notification:
        document = self.store.add(collection, self.to_document_data(notification))
        return self.to_entity(document.id, document.data)

    def update_status(
        self, collection: str, notification_id: str, status: str
    ) -> Notification:
        document = self.store.update(collection, notification_id, {"status": status})
        return self.to_entity(document.id, document.data)

    @staticmethod
    def to_document_data(notification: Notification) -> dict[str, Any]:
        data: dict[str, Any] = {
            "recipientId": notification.recipient_id,
            "title": notification.title,
            "message": notification.message,
            "type": notification.notification_type,
            "status": notification.status,
            "createdAt": notification.created_at,
            "metadata": dict(notification.metadata or {}),
        }
        if notification.recipient_type is not None:
            data["recipientType"] = notification.recipient_type
        if notification.action_link is not None:
            data["actionLink"] = notification.action_link
        if notification.image_url is not None:
            data["imageUrl"] = notification.image_url
        return data

    @staticmethod
    def to_entity(notification_id: str | None, data: Mapping[str, Any]) -> Notification:
        metadata = data.get("metadata")
        return Notification(
            id=notification_id,
            recipient_id=coerce_str(data.get("recipientId")),
            title=coerce_str(data.get("title")),
            message=coerce_str(data.get("message")),
            notification_type=coerce_str(data.get("type")),
            status=coerce_str(data.get("status")),
            created_at=coerce_datetime(data.get("createdAt")),
            metadata=dict(metadata) if isinstance(metadata, Mapping) else {},
            action_link=coerce_str(data.get("actionLink")),
            image_url=coerce_str(data.get("imageUrl")),
            recipient_type=coerce_str(data.get("recipientType")),
        )


__all__ = ["NotificationRepository"]
