"""Exceptions raised by the store and push adapters."""


class EventPushError(Exception):
    """Base class for errors raised by the service."""


class StoreError(EventPushError):
    """A document store read or write failed."""


class DocumentNotFoundError(StoreError):
    """An update targeted a document that does not exist."""

    def __init__(self, collection: str, document_id: str) -> None:
        super().__init__(f"Document {collection}/{document_id} not found")
        self.collection = collection
        self.document_id = document_id


class PushDeliveryError(EventPushError):
    """The push transport rejected or could not deliver a message."""


class PayloadError(EventPushError):
    """An outbound push message could not be built."""


__all__ = [
    "EventPushError",
    "StoreError",
    "DocumentNotFoundError",
    "PushDeliveryError",
    "PayloadError",
]
