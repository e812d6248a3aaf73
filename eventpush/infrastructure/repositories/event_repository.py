"""Persistence helpers for scheduled events."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from eventpush.domain.entities import Event
from eventpush.infrastructure.store import DocumentStore, FieldFilter

from .fields import coerce_datetime, coerce_str, coerce_str_list


class EventRepository:
    """Provide the event queries and writes needed by the reminder job."""

    def __init__(self, store: DocumentStore, collection: str) -> None:
        self.store = store
        self.collection = collection

    def get(self, event_id: str) -> Event | None:
        document = self.store.get(self.collection, event_id)
        if document is None:
            return None
        return self.to_entity(document.id, document.data)

    def list_starting_between(self, start: datetime, end: datetime) -> list[Event]:
        """Return events whose ``startTime`` lies in the closed range ``[start, end]``."""

        documents = self.store.query(
            self.collection,
            [
                FieldFilter("startTime", ">=", start),
                FieldFilter("startTime", "<=", end),
            ],
        )
        return [self.to_entity(document.id, document.data) for document in documents]

    def save(self, event: Event) -> Event:
        document = self.store.set(self.collection, event.id, self.to_document_data(event))
        return self.to_entity(document.id, document.data)

    def mark_reminders_sent(self, event_ids: Iterable[str]) -> int:
        """Flag every event in ``event_ids`` in a single atomic batch."""

        batch = self.store.batch()
        for event_id in event_ids:
            batch.update(self.collection, event_id, {"reminderSent": True})
        batch.commit()
        return len(batch)

    @staticmethod
    def to_document_data(event: Event) -> dict[str, Any]:
        return {
            "creatorId": event.creator_id,
            "name": event.name,
            "startTime": event.start_time,
            "venueAddress": event.venue_address,
            "attendees": list(event.attendees),
            "reminderSent": event.reminder_sent,
        }

    @staticmethod
    def to_entity(event_id: str, data: Mapping[str, Any]) -> Event:
        return Event(
            id=event_id,
            creator_id=coerce_str(data.get("creatorId")) or None,
            name=coerce_str(data.get("name")),
            start_time=coerce_datetime(data.get("startTime")),
            venue_address=coerce_str(data.get("venueAddress")),
            attendees=coerce_str_list(data.get("attendees")),
            reminder_sent=bool(data.get("reminderSent")),
        )


__all__ = ["EventRepository"]
