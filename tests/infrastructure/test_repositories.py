from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from eventpush.domain.entities import NOTIFICATION_STATUS_READ, Event, Notification
from eventpush.domain.errors import DocumentNotFoundError
from eventpush.infrastructure.repositories import (
    DeviceTokenRepository,
    EventRepository,
    NotificationRepository,
)

START = datetime(2024, 5, 1, 13, 30, tzinfo=timezone.utc)


def test_event_save_and_get(store) -> None:
    events = EventRepository(store, "events")
    events.save(Event(id="E1", creator_id="C1", name="Launch", start_time=START, attendees=["U1", "U2"]))

    event = events.get("E1")

    assert event == Event(
        id="E1",
        creator_id="C1",
        name="Launch",
        start_time=START,
        attendees=["U1", "U2"],
        reminder_sent=False,
    )
    assert events.get("missing") is None


def test_event_start_time_accepts_epoch_millis_and_iso_strings() -> None:
    millis = EventRepository.to_entity("a", {"startTime": int(START.timestamp() * 1000)})
    iso = EventRepository.to_entity("b", {"startTime": START.isoformat()})
    junk = EventRepository.to_entity("c", {"startTime": "soon", "attendees": "U1"})

    assert millis.start_time == START
    assert iso.start_time == START
    assert junk.start_time is None
    assert junk.attendees == []


def test_list_starting_between_is_inclusive(store) -> None:
    events = EventRepository(store, "events")
    for offset in (0, 30, 60, 61):
        events.save(Event(id=f"E{offset}", start_time=START + timedelta(minutes=offset)))

    found = events.list_starting_between(START, START + timedelta(minutes=60))

    assert sorted(event.id for event in found) == ["E0", "E30", "E60"]


def test_mark_reminders_sent_flags_every_event(store) -> None:
    events = EventRepository(store, "events")
    events.save(Event(id="E1", start_time=START))
    events.save(Event(id="E2", start_time=START))

    assert events.mark_reminders_sent(["E1", "E2"]) == 2
    assert events.get("E1").reminder_sent
    assert events.get("E2").reminder_sent


def test_mark_reminders_sent_with_unknown_event_writes_nothing(store) -> None:
    events = EventRepository(store, "events")
    events.save(Event(id="E1", start_time=START))

    with pytest.raises(DocumentNotFoundError):
        events.mark_reminders_sent(["E1", "ghost"])

    assert not events.get("E1").reminder_sent


def test_notification_status_update_changes_unread_count(store) -> None:
    notifications = NotificationRepository(store)
    created = notifications.create(
        "user_notifications",
        Notification(id=None, recipient_id="U1", title="Hi", message="Hello", created_at=START),
    )
    notifications.create("user_notifications", Notification(id=None, recipient_id="U1", title="Again"))
    assert notifications.count_unread_for_recipient("user_notifications", "U1") == 2

    updated = notifications.update_status("user_notifications", created.id, NOTIFICATION_STATUS_READ)

    assert updated.status == NOTIFICATION_STATUS_READ
    assert updated.created_at == START
    assert notifications.get("user_notifications", created.id).title == "Hi"
    assert notifications.count_unread_for_recipient("user_notifications", "U1") == 1


def test_missing_status_is_not_treated_as_unread() -> None:
    notification = NotificationRepository.to_entity("n1", {"recipientId": "U1"})

    assert notification.status is None
    assert not notification.is_unread


def test_device_token_lookup(store) -> None:
    tokens = DeviceTokenRepository(store, "user_tokens")
    tokens.save("U1", "token-u1")
    store.set("user_tokens", "U2", {"token": "   "})

    assert tokens.get("U1").is_deliverable
    assert not tokens.get("U2").is_deliverable
    assert tokens.get("U3") is None
