"""Tests for the SQLAlchemy document store."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import event

from eventpush.domain.errors import DocumentNotFoundError
from eventpush.infrastructure.store import FieldFilter, SqlDocumentStore


def test_add_generates_identifier_and_get_returns_document(store: SqlDocumentStore) -> None:
    created = store.add("user_notifications", {"recipientId": "U1", "status": "unread"})

    assert created.id
    fetched = store.get("user_notifications", created.id)
    assert fetched is not None
    assert fetched.data == {"recipientId": "U1", "status": "unread"}


def test_get_missing_document_returns_none(store: SqlDocumentStore) -> None:
    assert store.get("user_tokens", "nobody") is None


def test_documents_are_scoped_by_collection(store: SqlDocumentStore) -> None:
    store.set("user_notifications", "n1", {"recipientId": "U1"})
    store.set("creator_notifications", "n1", {"recipientId": "C1"})

    assert store.get("user_notifications", "n1").data["recipientId"] == "U1"
    assert store.get("creator_notifications", "n1").data["recipientId"] == "C1"
    assert len(store.query("user_notifications")) == 1


def test_datetimes_round_trip_as_aware_values(store: SqlDocumentStore) -> None:
    start = datetime(2024, 5, 1, 13, 30, tzinfo=timezone.utc)
    store.set("events", "e1", {"startTime": start, "nested": {"at": start}})

    data = store.get("events", "e1").data

    assert data["startTime"] == start
    assert data["startTime"].tzinfo is not None
    assert data["nested"]["at"] == start


def test_query_applies_equality_and_range_filters(store: SqlDocumentStore) -> None:
    base = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    for index, minutes in enumerate((30, 60, 90, 120, 150)):
        store.set("events", f"e{index}", {"startTime": base + timedelta(minutes=minutes)})
    store.set("events", "no-start", {"name": "unscheduled"})

    matches = store.query(
        "events",
        [
            FieldFilter("startTime", ">=", base + timedelta(hours=1)),
            FieldFilter("startTime", "<=", base + timedelta(hours=2)),
        ],
    )

    assert sorted(document.id for document in matches) == ["e1", "e2", "e3"]


def test_update_merges_fields(store: SqlDocumentStore) -> None:
    store.set("user_notifications", "n1", {"recipientId": "U1", "status": "unread"})

    updated = store.update("user_notifications", "n1", {"status": "read"})

    assert updated.data == {"recipientId": "U1", "status": "read"}
    assert store.get("user_notifications", "n1").data["status"] == "read"


def test_update_missing_document_raises(store: SqlDocumentStore) -> None:
    with pytest.raises(DocumentNotFoundError):
        store.update("events", "missing", {"reminderSent": True})


def test_batch_commit_is_all_or_nothing(store: SqlDocumentStore) -> None:
    store.set("events", "e1", {"reminderSent": False})
    store.set("events", "e2", {"reminderSent": False})

    batch = store.batch()
    batch.update("events", "e1", {"reminderSent": True})
    batch.update("events", "missing", {"reminderSent": True})
    batch.update("events", "e2", {"reminderSent": True})

    with pytest.raises(DocumentNotFoundError):
        batch.commit()

    assert store.get("events", "e1").data["reminderSent"] is False
    assert store.get("events", "e2").data["reminderSent"] is False


def test_batch_commit_applies_every_update(store: SqlDocumentStore) -> None:
    store.set("events", "e1", {"reminderSent": False, "name": "One"})
    store.set("events", "e2", {"reminderSent": False, "name": "Two"})

    batch = store.batch().update("events", "e1", {"reminderSent": True})
    batch.update("events", "e2", {"reminderSent": True})
    batch.commit()

    assert store.get("events", "e1").data == {"reminderSent": True, "name": "One"}
    assert store.get("events", "e2").data == {"reminderSent": True, "name": "Two"}


def test_unsupported_filter_operator_is_rejected() -> None:
    with pytest.raises(ValueError):
        FieldFilter("status", "!=", "unread")


def test_range_filter_accepts_epoch_millis_and_iso_strings(store: SqlDocumentStore) -> None:
    base = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    inside = base + timedelta(minutes=90)
    outside = base + timedelta(hours=5)
    store.set("events", "tagged", {"startTime": inside})
    store.set("events", "millis", {"startTime": int(inside.timestamp() * 1000)})
    store.set("events", "iso", {"startTime": inside.isoformat()})
    store.set("events", "iso-offset", {"startTime": "2024-05-01T15:30:00+02:00"})
    store.set("events", "late-millis", {"startTime": int(outside.timestamp() * 1000)})
    store.set("events", "late-tagged", {"startTime": outside})
    store.set("events", "garbage", {"startTime": "tomorrow"})

    matches = store.query(
        "events",
        [
            FieldFilter("startTime", ">=", base + timedelta(hours=1)),
            FieldFilter("startTime", "<=", base + timedelta(hours=2)),
        ],
    )

    assert sorted(document.id for document in matches) == ["iso", "iso-offset", "millis", "tagged"]


def test_filters_are_sent_to_the_database(engine, store: SqlDocumentStore) -> None:
    statements: list[str] = []

    def record(conn, cursor, statement, parameters, context, executemany) -> None:
        statements.append(statement.lower())

    store.set("user_notifications", "a", {"recipientId": "U1", "status": "unread"})
    event.listen(engine, "before_cursor_execute", record)
    try:
        matches = store.query(
            "user_notifications",
            [FieldFilter("recipientId", "==", "U1"), FieldFilter("status", "==", "unread")],
        )
    finally:
        event.remove(engine, "before_cursor_execute", record)

    assert [document.id for document in matches] == ["a"]
    select = next(statement for statement in statements if statement.startswith("select"))
    assert select.count("json_extract") == 2
