"""Tests for the notification dispatcher."""

from __future__ import annotations

import pytest

from eventpush.application.use_cases.notifications import (
    build_notification_message,
    dispatch_notification,
    flatten_metadata,
)
from eventpush.container import ServiceContainer
from eventpush.domain.entities import HandlerOutcome
from eventpush.domain.errors import PushDeliveryError
from eventpush.infrastructure.repositories import NotificationRepository

pytestmark = pytest.mark.anyio


def _notification_data(**overrides):
    data = {
        "recipientId": "U1",
        "title": "Event Starting Soon",
        "message": '"Launch" starts in less than 2 hours.',
        "type": "eventStartingSoon",
        "status": "unread",
        "metadata": {"eventId": "E1", "startTime": 1714568400000},
        "actionLink": "event/E1",
    }
    data.update(overrides)
    return data


async def test_sends_exactly_one_push_when_token_exists(
    services: ServiceContainer, push_sender
) -> None:
    services.store.set("user_tokens", "U1", {"token": "token-u1"})

    result = await dispatch_notification(
        services, collection="user_notifications", notification_id="n1", data=_notification_data()
    )

    assert result.outcome is HandlerOutcome.SUCCEEDED
    assert result.values["message_id"] == "projects/test/messages/1"
    assert len(push_sender.messages) == 1
    message = push_sender.messages[0]
    assert message.token == "token-u1"
    assert message.display.title == "Event Starting Soon"
    assert message.data["notificationId"] == "n1"
    assert message.data["type"] == "eventStartingSoon"
    assert message.data["click_action"] == "FLUTTER_NOTIFICATION_CLICK"
    assert message.data["actionLink"] == "event/E1"
    assert message.data["eventId"] == "E1"
    assert message.data["startTime"] == "1714568400000"


async def test_creator_collection_is_dispatched_too(
    services: ServiceContainer, push_sender
) -> None:
    services.store.set("user_tokens", "C1", {"token": "token-c1"})

    result = await dispatch_notification(
        services,
        collection="creator_notifications",
        notification_id="n2",
        data=_notification_data(recipientId="C1"),
    )

    assert result.outcome is HandlerOutcome.SUCCEEDED
    assert [message.token for message in push_sender.messages] == ["token-c1"]


async def test_other_collections_are_ignored(
    services: ServiceContainer, push_sender
) -> None:
    services.store.set("user_tokens", "U1", {"token": "token-u1"})

    result = await dispatch_notification(
        services, collection="events", notification_id="e1", data=_notification_data()
    )

    assert result.outcome is HandlerOutcome.SKIPPED
    assert push_sender.messages == []


@pytest.mark.parametrize(
    ("recipient_id", "token_document"),
    [
        (None, {"token": "token-u1"}),
        ("", {"token": "token-u1"}),
        ("U1", None),
        ("U1", {}),
        ("U1", {"token": ""}),
        ("U1", {"token": "   "}),
    ],
)
async def test_missing_recipient_or_token_is_a_silent_skip(
    services: ServiceContainer,
    push_sender,
    recipient_id,
    token_document,
) -> None:
    if token_document is not None:
        services.store.set("user_tokens", "U1", token_document)
    data = _notification_data(recipientId=recipient_id)

    result = await dispatch_notification(
        services, collection="user_notifications", notification_id="n1", data=data
    )

    assert result.outcome is HandlerOutcome.SKIPPED
    assert push_sender.messages == []


async def test_transport_failure_is_reported_not_raised(
    services: ServiceContainer, push_sender, caplog: pytest.LogCaptureFixture
) -> None:
    push_sender.error = PushDeliveryError("rejected")
    services.store.set("user_tokens", "U1", {"token": "token-u1"})

    with caplog.at_level("ERROR"):
        result = await dispatch_notification(
            services, collection="user_notifications", notification_id="n1", data=_notification_data()
        )

    assert result.outcome is HandlerOutcome.FAILED
    assert isinstance(result.error, PushDeliveryError)
    assert len(push_sender.messages) == 1
    assert "Error sending notification" in caplog.text


def test_flatten_metadata_strips_large_fields_and_serializes_objects() -> None:
    flattened = flatten_metadata(
        {"a": 1, "fullDescription": "very long text", "b": {"x": 1}, "fullContent": "..."}
    )

    assert flattened == {"a": "1", "b": '{"x":1}'}


def test_flatten_metadata_stringifies_scalars() -> None:
    flattened = flatten_metadata({"flag": True, "empty": None, "items": [1, "two"], "ratio": 0.5})

    assert flattened == {
        "flag": "true",
        "empty": "null",
        "items": '[1,"two"]',
        "ratio": "0.5",
    }


def test_message_carries_platform_hints_and_defaults(services: ServiceContainer) -> None:
    notification = NotificationRepository.to_entity(
        "n9", {"recipientId": "U1", "title": "T", "message": "M", "imageUrl": "https://i/x.png"}
    )

    message = build_notification_message(notification, token="tok", settings=services.settings)

    assert message.display.image_url == "https://i/x.png"
    assert message.data == {
        "notificationId": "n9",
        "type": "",
        "click_action": "FLUTTER_NOTIFICATION_CLICK",
        "actionLink": "",
    }
    assert message.android.priority == "high"
    assert message.android.sound == "default"
    assert message.android.channel_id == "high_importance_channel"
    assert message.apns.sound == "default"
    assert message.apns.badge == 1


def test_flatten_metadata_prints_integral_floats_without_fraction() -> None:
    flattened = flatten_metadata(
        {"count": 1.0, "price": 12.5, "nested": {"seats": 40.0}, "missing": float("nan")}
    )

    assert flattened == {
        "count": "1",
        "price": "12.5",
        "nested": '{"seats":40}',
        "missing": "NaN",
    }
