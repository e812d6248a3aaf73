"""Send one push message for every newly created notification record."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from datetime import datetime
from typing import Any

import anyio

from eventpush.config import Settings
from eventpush.container import ServiceContainer
from eventpush.domain.entities import (
    AndroidDelivery,
    ApnsDelivery,
    HandlerResult,
    Notification,
    PushDisplay,
    PushMessage,
)
from eventpush.infrastructure.repositories import (
    DeviceTokenRepository,
    NotificationRepository,
)

from .device_tokens import resolve_device_token

logger = logging.getLogger(__name__)

# Large free-text fields that would push the message over the transport's size limit.
EXCLUDED_METADATA_KEYS: frozenset[str] = frozenset({"fullDescription", "fullContent"})


def _format_number(value: float) -> str:
    """Render a float like JavaScript's ``String()``, so ``1.0`` becomes ``1``."""

    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _normalize_numbers(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, Mapping):
        return {key: _normalize_numbers(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_normalize_numbers(item) for item in value]
    return value


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return str(value)


def stringify_metadata_value(value: Any) -> str:
    """Return the string form of a metadata value for the data section."""

    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, float):
        return _format_number(value)
    if value is None or isinstance(value, (Mapping, list, tuple, set, frozenset)):
        return json.dumps(_normalize_numbers(value), default=_json_default, separators=(",", ":"))
    return str(value)


def flatten_metadata(metadata: Mapping[str, Any] | None) -> dict[str, str]:
    """Return ``metadata`` as a flat ``str -> str`` mapping without the large fields."""

    if not metadata:
        return {}
    return {
        str(key): stringify_metadata_value(value)
        for key, value in metadata.items()
        if key not in EXCLUDED_METADATA_KEYS
    }


def build_notification_message(
    notification: Notification, *, token: str, settings: Settings
) -> PushMessage:
    """Build the display push announcing ``notification``."""

    data = {
        "notificationId": notification.id or "",
        "type": notification.notification_type or "",
        "click_action": settings.click_action,
        "actionLink": notification.action_link or "",
    }
    data.update(flatten_metadata(notification.metadata))

    return PushMessage(
        token=token,
        display=PushDisplay(
            title=notification.title,
            body=notification.message,
            image_url=notification.image_url,
        ),
        data=data,
        android=AndroidDelivery(
            priority="high",
            sound="default",
            notification_priority="high",
            channel_id=settings.android_channel_id,
        ),
        apns=ApnsDelivery(sound="default", badge=1),
    )


async def dispatch_notification(
    services: ServiceContainer,
    *,
    collection: str,
    notification_id: str,
    data: Mapping[str, Any],
) -> HandlerResult:
    """Push the notification ``collection/notification_id`` to its recipient.

    Creations outside the notification collections, records without a
    recipient and recipients without a token are skipped. Any other problem is
    logged and reported as a failed result; nothing is raised.
    """

    settings = services.settings
    if collection not in settings.notification_collections:
        return HandlerResult.skipped("not a notification collection", collection=collection)

    try:
        notification = NotificationRepository.to_entity(notification_id, data)
        if not notification.recipient_id:
            logger.info("No recipient ID found in notification %s/%s", collection, notification_id)
            return HandlerResult.skipped("missing recipient")

        tokens = DeviceTokenRepository(services.store, settings.device_tokens_collection)
        token = await anyio.to_thread.run_sync(
            resolve_device_token, tokens, notification.recipient_id
        )
        if token is None:
            return HandlerResult.skipped("no device token", recipient_id=notification.recipient_id)

        message = build_notification_message(notification, token=token, settings=settings)
        message_id = await anyio.to_thread.run_sync(services.push_sender.send, message)
    except Exception as exc:
        logger.exception("Error sending notification %s/%s", collection, notification_id)
        return HandlerResult.failed(exc)

    logger.info("Successfully sent message %s for notification %s", message_id, notification_id)
    return HandlerResult.succeeded("push sent", message_id=message_id)


__all__ = [
    "EXCLUDED_METADATA_KEYS",
    "build_notification_message",
    "dispatch_notification",
    "flatten_metadata",
    "stringify_metadata_value",
]
