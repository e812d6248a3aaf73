"""Keep the app icon badge equal to the recipient's unread notification count."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import anyio

from eventpush.container import ServiceContainer
from eventpush.domain.entities import (
    NOTIFICATION_STATUS_UNREAD,
    ApnsDelivery,
    HandlerResult,
    PushMessage,
)
from eventpush.infrastructure.repositories import (
    DeviceTokenRepository,
    NotificationRepository,
)

from .device_tokens import resolve_device_token

logger = logging.getLogger(__name__)


def is_unread_cleared(before: Mapping[str, Any], after: Mapping[str, Any]) -> bool:
    """Return ``True`` when an update moves a record out of the unread state."""

    return (
        before.get("status") == NOTIFICATION_STATUS_UNREAD
        and after.get("status") != NOTIFICATION_STATUS_UNREAD
    )


def build_badge_message(*, token: str, unread_count: int) -> PushMessage:
    """Build a badge-only push.

    The transport refuses a message carrying nothing but APNs options, hence
    the ``updateBadge`` data field.
    """

    return PushMessage(
        token=token,
        data={"updateBadge": "true"},
        apns=ApnsDelivery(badge=unread_count),
    )


async def synchronize_badge(
    services: ServiceContainer,
    *,
    collection: str,
    notification_id: str,
    before: Mapping[str, Any],
    after: Mapping[str, Any],
) -> HandlerResult:
    """Recount unread records and push the new badge after a record is read."""

    settings = services.settings
    if collection not in settings.notification_collections:
        return HandlerResult.skipped("not a notification collection", collection=collection)
    if not is_unread_cleared(before, after):
        return HandlerResult.skipped("status did not leave unread")

    try:
        recipient_id = NotificationRepository.to_entity(notification_id, after).recipient_id
        if not recipient_id:
            logger.info("No recipient ID on updated notification %s/%s", collection, notification_id)
            return HandlerResult.skipped("missing recipient")

        notifications = NotificationRepository(services.store)
        unread_count = await anyio.to_thread.run_sync(
            notifications.count_unread_for_recipient, collection, recipient_id
        )

        tokens = DeviceTokenRepository(services.store, settings.device_tokens_collection)
        token = await anyio.to_thread.run_sync(resolve_device_token, tokens, recipient_id)
        if token is None:
            return HandlerResult.skipped("no device token", recipient_id=recipient_id)

        message = build_badge_message(token=token, unread_count=unread_count)
        message_id = await anyio.to_thread.run_sync(services.push_sender.send, message)
    except Exception as exc:
        logger.exception("Error updating badge count for %s/%s", collection, notification_id)
        return HandlerResult.failed(exc)

    logger.info("Updated badge for %s to %s (message %s)", recipient_id, unread_count, message_id)
    return HandlerResult.succeeded("badge updated", badge=unread_count, message_id=message_id)


__all__ = ["build_badge_message", "is_unread_cleared", "synchronize_badge"]
