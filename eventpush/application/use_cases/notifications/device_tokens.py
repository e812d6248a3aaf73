"""Resolve the push token a notification should be delivered to."""

from __future__ import annotations

import logging

from eventpush.infrastructure.repositories import DeviceTokenRepository

logger = logging.getLogger(__name__)


def resolve_device_token(tokens: DeviceTokenRepository, recipient_id: str) -> str | None:
    """Return the current token of ``recipient_id`` or ``None`` if undeliverable."""

    device_token = tokens.get(recipient_id)
    if device_token is None:
        logger.info("No token found for user: %s", recipient_id)
        return None
    if not device_token.is_deliverable:
        logger.info("Token exists but is empty for user: %s", recipient_id)
        return None
    return device_token.token.strip()


__all__ = ["resolve_device_token"]
