"""Push transport contract and the no-op implementation."""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod

from eventpush.domain.entities import PushMessage

logger = logging.getLogger(__name__)


class PushSender(ABC):
    """Deliver one :class:`PushMessage` to one device token."""

    @abstractmethod
    def send(self, message: PushMessage) -> str:
        """Send ``message`` and return the transport's message identifier.

        Raises :class:`~eventpush.domain.errors.PushDeliveryError` when the
        transport rejects the message or cannot be reached.
        """


class NullPushSender(PushSender):
    """Drop every message; used when push delivery is disabled."""

    def send(self, message: PushMessage) -> str:
        message_id = f"dropped-{uuid.uuid4().hex}"
        logger.info(
            "Push delivery disabled; dropping message %s for token %s...",
            message_id,
            message.token[:8],
        )
        return message_id


__all__ = ["NullPushSender", "PushSender"]
