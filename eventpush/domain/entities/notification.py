"""Domain entity representing a stored notification record."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

NOTIFICATION_STATUS_UNREAD = "unread"
NOTIFICATION_STATUS_READ = "read"

RECIPIENT_TYPE_USER = "user"
RECIPIENT_TYPE_EVENT_CREATOR = "eventCreator"


@dataclass
class Notification:
    """Message addressed to a single recipient, stored in a notification collection."""

    id: str | None
    recipient_id: str | None
    title: str | None = None
    message: str | None = None
    notification_type: str | None = None
    status: str | None = NOTIFICATION_STATUS_UNREAD
    created_at: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    action_link: str | None = None
    image_url: str | None = None
    recipient_type: str | None = None

    @property
    def is_unread(self) -> bool:
        return self.status == NOTIFICATION_STATUS_UNREAD


__all__ = [
    "Notification",
    "NOTIFICATION_STATUS_UNREAD",
    "NOTIFICATION_STATUS_READ",
    "RECIPIENT_TYPE_USER",
    "RECIPIENT_TYPE_EVENT_CREATOR",
]
