"""Domain entity representing a scheduled event."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Event:
    """Scheduled gathering whose attendees receive a reminder before it starts."""

    id: str
    creator_id: str | None = None
    name: str | None = None
    start_time: datetime | None = None
    venue_address: str | None = None
    attendees: list[str] = field(default_factory=list)
    reminder_sent: bool = False


__all__ = ["Event"]
