"""Aggregate application use cases."""

from .notifications import dispatch_notification, send_event_reminders, synchronize_badge

__all__ = [
    "dispatch_notification",
    "send_event_reminders",
    "synchronize_badge",
]
