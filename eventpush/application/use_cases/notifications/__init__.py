"""Use cases reacting to notification writes and reminder ticks."""

from .badge import build_badge_message, is_unread_cleared, synchronize_badge
from .device_tokens import resolve_device_token
from .dispatch import build_notification_message, dispatch_notification, flatten_metadata
from .reminders import (
    ReminderPlan,
    ReminderWindow,
    plan_event_reminders,
    send_event_reminders,
)

__all__ = [
    "build_badge_message",
    "is_unread_cleared",
    "synchronize_badge",
    "resolve_device_token",
    "build_notification_message",
    "dispatch_notification",
    "flatten_metadata",
    "ReminderPlan",
    "ReminderWindow",
    "plan_event_reminders",
    "send_event_reminders",
]
