"""Domain entities exposed by the application."""

from .device_token import DeviceToken
from .event import Event
from .handler_result import HandlerOutcome, HandlerResult
from .notification import (
    NOTIFICATION_STATUS_READ,
    NOTIFICATION_STATUS_UNREAD,
    RECIPIENT_TYPE_EVENT_CREATOR,
    RECIPIENT_TYPE_USER,
    Notification,
)
from .push_message import AndroidDelivery, ApnsDelivery, PushDisplay, PushMessage

__all__ = [
    "DeviceToken",
    "Event",
    "HandlerOutcome",
    "HandlerResult",
    "Notification",
    "NOTIFICATION_STATUS_READ",
    "NOTIFICATION_STATUS_UNREAD",
    "RECIPIENT_TYPE_EVENT_CREATOR",
    "RECIPIENT_TYPE_USER",
    "AndroidDelivery",
    "ApnsDelivery",
    "PushDisplay",
    "PushMessage",
]
