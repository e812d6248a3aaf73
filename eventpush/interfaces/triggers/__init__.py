"""Trigger subscriptions and their handlers."""

from .handlers import build_trigger_registry
from .registry import (
    DOCUMENT_CREATED,
    DOCUMENT_UPDATED,
    EVENT_REMINDERS_SCHEDULE,
    TriggerEvent,
    TriggerRegistry,
)

__all__ = [
    "build_trigger_registry",
    "DOCUMENT_CREATED",
    "DOCUMENT_UPDATED",
    "EVENT_REMINDERS_SCHEDULE",
    "TriggerEvent",
    "TriggerRegistry",
]
