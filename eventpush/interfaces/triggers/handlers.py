"""Adapters between trigger events and the notification use cases."""

from __future__ import annotations

from eventpush.application.use_cases.notifications import (
    dispatch_notification,
    send_event_reminders,
    synchronize_badge,
)
from eventpush.container import ServiceContainer
from eventpush.domain.entities import HandlerResult

from .registry import (
    DOCUMENT_CREATED,
    DOCUMENT_UPDATED,
    EVENT_REMINDERS_SCHEDULE,
    TriggerEvent,
    TriggerRegistry,
)


async def on_document_created(services: ServiceContainer, event: TriggerEvent) -> HandlerResult:
    if not event.collection or not event.document_id:
        return HandlerResult.skipped("trigger without document reference")
    return await dispatch_notification(
        services,
        collection=event.collection,
        notification_id=event.document_id,
        data=event.data,
    )


async def on_document_updated(services: ServiceContainer, event: TriggerEvent) -> HandlerResult:
    if not event.collection or not event.document_id:
        return HandlerResult.skipped("trigger without document reference")
    return await synchronize_badge(
        services,
        collection=event.collection,
        notification_id=event.document_id,
        before=event.before,
        after=event.after,
    )


async def on_event_reminders_tick(services: ServiceContainer, event: TriggerEvent) -> HandlerResult:
    return await send_event_reminders(services, now=event.occurred_at)


def build_trigger_registry() -> TriggerRegistry:
    """Return a registry with the notification handlers subscribed."""

    registry = TriggerRegistry()
    registry.register(DOCUMENT_CREATED, on_document_created, name="send_notification_to_user")
    registry.register(DOCUMENT_UPDATED, on_document_updated, name="update_badge_count")
    registry.register(
        EVENT_REMINDERS_SCHEDULE, on_event_reminders_tick, name="send_event_reminders"
    )
    return registry


__all__ = [
    "build_trigger_registry",
    "on_document_created",
    "on_document_updated",
    "on_event_reminders_tick",
]
