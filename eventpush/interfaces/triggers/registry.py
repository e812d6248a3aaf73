"""Named trigger subscriptions and the handlers registered against them."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from eventpush.container import ServiceContainer
from eventpush.domain.entities import HandlerResult

logger = logging.getLogger(__name__)

DOCUMENT_CREATED = "document.created"
DOCUMENT_UPDATED = "document.updated"
EVENT_REMINDERS_SCHEDULE = "schedule.event_reminders"


@dataclass(frozen=True)
class TriggerEvent:
    """One delivery from the hosting trigger infrastructure.

    Document triggers carry ``collection`` and ``document_id``; creations fill
    ``data``, updates fill ``before`` and ``after``. Schedule ticks only carry
    ``occurred_at``.
    """

    subscription: str
    collection: str | None = None
    document_id: str | None = None
    data: Mapping[str, Any] = field(default_factory=dict)
    before: Mapping[str, Any] = field(default_factory=dict)
    after: Mapping[str, Any] = field(default_factory=dict)
    occurred_at: datetime | None = None


TriggerHandler = Callable[[ServiceContainer, TriggerEvent], Awaitable[HandlerResult]]


class TriggerRegistry:
    """Route trigger events to the handlers subscribed to them."""

    def __init__(self) -> None:
        self._handlers: defaultdict[str, list[tuple[str, TriggerHandler]]] = defaultdict(list)

    def register(
        self, subscription: str, handler: TriggerHandler, *, name: str | None = None
    ) -> TriggerHandler:
        self._handlers[subscription].append((name or handler.__name__, handler))
        return handler

    def subscribe(
        self, subscription: str, *, name: str | None = None
    ) -> Callable[[TriggerHandler], TriggerHandler]:
        """Decorator form of :meth:`register`."""

        def decorator(handler: TriggerHandler) -> TriggerHandler:
            return self.register(subscription, handler, name=name)

        return decorator

    def handler_names(self, subscription: str) -> list[str]:
        return [name for name, _ in self._handlers.get(subscription, [])]

    async def deliver(
        self, services: ServiceContainer, event: TriggerEvent
    ) -> list[HandlerResult]:
        """Run every handler subscribed to ``event.subscription``.

        Never raises: a handler that raises is reported as a failed result so
        the trigger host does not retry the delivery.
        """

        handlers = self._handlers.get(event.subscription, [])
        if not handlers:
            logger.warning("No handler subscribed to %s", event.subscription)

        results: list[HandlerResult] = []
        for name, handler in handlers:
            try:
                result = await handler(services, event)
            except Exception as exc:
                logger.exception("Trigger handler %s raised", name)
                result = HandlerResult.failed(exc)
            if not result.ok:
                logger.error(
                    "Trigger handler %s failed for %s %s/%s: %s",
                    name,
                    event.subscription,
                    event.collection,
                    event.document_id,
                    result.detail,
                )
            results.append(result)
        return results


__all__ = [
    "DOCUMENT_CREATED",
    "DOCUMENT_UPDATED",
    "EVENT_REMINDERS_SCHEDULE",
    "TriggerEvent",
    "TriggerHandler",
    "TriggerRegistry",
]
