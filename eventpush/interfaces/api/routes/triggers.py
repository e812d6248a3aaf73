"""Endpoints receiving trigger deliveries from the hosting infrastructure.

Every endpoint answers 200 once the body is valid, whatever the handlers
report, so the host never redelivers an event and risks a duplicate push.
"""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends

from eventpush.container import ServiceContainer
from eventpush.domain.entities import HandlerResult
from eventpush.interfaces.api.dependencies import get_services, get_trigger_registry
from eventpush.interfaces.api.schemas import (
    DocumentCreatedRequest,
    DocumentUpdatedRequest,
    HandlerResultRead,
    ScheduleTickRequest,
    TriggerResponse,
)
from eventpush.interfaces.triggers import (
    DOCUMENT_CREATED,
    DOCUMENT_UPDATED,
    EVENT_REMINDERS_SCHEDULE,
    TriggerEvent,
    TriggerRegistry,
)
from eventpush.utils import ensure_app_timezone, now_in_app_timezone

router = APIRouter(prefix="/triggers", tags=["triggers"])


def _to_response(subscription: str, results: list[HandlerResult]) -> TriggerResponse:
    return TriggerResponse(
        subscription=subscription,
        results=[HandlerResultRead(**result.as_payload()) for result in results],
    )


@router.post("/documents/created", response_model=TriggerResponse)
async def document_created(
    payload: DocumentCreatedRequest,
    services: ServiceContainer = Depends(get_services),
    registry: TriggerRegistry = Depends(get_trigger_registry),
) -> TriggerResponse:
    """Handle the creation of a document in any collection."""

    event = TriggerEvent(
        DOCUMENT_CREATED,
        collection=payload.collection,
        document_id=payload.document_id,
        data=payload.data,
    )
    return _to_response(DOCUMENT_CREATED, await registry.deliver(services, event))


@router.post("/documents/updated", response_model=TriggerResponse)
async def document_updated(
    payload: DocumentUpdatedRequest,
    services: ServiceContainer = Depends(get_services),
    registry: TriggerRegistry = Depends(get_trigger_registry),
) -> TriggerResponse:
    """Handle the update of a document in any collection."""

    event = TriggerEvent(
        DOCUMENT_UPDATED,
        collection=payload.collection,
        document_id=payload.document_id,
        before=payload.before,
        after=payload.after,
    )
    return _to_response(DOCUMENT_UPDATED, await registry.deliver(services, event))


@router.post("/schedules/event-reminders", response_model=TriggerResponse)
async def event_reminders_tick(
    payload: ScheduleTickRequest | None = Body(default=None),
    services: ServiceContainer = Depends(get_services),
    registry: TriggerRegistry = Depends(get_trigger_registry),
) -> TriggerResponse:
    """Run one event reminder cycle."""

    occurred_at = payload.occurred_at if payload is not None else None
    event = TriggerEvent(
        EVENT_REMINDERS_SCHEDULE,
        occurred_at=ensure_app_timezone(occurred_at) or now_in_app_timezone(),
    )
    return _to_response(EVENT_REMINDERS_SCHEDULE, await registry.deliver(services, event))
