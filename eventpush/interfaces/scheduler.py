"""Interval job that ticks the event reminder subscription."""

from __future__ import annotations

import logging

import anyio
from apscheduler.schedulers.background import BackgroundScheduler

from eventpush.container import ServiceContainer
from eventpush.interfaces.triggers import (
    EVENT_REMINDERS_SCHEDULE,
    TriggerEvent,
    TriggerRegistry,
)
from eventpush.utils import get_app_timezone, now_in_app_timezone

logger = logging.getLogger(__name__)

EVENT_REMINDERS_JOB_ID = "event_reminders"


def run_event_reminders_job(services: ServiceContainer, registry: TriggerRegistry) -> None:
    """Deliver one reminder tick; runs in a scheduler worker thread."""

    event = TriggerEvent(EVENT_REMINDERS_SCHEDULE, occurred_at=now_in_app_timezone())
    results = anyio.run(registry.deliver, services, event)
    for result in results:
        logger.info("Event reminder job finished: %s", result.as_payload())


def create_scheduler(services: ServiceContainer, registry: TriggerRegistry) -> BackgroundScheduler:
    """Return a scheduler (not started) running the reminder job on its interval.

    A single job instance runs at a time and missed ticks are coalesced.
    """

    scheduler = BackgroundScheduler(timezone=get_app_timezone())
    scheduler.add_job(
        run_event_reminders_job,
        "interval",
        minutes=services.settings.reminder_interval_minutes,
        id=EVENT_REMINDERS_JOB_ID,
        args=[services, registry],
        max_instances=1,
        coalesce=True,
    )
    return scheduler


__all__ = ["EVENT_REMINDERS_JOB_ID", "create_scheduler", "run_event_reminders_job"]
