"""Generate "starting soon" notifications for events about to begin.

Planning (:func:`plan_event_reminders`) is a pure function of the current time
and an event snapshot; :func:`send_event_reminders` performs the store I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

import anyio

from eventpush.config import Settings
from eventpush.container import ServiceContainer
from eventpush.domain.entities import (
    NOTIFICATION_STATUS_UNREAD,
    RECIPIENT_TYPE_EVENT_CREATOR,
    RECIPIENT_TYPE_USER,
    Event,
    HandlerResult,
    Notification,
)
from eventpush.infrastructure.repositories import EventRepository, NotificationRepository
from eventpush.utils import ensure_app_timezone, now_in_app_timezone, to_epoch_millis

logger = logging.getLogger(__name__)

REMINDER_TITLE = "Event Starting Soon"
REMINDER_TYPE = "eventStartingSoon"
UNNAMED_EVENT = "Untitled event"


@dataclass(frozen=True)
class ReminderWindow:
    """Closed interval, relative to the run time, of start times to remind."""

    start: timedelta = timedelta(hours=1)
    end: timedelta = timedelta(hours=2)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReminderWindow":
        return cls(
            start=timedelta(minutes=settings.reminder_window_start_minutes),
            end=timedelta(minutes=settings.reminder_window_end_minutes),
        )

    def bounds(self, now: datetime) -> tuple[datetime, datetime]:
        return now + self.start, now + self.end

    def contains(self, now: datetime, moment: datetime | None) -> bool:
        if moment is None:
            return False
        lower, upper = self.bounds(now)
        return lower <= moment <= upper


@dataclass(frozen=True)
class PlannedNotification:
    """A notification record to create in ``collection``."""

    collection: str
    notification: Notification


@dataclass(frozen=True)
class ReminderPlan:
    """Writes a reminder run must perform."""

    event_ids_to_flag: tuple[str, ...] = ()
    notifications: tuple[PlannedNotification, ...] = ()
    deferred_event_ids: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.event_ids_to_flag and not self.notifications


def _reminder_metadata(event: Event) -> dict[str, object]:
    return {
        "eventId": event.id,
        "eventName": event.name,
        "startTime": to_epoch_millis(event.start_time),
        "venueAddress": event.venue_address,
    }


def _reminder_notification(
    event: Event,
    *,
    recipient_id: str,
    recipient_type: str,
    message: str,
    now: datetime,
) -> Notification:
    return Notification(
        id=None,
        recipient_id=recipient_id,
        recipient_type=recipient_type,
        title=REMINDER_TITLE,
        message=message,
        notification_type=REMINDER_TYPE,
        status=NOTIFICATION_STATUS_UNREAD,
        created_at=now,
        metadata=_reminder_metadata(event),
        action_link=f"event/{event.id}",
    )


def plan_event_reminders(
    now: datetime,
    events: Iterable[Event],
    *,
    window: ReminderWindow,
    user_collection: str,
    creator_collection: str,
    max_events: int | None = None,
) -> ReminderPlan:
    """Decide which events to flag and which notifications to create.

    Events already flagged, outside the window or repeated in ``events`` are
    ignored, so every event is planned at most once. When more than
    ``max_events`` events qualify, the ones starting first are kept and the
    others are reported as deferred.
    """

    eligible: list[Event] = []
    seen: set[str] = set()

    for event in events:
        if event.id in seen:
            continue
        seen.add(event.id)
        if event.reminder_sent:
            continue
        if not window.contains(now, event.start_time):
            continue
        eligible.append(event)

    deferred: list[str] = []
    if max_events is not None and len(eligible) > max_events:
        by_start = sorted(eligible, key=lambda event: event.start_time)
        kept = {event.id for event in by_start[:max_events]}
        deferred = [event.id for event in eligible if event.id not in kept]
        eligible = [event for event in eligible if event.id in kept]

    flagged: list[str] = []
    planned: list[PlannedNotification] = []

    for event in eligible:
        flagged.append(event.id)
        name = event.name or UNNAMED_EVENT

        if event.creator_id:
            planned.append(
                PlannedNotification(
                    creator_collection,
                    _reminder_notification(
                        event,
                        recipient_id=event.creator_id,
                        recipient_type=RECIPIENT_TYPE_EVENT_CREATOR,
                        message=f'Your "{name}" event starts in less than 2 hours.',
                        now=now,
                    ),
                )
            )

        for attendee_id in event.attendees:
            planned.append(
                PlannedNotification(
                    user_collection,
                    _reminder_notification(
                        event,
                        recipient_id=attendee_id,
                        recipient_type=RECIPIENT_TYPE_USER,
                        message=f'"{name}" starts in less than 2 hours.',
                        now=now,
                    ),
                )
            )

    return ReminderPlan(
        event_ids_to_flag=tuple(flagged),
        notifications=tuple(planned),
        deferred_event_ids=tuple(deferred),
    )


async def _execute_plan(
    plan: ReminderPlan,
    events: EventRepository,
    notifications: NotificationRepository,
) -> None:
    """Commit the flag batch and create every notification concurrently.

    Every write is issued even if another one fails; failures are raised
    together once all of them have finished.
    """

    errors: list[Exception] = []

    async def commit_flags() -> None:
        try:
            await anyio.to_thread.run_sync(events.mark_reminders_sent, plan.event_ids_to_flag)
        except Exception as exc:
            logger.error("Reminder flag batch failed: %s", exc)
            errors.append(exc)

    async def create(planned: PlannedNotification) -> None:
        try:
            await anyio.to_thread.run_sync(
                notifications.create, planned.collection, planned.notification
            )
        except Exception as exc:
            logger.error(
                "Creating reminder for %s in %s failed: %s",
                planned.notification.recipient_id,
                planned.collection,
                exc,
            )
            errors.append(exc)

    async with anyio.create_task_group() as task_group:
        if plan.event_ids_to_flag:
            task_group.start_soon(commit_flags)
        for planned in plan.notifications:
            task_group.start_soon(create, planned)

    if errors:
        raise ExceptionGroup(f"{len(errors)} reminder writes failed", errors)


async def send_event_reminders(
    services: ServiceContainer, *, now: datetime | None = None
) -> HandlerResult:
    """Run one reminder cycle at ``now`` (defaults to the current time)."""

    settings = services.settings
    now = ensure_app_timezone(now) if now is not None else now_in_app_timezone()
    window = ReminderWindow.from_settings(settings)
    events = EventRepository(services.store, settings.events_collection)
    notifications = NotificationRepository(services.store)

    try:
        start, end = window.bounds(now)
        upcoming = await anyio.to_thread.run_sync(events.list_starting_between, start, end)
        if not upcoming:
            logger.info("No upcoming events found for reminders")
            return HandlerResult.skipped("no upcoming events")

        logger.info("Found %s events for reminders", len(upcoming))
        plan = plan_event_reminders(
            now,
            upcoming,
            window=window,
            user_collection=settings.user_notifications_collection,
            creator_collection=settings.creator_notifications_collection,
            max_events=services.store.max_batch_writes,
        )
        if plan.deferred_event_ids:
            logger.warning(
                "Deferring reminders for %s events beyond the batch limit: %s",
                len(plan.deferred_event_ids),
                ", ".join(plan.deferred_event_ids),
            )
        if plan.is_empty:
            return HandlerResult.skipped("reminders already sent", events=len(upcoming))

        await _execute_plan(plan, events, notifications)
    except Exception as exc:
        logger.exception("Error sending event reminders")
        return HandlerResult.failed(exc)

    logger.info("Sent %s reminder notifications", len(plan.notifications))
    values = {
        "events_flagged": len(plan.event_ids_to_flag),
        "notifications_created": len(plan.notifications),
    }
    if plan.deferred_event_ids:
        values["events_deferred"] = len(plan.deferred_event_ids)
    return HandlerResult.succeeded("reminders created", **values)


__all__ = [
    "PlannedNotification",
    "REMINDER_TITLE",
    "REMINDER_TYPE",
    "ReminderPlan",
    "ReminderWindow",
    "plan_event_reminders",
    "send_event_reminders",
]
