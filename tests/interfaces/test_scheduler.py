from __future__ import annotations

from datetime import timedelta

from eventpush.container import ServiceContainer
from eventpush.interfaces.scheduler import (
    EVENT_REMINDERS_JOB_ID,
    create_scheduler,
    run_event_reminders_job,
)
from eventpush.interfaces.triggers import build_trigger_registry


def test_scheduler_runs_reminders_on_configured_interval(services: ServiceContainer) -> None:
    services.settings = services.settings.model_copy(update={"reminder_interval_minutes": 15})

    scheduler = create_scheduler(services, build_trigger_registry())
    job = scheduler.get_job(EVENT_REMINDERS_JOB_ID)

    assert job is not None
    assert job.func is run_event_reminders_job
    assert job.trigger.interval == timedelta(minutes=15)
    assert job.max_instances == 1
    assert job.coalesce is True


def test_job_delivers_a_reminder_tick(services: ServiceContainer, caplog) -> None:
    with caplog.at_level("INFO", logger="eventpush.interfaces.scheduler"):
        run_event_reminders_job(services, build_trigger_registry())

    assert "no upcoming events" in caplog.text
