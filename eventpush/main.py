"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from eventpush.config import Settings, get_settings
from eventpush.container import ServiceContainer, build_container
from eventpush.interfaces.api.routes import register_routes
from eventpush.interfaces.scheduler import create_scheduler
from eventpush.interfaces.triggers import TriggerRegistry, build_trigger_registry

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Settings) -> None:
    """Apply ``LOG_LEVEL`` to the root logger."""

    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
    logging.getLogger().setLevel(settings.log_level.upper())


def create_app(
    services: ServiceContainer | None = None,
    registry: TriggerRegistry | None = None,
) -> FastAPI:
    """Create the application; ``services`` is built from settings when omitted."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the service container, start the reminder job and release both on exit."""

        container = services or build_container(get_settings())
        configure_logging(container.settings)
        app.state.services = container
        app.state.trigger_registry = registry or build_trigger_registry()

        scheduler = None
        if container.settings.scheduler_enabled:
            scheduler = create_scheduler(container, app.state.trigger_registry)
            scheduler.start()
            logger.info(
                "Event reminder job scheduled every %s minutes",
                container.settings.reminder_interval_minutes,
            )
        try:
            yield
        finally:
            if scheduler is not None:
                scheduler.shutdown(wait=False)
            if services is None:
                container.close()

    app = FastAPI(title="eventpush", lifespan=lifespan)
    register_routes(app)
    return app
