"""FastAPI dependency utilities."""

from fastapi import Request

from eventpush.container import ServiceContainer
from eventpush.interfaces.triggers import TriggerRegistry


def get_services(request: Request) -> ServiceContainer:
    """Return the service container built at application start-up."""

    return request.app.state.services


def get_trigger_registry(request: Request) -> TriggerRegistry:
    """Return the trigger registry built at application start-up."""

    return request.app.state.trigger_registry
