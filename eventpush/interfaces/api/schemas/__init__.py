"""Pydantic schemas exposed by the API layer."""

from .trigger import (
    DocumentCreatedRequest,
    DocumentUpdatedRequest,
    HandlerResultRead,
    ScheduleTickRequest,
    TriggerResponse,
)

__all__ = [
    "DocumentCreatedRequest",
    "DocumentUpdatedRequest",
    "HandlerResultRead",
    "ScheduleTickRequest",
    "TriggerResponse",
]
