"""Pydantic models describing trigger deliveries and their outcome."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DocumentCreatedRequest(BaseModel):
    """Snapshot of a newly created document."""

    model_config = ConfigDict(populate_by_name=True)

    collection: str = Field(..., min_length=1, description="Collection of the document")
    document_id: str = Field(..., alias="documentId", min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)


class DocumentUpdatedRequest(BaseModel):
    """Snapshots of a document before and after an update."""

    model_config = ConfigDict(populate_by_name=True)

    collection: str = Field(..., min_length=1, description="Collection of the document")
    document_id: str = Field(..., alias="documentId", min_length=1)
    before: dict[str, Any] = Field(default_factory=dict)
    after: dict[str, Any] = Field(default_factory=dict)


class ScheduleTickRequest(BaseModel):
    """Optional body of a schedule tick."""

    model_config = ConfigDict(populate_by_name=True)

    occurred_at: datetime | None = Field(default=None, alias="occurredAt")


class HandlerResultRead(BaseModel):
    """Outcome of one handler."""

    model_config = ConfigDict(extra="allow")

    outcome: str
    detail: str | None = None


class TriggerResponse(BaseModel):
    """Outcomes of every handler subscribed to the delivered trigger."""

    subscription: str
    results: list[HandlerResultRead] = Field(default_factory=list)


__all__ = [
    "DocumentCreatedRequest",
    "DocumentUpdatedRequest",
    "HandlerResultRead",
    "ScheduleTickRequest",
    "TriggerResponse",
]
