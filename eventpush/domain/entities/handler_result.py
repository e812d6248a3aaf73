"""Typed outcome returned by every trigger handler."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class HandlerOutcome(str, Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class HandlerResult:
    """Describe what a handler did instead of raising to its caller.

    ``detail`` holds a short human readable reason, ``values`` any extra
    information worth reporting (message id, counters).
    """

    outcome: HandlerOutcome
    detail: str | None = None
    values: dict[str, Any] = field(default_factory=dict)
    error: BaseException | None = field(default=None, compare=False, repr=False)

    @classmethod
    def succeeded(cls, detail: str | None = None, **values: Any) -> "HandlerResult":
        return cls(HandlerOutcome.SUCCEEDED, detail, values)

    @classmethod
    def skipped(cls, detail: str, **values: Any) -> "HandlerResult":
        return cls(HandlerOutcome.SKIPPED, detail, values)

    @classmethod
    def failed(cls, error: BaseException, detail: str | None = None) -> "HandlerResult":
        return cls(HandlerOutcome.FAILED, detail or str(error) or type(error).__name__, {}, error)

    @property
    def ok(self) -> bool:
        """``True`` unless the handler failed."""

        return self.outcome is not HandlerOutcome.FAILED

    def as_payload(self) -> dict[str, Any]:
        """Return a JSON-serializable summary of the result."""

        return {"outcome": self.outcome.value, "detail": self.detail, **self.values}


__all__ = ["HandlerOutcome", "HandlerResult"]
