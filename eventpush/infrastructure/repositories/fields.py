"""Conversions from loosely typed document fields to entity attributes."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from eventpush.utils import parse_timestamp


def coerce_str(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


def coerce_datetime(value: Any) -> datetime | None:
    """Return ``value`` as an aware datetime, see :func:`parse_timestamp`."""

    return parse_timestamp(value)


def coerce_str_list(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple, set, frozenset)):
        return []
    return [str(item) for item in value if item not in (None, "")]


__all__ = ["coerce_datetime", "coerce_str", "coerce_str_list"]
