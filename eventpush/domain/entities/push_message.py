"""Transport-neutral description of an outbound push message."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PushDisplay:
    """Visible part of a push: title, body and optional image."""

    title: str | None = None
    body: str | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class AndroidDelivery:
    """Delivery hints applied on Android devices."""

    priority: str = "high"
    sound: str | None = None
    notification_priority: str | None = None
    channel_id: str | None = None


@dataclass(frozen=True)
class ApnsDelivery:
    """Delivery hints applied on Apple devices."""

    sound: str | None = None
    badge: int | None = None


@dataclass(frozen=True)
class PushMessage:
    """One message addressed to one device token.

    ``data`` must only contain string values; the push transports reject
    anything else.
    """

    token: str
    display: PushDisplay | None = None
    data: dict[str, str] = field(default_factory=dict)
    android: AndroidDelivery | None = None
    apns: ApnsDelivery | None = None


__all__ = ["AndroidDelivery", "ApnsDelivery", "PushDisplay", "PushMessage"]
