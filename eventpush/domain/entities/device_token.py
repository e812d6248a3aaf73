"""Domain entity representing the push token registered by a user device."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DeviceToken:
    """Current push token of a user; an empty token means undeliverable."""

    user_id: str
    token: str | None

    @property
    def is_deliverable(self) -> bool:
        return bool(self.token and self.token.strip())


__all__ = ["DeviceToken"]
