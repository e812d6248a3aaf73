"""Push transport adapters."""

from .base import NullPushSender, PushSender

__all__ = ["NullPushSender", "PushSender"]
