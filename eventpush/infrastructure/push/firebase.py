"""Deliver push messages through Firebase Cloud Messaging."""

from __future__ import annotations

import logging

from firebase_admin import App, messaging
from firebase_admin.exceptions import FirebaseError

from eventpush.domain.entities import PushMessage
from eventpush.domain.errors import PayloadError, PushDeliveryError

from .base import PushSender

logger = logging.getLogger(__name__)


def build_fcm_message(message: PushMessage) -> messaging.Message:
    """Translate a transport-neutral message into ``firebase_admin.messaging.Message``."""

    notification = None
    if message.display is not None:
        notification = messaging.Notification(
            title=message.display.title,
            body=message.display.body,
            image=message.display.image_url,
        )

    android = None
    if message.android is not None:
        android = messaging.AndroidConfig(
            priority=message.android.priority,
            notification=messaging.AndroidNotification(
                sound=message.android.sound,
                priority=message.android.notification_priority,
                channel_id=message.android.channel_id,
            ),
        )

    apns = None
    if message.apns is not None:
        apns = messaging.APNSConfig(
            payload=messaging.APNSPayload(
                aps=messaging.Aps(sound=message.apns.sound, badge=message.apns.badge)
            )
        )

    return messaging.Message(
        token=message.token,
        notification=notification,
        data=dict(message.data) or None,
        android=android,
        apns=apns,
    )


class FirebasePushSender(PushSender):
    """Send messages with the Firebase Admin SDK using an explicitly built app."""

    def __init__(self, app: App) -> None:
        self._app = app

    def send(self, message: PushMessage) -> str:
        fcm_message = build_fcm_message(message)
        try:
            message_id = messaging.send(fcm_message, app=self._app)
        except FirebaseError as exc:
            raise PushDeliveryError(
                f"FCM rejected message ({exc.code}): {exc}"
            ) from exc
        except ValueError as exc:
            raise PayloadError(f"FCM message is invalid: {exc}") from exc
        logger.debug("FCM accepted message %s", message_id)
        return message_id


__all__ = ["FirebasePushSender", "build_fcm_message"]
