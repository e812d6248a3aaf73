"""Explicit construction of the store and push clients shared by the handlers."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import Engine

from eventpush.config import Settings, get_settings
from eventpush.infrastructure.database import (
    create_database_engine,
    create_session_factory,
    initialize_database,
)
from eventpush.infrastructure.push import NullPushSender, PushSender
from eventpush.infrastructure.store import DocumentStore, SqlDocumentStore

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Handles passed to every trigger handler."""

    settings: Settings
    store: DocumentStore
    push_sender: PushSender
    engine: Engine | None = None

    def close(self) -> None:
        """Release pooled database connections, if any."""

        if self.engine is not None:
            self.engine.dispose()


def build_container(settings: Settings | None = None) -> ServiceContainer:
    """Build the store and push sender selected by ``settings``."""

    settings = settings or get_settings()
    firebase_app = None
    engine: Engine | None = None

    if settings.store_backend == "firestore":
        from firebase_admin import firestore

        from eventpush.infrastructure.firebase import create_firebase_app
        from eventpush.infrastructure.store.firestore import FirestoreDocumentStore

        firebase_app = create_firebase_app(settings)
        store: DocumentStore = FirestoreDocumentStore(firestore.client(firebase_app))
    else:
        engine = create_database_engine(settings)
        initialize_database(engine)
        store = SqlDocumentStore(create_session_factory(engine))

    if settings.push_enabled:
        from eventpush.infrastructure.firebase import create_firebase_app
        from eventpush.infrastructure.push.firebase import FirebasePushSender

        push_sender: PushSender = FirebasePushSender(
            firebase_app or create_firebase_app(settings)
        )
    else:
        logger.info("PUSH_ENABLED is false; outbound pushes will be dropped")
        push_sender = NullPushSender()

    return ServiceContainer(
        settings=settings, store=store, push_sender=push_sender, engine=engine
    )


__all__ = ["ServiceContainer", "build_container"]
