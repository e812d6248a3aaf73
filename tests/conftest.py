"""Shared fixtures: a SQLite-backed store, a recording push sender and settings."""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from eventpush.config import Settings  # noqa: E402
from eventpush.container import ServiceContainer  # noqa: E402
from eventpush.domain.entities import PushMessage  # noqa: E402
from eventpush.infrastructure.database import (  # noqa: E402
    create_database_engine,
    create_session_factory,
    initialize_database,
)
from eventpush.infrastructure.push import PushSender  # noqa: E402
from eventpush.infrastructure.store import SqlDocumentStore  # noqa: E402

RUN_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class RecordingPushSender(PushSender):
    """Keep every message sent; optionally fail each send with ``error``."""

    def __init__(self, error: Exception | None = None) -> None:
        self.messages: list[PushMessage] = []
        self.error = error

    def send(self, message: PushMessage) -> str:
        self.messages.append(message)
        if self.error is not None:
            raise self.error
        return f"projects/test/messages/{len(self.messages)}"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'eventpush_test.db'}",
        push_enabled=False,
        scheduler_enabled=False,
    )


@pytest.fixture
def engine(settings: Settings):
    engine = create_database_engine(settings)
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine) -> SqlDocumentStore:
    return SqlDocumentStore(create_session_factory(engine))


@pytest.fixture
def push_sender() -> RecordingPushSender:
    return RecordingPushSender()


@pytest.fixture
def services(settings: Settings, store: SqlDocumentStore, push_sender: RecordingPushSender) -> ServiceContainer:
    return ServiceContainer(settings=settings, store=store, push_sender=push_sender)
