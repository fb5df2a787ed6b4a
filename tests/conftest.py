"""Shared test fixtures."""

from pathlib import Path

import pytest

from kairos.notifications.context import MessageContext
from kairos.scheduler.store import EventLedger


class FakeTransport:
    """In-memory NotificationChannel that records what it sends."""

    name = "fake"
    max_message_length = 4096

    def __init__(self) -> None:
        self.ok = True
        self.sent: list[tuple[str, str]] = []

    async def send(self, chat_id: str, message: str) -> bool:
        self.sent.append((chat_id, message))
        return self.ok


@pytest.fixture(autouse=True)
def _paris_timezone(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin the scheduler timezone regardless of the local environment."""
    monkeypatch.setattr("kairos.config.settings.scheduler_timezone", "Europe/Paris")


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "test.db"


@pytest.fixture
async def ledger(db_path: Path) -> EventLedger:
    """Create an EventLedger backed by a temp database."""
    return EventLedger(db_path=db_path)


@pytest.fixture
def ctx() -> MessageContext:
    return MessageContext(user_id="111", channel_id="555", username="alice")


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()
