"""Conversation history with a per-channel sliding window."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kairos.config import settings
from kairos.db import SQLiteStore, utc_now_iso

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS conversation_turns (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    channel_id TEXT NOT NULL,
    role TEXT NOT NULL,
    content TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_turns_channel ON conversation_turns (channel_id, id);
"""


@dataclass
class Turn:
    """A single conversation turn."""

    role: str  # "user" or "assistant"
    content: str


class HistoryStore(SQLiteStore):
    """Stores the most recent turns of each chat.

    Different channels never share or trim each other's turns.
    """

    _schema = _CREATE_TABLE

    def __init__(self, db_path: Path | None = None, window_size: int | None = None) -> None:
        super().__init__(db_path)
        self.window_size = window_size or settings.conversation_window_size

    async def load(self, channel_id: str) -> list[Turn]:
        """Return the last ``window_size`` turns for a channel, oldest first.

        The result always starts with a user turn, as the Messages API requires.
        """
        async with self._connect() as db:
            cursor = await db.execute(
                """
                SELECT role, content FROM conversation_turns
                WHERE channel_id = ? ORDER BY id DESC LIMIT ?
                """,
                (channel_id, self.window_size),
            )
            rows = await cursor.fetchall()
        turns = [Turn(role=row[0], content=row[1]) for row in reversed(rows)]
        while turns and turns[0].role != "user":
            turns.pop(0)
        return turns

    async def append(self, channel_id: str, *turns: Turn) -> None:
        """Append turns and trim the channel to the sliding window."""
        now = utc_now_iso()
        async with self._connect() as db:
            await db.executemany(
                """
                INSERT INTO conversation_turns (channel_id, role, content, created_at)
                VALUES (?, ?, ?, ?)
                """,
                [(channel_id, t.role, t.content, now) for t in turns],
            )
            await db.execute(
                """
                DELETE FROM conversation_turns
                WHERE channel_id = ? AND id NOT IN (
                    SELECT id FROM conversation_turns
                    WHERE channel_id = ? ORDER BY id DESC LIMIT ?
                )
                """,
                (channel_id, channel_id, self.window_size),
            )
            await db.commit()

    async def clear(self, channel_id: str) -> int:
        """Forget a channel's history. Returns the number of turns removed."""
        async with self._connect() as db:
            cursor = await db.execute(
                "DELETE FROM conversation_turns WHERE channel_id = ?", (channel_id,)
            )
            await db.commit()
            count = cursor.rowcount
        logger.info("Cleared %d turn(s) for channel %s", count, channel_id)
        return count


def to_api_messages(turns: list[Turn]) -> list[dict[str, str]]:
    """Format turns for the Claude API."""
    return [{"role": t.role, "content": t.content} for t in turns]
