"""Cumulative token usage per user."""

from __future__ import annotations

from dataclasses import dataclass

from kairos.db import SQLiteStore, utc_now_iso

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS token_usage (
    user_id TEXT PRIMARY KEY,
    input_tokens INTEGER NOT NULL DEFAULT 0,
    output_tokens INTEGER NOT NULL DEFAULT 0,
    updated_at TEXT NOT NULL
);
"""


@dataclass
class TokenUsage:
    input_tokens: int = 0
    output_tokens: int = 0
    updated_at: str | None = None

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    def format(self) -> str:
        return (
            "Token usage statistics:\n"
            f"- Input tokens: {self.input_tokens:,}\n"
            f"- Output tokens: {self.output_tokens:,}\n"
            f"- Total tokens: {self.total_tokens:,}\n"
            f"- Last updated: {self.updated_at or 'never'}"
        )


class UsageStore(SQLiteStore):
    """Token counters keyed by user ID."""

    _schema = _CREATE_TABLE

    async def add(self, user_id: str, input_tokens: int, output_tokens: int) -> None:
        async with self._connect() as db:
            await db.execute(
                """
                INSERT INTO token_usage (user_id, input_tokens, output_tokens, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    input_tokens = input_tokens + excluded.input_tokens,
                    output_tokens = output_tokens + excluded.output_tokens,
                    updated_at = excluded.updated_at
                """,
                (user_id, input_tokens, output_tokens, utc_now_iso()),
            )
            await db.commit()

    async def get(self, user_id: str) -> TokenUsage:
        async with self._connect() as db:
            cursor = await db.execute(
                "SELECT input_tokens, output_tokens, updated_at FROM token_usage WHERE user_id = ?",
                (user_id,),
            )
            row = await cursor.fetchone()
        if row is None:
            return TokenUsage()
        return TokenUsage(input_tokens=row[0], output_tokens=row[1], updated_at=row[2])

    async def reset(self, user_id: str) -> None:
        async with self._connect() as db:
            await db.execute("DELETE FROM token_usage WHERE user_id = ?", (user_id,))
            await db.commit()
