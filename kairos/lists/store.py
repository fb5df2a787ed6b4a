"""ListStore — per-user named lists with ordered, checkable items.

List names are matched case-insensitively; item numbers are 1-based in
display order. Every operation returns a short human-readable sentence.
"""

from __future__ import annotations

import logging
import uuid

from kairos.db import SQLiteStore, utc_now_iso

logger = logging.getLogger(__name__)

_CREATE_TABLES = """
CREATE TABLE IF NOT EXISTS user_lists (
    user_id TEXT NOT NULL,
    list_key TEXT NOT NULL,
    name TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    PRIMARY KEY (user_id, list_key)
);
CREATE TABLE IF NOT EXISTS list_items (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    id TEXT NOT NULL UNIQUE,
    user_id TEXT NOT NULL,
    list_key TEXT NOT NULL,
    text TEXT NOT NULL,
    completed INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
);
"""


def _key(name: str) -> str:
    return name.lower().strip()


class ListStore(SQLiteStore):
    """Persists user lists in SQLite."""

    _schema = _CREATE_TABLES

    async def _get_list(self, db, user_id: str, list_name: str) -> tuple[str, str] | None:
        cursor = await db.execute(
            "SELECT list_key, name FROM user_lists WHERE user_id = ? AND list_key = ?",
            (user_id, _key(list_name)),
        )
        row = await cursor.fetchone()
        return (row[0], row[1]) if row else None

    async def _items(self, db, user_id: str, list_key: str) -> list[tuple[str, str, bool]]:
        cursor = await db.execute(
            """
            SELECT id, text, completed FROM list_items
            WHERE user_id = ? AND list_key = ? ORDER BY seq
            """,
            (user_id, list_key),
        )
        return [(row[0], row[1], bool(row[2])) for row in await cursor.fetchall()]

    async def _touch(self, db, user_id: str, list_key: str) -> None:
        await db.execute(
            "UPDATE user_lists SET updated_at = ? WHERE user_id = ? AND list_key = ?",
            (utc_now_iso(), user_id, list_key),
        )

    async def _insert_list(self, db, user_id: str, list_name: str) -> None:
        now = utc_now_iso()
        await db.execute(
            """
            INSERT INTO user_lists (user_id, list_key, name, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (user_id, _key(list_name), list_name.strip(), now, now),
        )

    # -- Operations ------------------------------------------------------------

    async def create_list(self, user_id: str, list_name: str) -> str:
        async with self._connect() as db:
            if await self._get_list(db, user_id, list_name):
                return f'List "{list_name}" already exists.'
            await self._insert_list(db, user_id, list_name)
            await db.commit()
        return f'Created list "{list_name}".'

    async def delete_list(self, user_id: str, list_name: str) -> str:
        async with self._connect() as db:
            found = await self._get_list(db, user_id, list_name)
            if not found:
                return f'List "{list_name}" does not exist.'
            await db.execute(
                "DELETE FROM list_items WHERE user_id = ? AND list_key = ?", (user_id, found[0])
            )
            await db.execute(
                "DELETE FROM user_lists WHERE user_id = ? AND list_key = ?", (user_id, found[0])
            )
            await db.commit()
        logger.info("Deleted list %r for user %s", found[0], user_id)
        return f'Deleted list "{list_name}".'

    async def get_all_lists(self, user_id: str) -> str:
        async with self._connect() as db:
            cursor = await db.execute(
                "SELECT list_key, name FROM user_lists WHERE user_id = ? ORDER BY created_at",
                (user_id,),
            )
            lists = await cursor.fetchall()
            if not lists:
                return 'No lists found. Create one with the "create list" action.'
            lines = []
            for list_key, name in lists:
                items = await self._items(db, user_id, list_key)
                done = sum(1 for _, _, completed in items if completed)
                lines.append(f"- {name} ({done}/{len(items)} completed)")
        return "Your lists:\n" + "\n".join(lines)

    async def get_list(self, user_id: str, list_name: str) -> str:
        async with self._connect() as db:
            found = await self._get_list(db, user_id, list_name)
            if not found:
                return f'List "{list_name}" does not exist.'
            items = await self._items(db, user_id, found[0])
        if not items:
            return f'List "{found[1]}" is empty.'
        lines = [
            f"{i}. [{'x' if completed else ' '}] {text}"
            for i, (_, text, completed) in enumerate(items, start=1)
        ]
        return f"{found[1]}\n" + "\n".join(lines)

    async def add_item(self, user_id: str, list_name: str, item_text: str) -> str:
        """Add an item, creating the list first if needed."""
        async with self._connect() as db:
            found = await self._get_list(db, user_id, list_name)
            if not found:
                await self._insert_list(db, user_id, list_name)
                found = (_key(list_name), list_name.strip())
            await db.execute(
                """
                INSERT INTO list_items (id, user_id, list_key, text, completed, created_at)
                VALUES (?, ?, ?, ?, 0, ?)
                """,
                (uuid.uuid4().hex, user_id, found[0], item_text, utc_now_iso()),
            )
            await self._touch(db, user_id, found[0])
            await db.commit()
        return f'Added "{item_text}" to {found[1]}.'

    async def remove_item(self, user_id: str, list_name: str, item_index: int) -> str:
        async with self._connect() as db:
            found = await self._get_list(db, user_id, list_name)
            if not found:
                return f'List "{list_name}" does not exist.'
            items = await self._items(db, user_id, found[0])
            if not 1 <= item_index <= len(items):
                return f"Invalid item number. List has {len(items)} items."
            item_id, text, _ = items[item_index - 1]
            await db.execute("DELETE FROM list_items WHERE id = ?", (item_id,))
            await self._touch(db, user_id, found[0])
            await db.commit()
        return f'Removed "{text}" from {found[1]}.'

    async def toggle_item(self, user_id: str, list_name: str, item_index: int) -> str:
        async with self._connect() as db:
            found = await self._get_list(db, user_id, list_name)
            if not found:
                return f'List "{list_name}" does not exist.'
            items = await self._items(db, user_id, found[0])
            if not 1 <= item_index <= len(items):
                return f"Invalid item number. List has {len(items)} items."
            item_id, text, completed = items[item_index - 1]
            await db.execute(
                "UPDATE list_items SET completed = ? WHERE id = ?", (int(not completed), item_id)
            )
            await self._touch(db, user_id, found[0])
            await db.commit()
        status = "uncompleted" if completed else "completed"
        return f'Marked "{text}" as {status}.'

    async def clear_completed(self, user_id: str, list_name: str) -> str:
        async with self._connect() as db:
            found = await self._get_list(db, user_id, list_name)
            if not found:
                return f'List "{list_name}" does not exist.'
            cursor = await db.execute(
                "DELETE FROM list_items WHERE user_id = ? AND list_key = ? AND completed = 1",
                (user_id, found[0]),
            )
            removed = cursor.rowcount
            await self._touch(db, user_id, found[0])
            await db.commit()
        return f"Removed {removed} completed items from {found[1]}."
