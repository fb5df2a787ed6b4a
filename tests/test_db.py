"""Tests for the shared SQLite plumbing."""

from pathlib import Path

import aiosqlite

from kairos.db import SQLiteStore, utc_now_iso


class NotesStore(SQLiteStore):
    _schema = "CREATE TABLE IF NOT EXISTS notes (body TEXT NOT NULL);"


async def test_schema_applied_and_parent_created(tmp_path: Path) -> None:
    db_path = tmp_path / "nested" / "dir" / "notes.db"
    store = NotesStore(db_path=db_path)

    async with store._connect() as db:
        await db.execute("INSERT INTO notes (body) VALUES ('hi')")
        await db.commit()

    assert db_path.exists()
    async with aiosqlite.connect(db_path) as db:
        cursor = await db.execute("SELECT body FROM notes")
        assert await cursor.fetchall() == [("hi",)]


def test_default_path_from_settings(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr("kairos.config.settings.database_path", tmp_path / "x.db")
    assert NotesStore().db_path == tmp_path / "x.db"


def test_utc_now_iso_is_aware() -> None:
    assert utc_now_iso().endswith("+00:00")
