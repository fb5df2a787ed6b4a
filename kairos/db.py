"""Shared aiosqlite plumbing for the SQLite-backed stores.

Every store opens a short-lived connection per operation against the file
configured in ``settings.database_path`` (or an explicit path for test
isolation). The store's schema is applied on the first connection.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import aiosqlite

from kairos.config import settings

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


class SQLiteStore:
    """Base class for stores persisted in the shared SQLite file.

    Subclasses set ``_schema`` to one or more ``CREATE ... IF NOT EXISTS``
    statements. Pass an explicit *db_path* for test isolation
    (e.g. ``tmp_path / "test.db"``).
    """

    _schema: str = ""

    def __init__(self, db_path: Path | None = None) -> None:
        self._db_path = db_path or settings.database_path
        self._initialised = False

    @property
    def db_path(self) -> Path:
        return self._db_path

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        db = await aiosqlite.connect(str(self._db_path))
        try:
            if not self._initialised:
                await db.executescript(self._schema)
                await db.commit()
                self._initialised = True
                logger.debug("%s schema ready at %s", type(self).__name__, self._db_path)
            yield db
        finally:
            await db.close()
