"""EventLedger — the persisted collection of scheduled events.

Mutations load the whole collection, change it in memory and write every
record back in one transaction. Records are never deleted: cancellation and
completion are status changes. The ledger assumes it is the only writer;
an ``asyncio.Lock`` keeps this process's own mutations sequential.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, TypeVar

from kairos.db import SQLiteStore, utc_now_iso
from kairos.scheduler.models import (
    COLUMNS,
    STATUS_ACTIVE,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    EventDraft,
    ScheduledEvent,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    import aiosqlite

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS scheduled_events (
    id TEXT PRIMARY KEY,
    owner_id TEXT NOT NULL,
    origin_group_id TEXT,
    channel_id TEXT NOT NULL,
    kind TEXT NOT NULL,
    schedule TEXT NOT NULL,
    action TEXT NOT NULL,
    mention TEXT,
    description TEXT NOT NULL DEFAULT '',
    status TEXT NOT NULL,
    created_at TEXT NOT NULL,
    last_fired_at TEXT,
    completed_at TEXT,
    fire_count INTEGER NOT NULL DEFAULT 0,
    position INTEGER NOT NULL
);
"""

_SELECT_ALL = f"SELECT {', '.join(COLUMNS)} FROM scheduled_events ORDER BY position"

_UPSERT = f"""
INSERT INTO scheduled_events ({", ".join(COLUMNS)}, position)
VALUES ({", ".join("?" for _ in COLUMNS)}, ?)
ON CONFLICT(id) DO UPDATE SET
    {", ".join(f"{name} = excluded.{name}" for name in COLUMNS if name != "id")},
    position = excluded.position
"""


class EventLedger(SQLiteStore):
    """Single source of truth for pending, fired and cancelled events.

    Pass an explicit *db_path* for test isolation (e.g. ``tmp_path / "test.db"``).
    """

    _schema = _CREATE_TABLE

    def __init__(self, db_path: Path | None = None) -> None:
        super().__init__(db_path)
        self._lock = asyncio.Lock()

    # -- Whole-collection I/O --------------------------------------------------

    async def _read(self, db: aiosqlite.Connection) -> list[ScheduledEvent]:
        cursor = await db.execute(_SELECT_ALL)
        rows = await cursor.fetchall()
        return [ScheduledEvent.from_row(tuple(row)) for row in rows]

    async def load(self) -> list[ScheduledEvent]:
        """Return every event ever recorded, in creation order."""
        async with self._connect() as db:
            return await self._read(db)

    async def _mutate(self, change: Callable[[list[ScheduledEvent]], _T]) -> _T:
        """Load everything, apply *change*, write everything back."""
        async with self._lock, self._connect() as db:
            events = await self._read(db)
            result = change(events)
            await db.executemany(
                _UPSERT,
                [(*event.to_row(), position) for position, event in enumerate(events)],
            )
            await db.commit()
            return result

    # -- Operations ------------------------------------------------------------

    async def create(self, draft: EventDraft) -> ScheduledEvent:
        """Store a new active event and return it."""
        event = ScheduledEvent.from_draft(draft)
        await self._mutate(lambda events: events.append(event))
        logger.info(
            "Created %s event %s for owner %s: %s",
            event.kind,
            event.id,
            event.owner_id,
            event.description,
        )
        return event

    async def get(self, event_id: str) -> ScheduledEvent | None:
        """Fetch an event by ID, or None if not found."""
        for event in await self.load():
            if event.id == event_id:
                return event
        return None

    async def list_active(self) -> list[ScheduledEvent]:
        return [e for e in await self.load() if e.is_active]

    async def list_for_owner(self, owner_id: str) -> list[ScheduledEvent]:
        return [e for e in await self.load() if e.owner_id == owner_id]

    async def list_active_for_owner(self, owner_id: str) -> list[ScheduledEvent]:
        return [e for e in await self.load() if e.owner_id == owner_id and e.is_active]

    async def mark_fired(self, event_id: str) -> None:
        """Record a successful firing.

        One-time events move to ``completed``. Unknown IDs are ignored.
        """

        def change(events: list[ScheduledEvent]) -> bool:
            event = _find(events, event_id)
            if event is None:
                return False
            if event.is_once and event.fire_count >= 1:
                return False
            now = utc_now_iso()
            event.last_fired_at = now
            event.fire_count += 1
            if event.is_once and event.status == STATUS_ACTIVE:
                event.status = STATUS_COMPLETED
                event.completed_at = now
            return True

        if await self._mutate(change):
            logger.info("Marked event %s as fired", event_id)
        else:
            logger.warning("mark_fired ignored for event %s", event_id)

    async def cancel(self, event_id: str) -> bool:
        """Cancel an active event. Returns False if missing or not active."""

        def change(events: list[ScheduledEvent]) -> bool:
            event = _find(events, event_id)
            if event is None or not event.is_active:
                return False
            _cancel(event, utc_now_iso())
            return True

        cancelled = await self._mutate(change)
        if cancelled:
            logger.info("Cancelled event %s", event_id)
        return cancelled

    async def cancel_all_for_owner(self, owner_id: str) -> int:
        """Cancel every active event of *owner_id*. Returns how many changed."""

        def change(events: list[ScheduledEvent]) -> int:
            now = utc_now_iso()
            count = 0
            for event in events:
                if event.owner_id == owner_id and event.is_active:
                    _cancel(event, now)
                    count += 1
            return count

        count = await self._mutate(change)
        logger.info("Cancelled %d event(s) for owner %s", count, owner_id)
        return count


def _find(events: list[ScheduledEvent], event_id: str) -> ScheduledEvent | None:
    return next((e for e in events if e.id == event_id), None)


def _cancel(event: ScheduledEvent, timestamp: str) -> None:
    event.status = STATUS_CANCELLED
    event.completed_at = timestamp
