"""Tests for the ScheduledEvent data model."""

from kairos.scheduler.models import (
    COLUMNS,
    KIND_ONCE,
    KIND_RECURRING,
    STATUS_ACTIVE,
    EventDraft,
    ScheduledEvent,
    make_event_id,
)


def _draft(**kwargs) -> EventDraft:
    defaults = {
        "owner_id": "111",
        "channel_id": "555",
        "kind": KIND_ONCE,
        "schedule": "2026-03-10T08:00:00+00:00",
        "action": "stretch",
    }
    defaults.update(kwargs)
    return EventDraft(**defaults)


def test_from_draft_fills_ledger_fields() -> None:
    event = ScheduledEvent.from_draft(_draft(description="Stretch", mention="@alice"))
    assert len(event.id) == 32
    assert event.status == STATUS_ACTIVE
    assert event.fire_count == 0
    assert event.created_at
    assert event.last_fired_at is None
    assert event.completed_at is None
    assert event.mention == "@alice"


def test_ids_are_unique() -> None:
    assert len({make_event_id() for _ in range(100)}) == 100


def test_kind_properties() -> None:
    once = ScheduledEvent.from_draft(_draft())
    recurring = ScheduledEvent.from_draft(_draft(kind=KIND_RECURRING, schedule="0 9 * * *"))
    assert once.is_once and not once.is_recurring
    assert recurring.is_recurring and not recurring.is_once


def test_row_round_trip() -> None:
    event = ScheduledEvent.from_draft(_draft(origin_group_id="-100"))
    row = event.to_row()
    assert len(row) == len(COLUMNS)
    assert ScheduledEvent.from_row(row) == event


def test_from_row_normalises_nulls() -> None:
    event = ScheduledEvent.from_draft(_draft())
    values = dict(zip(COLUMNS, event.to_row(), strict=True))
    values["description"] = None
    values["fire_count"] = None
    restored = ScheduledEvent.from_row(tuple(values[c] for c in COLUMNS))
    assert restored.description == ""
    assert restored.fire_count == 0
