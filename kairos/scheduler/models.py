"""ScheduledEvent data model."""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from kairos.db import utc_now_iso

KIND_ONCE = "once"
KIND_RECURRING = "recurring"

STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"

# Column order of the ``scheduled_events`` table, minus ``position``.
COLUMNS = (
    "id",
    "owner_id",
    "origin_group_id",
    "channel_id",
    "kind",
    "schedule",
    "action",
    "mention",
    "description",
    "status",
    "created_at",
    "last_fired_at",
    "completed_at",
    "fire_count",
)


@dataclass
class EventDraft:
    """Everything the caller supplies when creating an event.

    The ledger fills in ``id``, ``status``, ``created_at`` and ``fire_count``.
    """

    owner_id: str
    channel_id: str
    kind: str
    schedule: str
    action: str
    description: str = ""
    origin_group_id: str | None = None
    mention: str | None = None


@dataclass
class ScheduledEvent:
    """A unit of deferred work.

    Attributes:
        id: Unique identifier (UUID hex), never reused.
        owner_id: User who created the event.
        origin_group_id: Group chat the event was created in (None for private chats).
        channel_id: Chat the output is delivered to.
        kind: ``"once"`` or ``"recurring"``.
        schedule: UTC ISO 8601 instant for ``once``, a five-field recurrence
            expression for ``recurring``.
        action: Instruction re-submitted to the assistant when the event fires.
        mention: Optional text prepended to the delivered output.
        description: Human-readable label.
        status: ``"active"``, ``"completed"`` or ``"cancelled"``.
        created_at: ISO 8601 timestamp.
        last_fired_at: ISO 8601 timestamp of the last successful firing.
        completed_at: ISO 8601 timestamp of completion or cancellation.
        fire_count: Number of successful firings.
    """

    id: str
    owner_id: str
    channel_id: str
    kind: str
    schedule: str
    action: str
    description: str = ""
    origin_group_id: str | None = None
    mention: str | None = None
    status: str = STATUS_ACTIVE
    created_at: str = ""
    last_fired_at: str | None = None
    completed_at: str | None = None
    fire_count: int = 0

    def __post_init__(self) -> None:
        if not self.created_at:
            self.created_at = utc_now_iso()

    @classmethod
    def from_draft(cls, draft: EventDraft) -> ScheduledEvent:
        return cls(
            id=make_event_id(),
            owner_id=draft.owner_id,
            origin_group_id=draft.origin_group_id,
            channel_id=draft.channel_id,
            kind=draft.kind,
            schedule=draft.schedule,
            action=draft.action,
            mention=draft.mention,
            description=draft.description,
        )

    # -- Convenience properties ------------------------------------------------

    @property
    def is_once(self) -> bool:
        return self.kind == KIND_ONCE

    @property
    def is_recurring(self) -> bool:
        return self.kind == KIND_RECURRING

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE

    # -- Serialization ---------------------------------------------------------

    def to_row(self) -> tuple:
        """Serialize to a tuple matching ``COLUMNS``."""
        return tuple(getattr(self, name) for name in COLUMNS)

    @classmethod
    def from_row(cls, row: tuple) -> ScheduledEvent:
        """Deserialize from a row selected in ``COLUMNS`` order."""
        values = dict(zip(COLUMNS, row, strict=False))
        values["description"] = values["description"] or ""
        values["fire_count"] = int(values["fire_count"] or 0)
        return cls(**values)


def make_event_id() -> str:
    """Generate a new event ID."""
    return uuid.uuid4().hex
