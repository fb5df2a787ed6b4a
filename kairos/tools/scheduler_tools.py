"""Scheduler tool — create, list, and cancel scheduled events."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

from pydantic import Field

from kairos.config import settings
from kairos.scheduler import recurrence, timeparse
from kairos.scheduler.models import (
    KIND_ONCE,
    KIND_RECURRING,
    STATUS_ACTIVE,
    STATUS_COMPLETED,
    EventDraft,
    ScheduledEvent,
)
from kairos.tools.base import BaseTool, ToolParams, ToolResult

if TYPE_CHECKING:
    from kairos.notifications.context import MessageContext
    from kairos.scheduler.store import EventLedger

logger = logging.getLogger(__name__)

CATEGORY = "scheduler"

ScheduleAction = Literal[
    "create_once",
    "create_recurring",
    "list_active",
    "list_all",
    "cancel",
    "cancel_all",
]


class ManageScheduleParams(ToolParams):
    action: ScheduleAction = Field(description="The action to perform")
    schedule_time: str | None = Field(
        default=None,
        description=(
            'For create_once: when to fire, e.g. "in 20 minutes", "today at 14:00", '
            '"tomorrow at 9:00", "2026-02-15 at 10:00"'
        ),
    )
    recurrence: str | None = Field(
        default=None,
        description=(
            'For create_recurring: "every day at 9:00", "every monday at 10:00", '
            '"every weekday at 8:30", "every 15 minutes", or a raw cron expression '
            'such as "30 9 * * 1-5"'
        ),
    )
    event_action: str | None = Field(
        default=None,
        description="The instruction to carry out when the event fires",
    )
    mention: str | None = Field(
        default=None,
        description='Optional user to mention in the delivered message (e.g. "@alice")',
    )
    description: str | None = Field(
        default=None, description="Short human-readable description of the event"
    )
    event_id: str | None = Field(default=None, description="Event ID, for cancel")


def _describe_schedule(event: ScheduledEvent) -> str:
    if event.is_once:
        return timeparse.format_local(event.schedule)
    return f"Recurring: {event.schedule}"


def format_event(event: ScheduledEvent) -> str:
    """Render one event for listing."""
    return (
        f"[{event.status}] ({event.kind}) {event.description}\n"
        f"   ID: {event.id}\n"
        f"   Schedule: {_describe_schedule(event)}\n"
        f"   Action: {event.action}\n"
        f"   Fired: {event.fire_count} time(s)\n"
        f"   Created: {timeparse.format_local(event.created_at)}"
    )


class ScheduleTool(BaseTool):
    """The assistant's single entry point into the event ledger."""

    name = "manage_schedule"
    description = (
        f"Manage scheduled events and reminders. All times are in the "
        f"{settings.scheduler_timezone} timezone. Create one-time events "
        "(create_once with schedule_time) or recurring events (create_recurring "
        "with recurrence), list the user's events (list_active, list_all), and "
        "cancel them (cancel with event_id, cancel_all). When an event fires, "
        "event_action is carried out as if the user had just asked for it."
    )
    category = CATEGORY
    params_model = ManageScheduleParams

    def __init__(self, ledger: EventLedger) -> None:
        self._ledger = ledger

    async def execute(
        self,
        action: str,
        schedule_time: str | None = None,
        recurrence: str | None = None,
        event_action: str | None = None,
        mention: str | None = None,
        description: str | None = None,
        event_id: str | None = None,
        msg_context: MessageContext | None = None,
    ) -> ToolResult:
        if msg_context is None:
            return ToolResult(error="manage_schedule needs a message context")

        if action == "create_once":
            return await self._create_once(msg_context, schedule_time, event_action, mention, description)
        if action == "create_recurring":
            return await self._create_recurring(msg_context, recurrence, event_action, mention, description)
        if action == "list_active":
            events = await self._ledger.list_active_for_owner(msg_context.user_id)
            if not events:
                return ToolResult(text="You have no active scheduled events.")
            return ToolResult(text=_render("Your active scheduled events:", events))
        if action == "list_all":
            events = await self._ledger.list_for_owner(msg_context.user_id)
            if not events:
                return ToolResult(text="You have no scheduled events (active or past).")
            return ToolResult(text=_render("All your scheduled events:", events))
        if action == "cancel":
            return await self._cancel(msg_context, event_id)
        if action == "cancel_all":
            count = await self._ledger.cancel_all_for_owner(msg_context.user_id)
            return ToolResult(text=f"Cancelled {count} active event(s).")
        return ToolResult(error=f"Unknown action: {action}")

    async def _create_once(
        self,
        ctx: MessageContext,
        schedule_time: str | None,
        event_action: str | None,
        mention: str | None,
        description: str | None,
    ) -> ToolResult:
        if not schedule_time:
            return ToolResult(error="Please specify when the event should fire (schedule_time).")
        if not event_action:
            return ToolResult(error="Please specify what to do when it fires (event_action).")

        fire_at = timeparse.parse_time(schedule_time)
        if fire_at is None:
            return ToolResult(
                error=(
                    f'Could not parse time "{schedule_time}". Use formats like '
                    '"in 20 minutes", "today at 14:00", "tomorrow at 9:00" '
                    'or "2026-02-15 at 10:00".'
                )
            )

        event = await self._ledger.create(
            EventDraft(
                owner_id=ctx.user_id,
                origin_group_id=ctx.group_id,
                channel_id=ctx.channel_id,
                kind=KIND_ONCE,
                schedule=fire_at.isoformat(),
                action=event_action,
                mention=mention,
                description=description or f"Reminder: {event_action[:50]}",
            )
        )
        return ToolResult(
            text=(
                "Scheduled one-time event.\n"
                f"ID: {event.id}\n"
                f"Will fire at: {timeparse.format_local(fire_at)} "
                f"({settings.scheduler_timezone})\n"
                f"Action: {event_action}"
            )
        )

    async def _create_recurring(
        self,
        ctx: MessageContext,
        pattern: str | None,
        event_action: str | None,
        mention: str | None,
        description: str | None,
    ) -> ToolResult:
        if not pattern:
            return ToolResult(error="Please specify the recurring pattern (recurrence).")
        if not event_action:
            return ToolResult(error="Please specify what to do when it fires (event_action).")

        expr = recurrence.translate(pattern)
        if expr is None:
            return ToolResult(
                error=(
                    f'Could not parse pattern "{pattern}". Use formats like '
                    '"every day at 9:00", "every monday at 10:00" or a raw cron '
                    'expression such as "0 9 * * *".'
                )
            )
        if not recurrence.is_valid(expr):
            return ToolResult(error=f"Invalid recurrence expression: {expr}")

        event = await self._ledger.create(
            EventDraft(
                owner_id=ctx.user_id,
                origin_group_id=ctx.group_id,
                channel_id=ctx.channel_id,
                kind=KIND_RECURRING,
                schedule=expr,
                action=event_action,
                mention=mention,
                description=description or f"Recurring: {pattern}",
            )
        )
        return ToolResult(
            text=(
                "Scheduled recurring event.\n"
                f"ID: {event.id}\n"
                f"Pattern: {pattern} (cron: {expr})\n"
                f"Action: {event_action}"
            )
        )

    async def _cancel(self, ctx: MessageContext, event_id: str | None) -> ToolResult:
        if not event_id:
            return ToolResult(error="Please specify the event ID to cancel (event_id).")

        # Claude sometimes reformats hex IDs as dashed UUIDs
        event_id = event_id.strip().replace("-", "")
        event = await self._ledger.get(event_id)
        if event is not None and event.owner_id == ctx.user_id and await self._ledger.cancel(event_id):
            return ToolResult(text=f"Event {event_id} has been cancelled.")

        reason = "It may not exist or is already completed/cancelled."
        if event is not None and event.status == STATUS_ACTIVE and event.owner_id != ctx.user_id:
            reason = "It belongs to someone else."
        elif event is not None and event.status == STATUS_COMPLETED:
            reason = "It has already completed."
        return ToolResult(error=f"Could not cancel event {event_id}. {reason}")


def _render(title: str, events: list[ScheduledEvent]) -> str:
    return title + "\n\n" + "\n\n".join(format_event(e) for e in events)
