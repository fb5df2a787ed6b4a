"""TaskExecutor — runs a due event through the assistant and delivers the result."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kairos.llm.agent import RunOptions
from kairos.llm.errors import AssistantError
from kairos.notifications.context import MessageContext

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from kairos.notifications.channels import NotificationChannel
    from kairos.scheduler.models import ScheduledEvent
    from kairos.scheduler.store import EventLedger

logger = logging.getLogger(__name__)

SCHEDULED_PROMPT = (
    "This is a scheduled reminder that was set earlier. The user asked you to do "
    'the following at this specific time: "{action}"\n\n'
    "IMPORTANT: Do NOT create a new schedule or reminder. Simply respond to or "
    "execute this request directly now. Respond as if the user just asked you "
    "this question."
)

EMPTY_OUTPUT = "(The scheduled task ran but produced no reply.)"

# Fired runs never see the scheduling tool and are not conversational turns.
SCHEDULED_RUN = RunOptions(exclude_scheduling=True, skip_history=True)


class DeliveryError(Exception):
    """The transport could not deliver a message to the event's channel."""


def build_prompt(event: ScheduledEvent) -> str:
    return SCHEDULED_PROMPT.format(action=event.action)


def _with_mention(event: ScheduledEvent, text: str) -> str:
    return f"{event.mention} {text}" if event.mention else text


def _error_summary(exc: Exception) -> str:
    if isinstance(exc, AssistantError):
        return exc.advisory
    if isinstance(exc, DeliveryError):
        return "the result could not be delivered"
    return "an unexpected error occurred"


class TaskExecutor:
    """Executes fired events.

    Args:
        ledger: EventLedger, for recording successful firings.
        transport: Channel the results are delivered through.
        run_agent: Async callable ``(context, input_text, options)`` that runs
            the tool-orchestration loop and returns the final text.
    """

    def __init__(
        self,
        ledger: EventLedger,
        transport: NotificationChannel,
        run_agent: Callable[[MessageContext, str, RunOptions], Awaitable[str]],
    ) -> None:
        self._ledger = ledger
        self._transport = transport
        self._run_agent = run_agent

    async def execute(self, event: ScheduledEvent) -> bool:
        """Run *event* once. Returns True when it was delivered and marked fired.

        On failure the event is left untouched, so it is picked up again by a
        later tick.
        """
        context = MessageContext(
            user_id=event.owner_id,
            channel_id=event.channel_id,
            group_id=event.origin_group_id,
        )
        logger.info("Executing event %s (%s): %s", event.id, event.kind, event.description)

        try:
            output = await self._run_agent(context, build_prompt(event), SCHEDULED_RUN)
            if not output or not output.strip():
                output = EMPTY_OUTPUT
            delivered = await self._transport.send(event.channel_id, _with_mention(event, output))
            if not delivered:
                msg = f"{self._transport.name} refused delivery to {event.channel_id}"
                raise DeliveryError(msg)
        except Exception as exc:
            logger.exception("Event %s failed", event.id)
            await self._send_failure(event, exc)
            return False

        await self._ledger.mark_fired(event.id)
        logger.info("Event %s fired successfully", event.id)
        return True

    async def _send_failure(self, event: ScheduledEvent, exc: Exception) -> None:
        notice = _with_mention(
            event,
            f'Scheduled task failed: "{event.description}". Error: {_error_summary(exc)}',
        )
        if not await self._transport.send(event.channel_id, notice):
            logger.error("Could not deliver failure notice for event %s", event.id)
