"""Conversation tool — history and token usage housekeeping."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

from pydantic import Field

from kairos.tools.base import BaseTool, ToolParams, ToolResult

if TYPE_CHECKING:
    from kairos.memory.history import HistoryStore
    from kairos.memory.usage import UsageStore
    from kairos.notifications.context import MessageContext

logger = logging.getLogger(__name__)


class ManageConversationParams(ToolParams):
    action: Literal["clear_history", "get_token_usage", "reset_token_usage"] = Field(
        description="The action to perform"
    )


class ConversationTool(BaseTool):
    name = "manage_conversation"
    description = (
        "Clear the conversation history of the current chat, show the user's "
        "accumulated token usage, or reset that counter."
    )
    category = "conversation"
    params_model = ManageConversationParams

    def __init__(self, history: HistoryStore, usage: UsageStore) -> None:
        self._history = history
        self._usage = usage

    async def execute(
        self, action: str, msg_context: MessageContext | None = None
    ) -> ToolResult:
        if msg_context is None:
            return ToolResult(error="manage_conversation needs a message context")

        if action == "clear_history":
            removed = await self._history.clear(msg_context.channel_id)
            logger.info("Cleared %d turn(s) in channel %s", removed, msg_context.channel_id)
            return ToolResult(text="Conversation history cleared.")
        if action == "get_token_usage":
            usage = await self._usage.get(msg_context.user_id)
            if usage.updated_at is None:
                return ToolResult(text="No token usage recorded yet.")
            return ToolResult(text=usage.format())
        await self._usage.reset(msg_context.user_id)
        return ToolResult(text="Token usage counter reset.")
