"""Async Claude API client."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import anthropic

from kairos.config import settings

logger = logging.getLogger(__name__)


@dataclass
class ToolCall:
    """A tool invocation requested by the model."""

    id: str
    name: str
    arguments: dict[str, Any]


@dataclass
class ModelReply:
    text: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    input_tokens: int = 0
    output_tokens: int = 0


def reply_from_response(response: Any) -> ModelReply:
    """Normalize an SDK ``Message`` into a ModelReply (text blocks joined)."""
    texts: list[str] = []
    calls: list[ToolCall] = []
    for block in response.content:
        if block.type == "text":
            texts.append(block.text)
        elif block.type == "tool_use":
            calls.append(ToolCall(id=block.id, name=block.name, arguments=dict(block.input)))

    usage = getattr(response, "usage", None)
    return ModelReply(
        text="".join(texts),
        tool_calls=calls,
        input_tokens=getattr(usage, "input_tokens", 0) or 0,
        output_tokens=getattr(usage, "output_tokens", 0) or 0,
    )


class ChatModel:
    """Single-shot, deadline-bounded calls to the Messages API."""

    def __init__(
        self,
        client: anthropic.AsyncAnthropic | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        timeout: float | None = None,
    ) -> None:
        self._client = client or anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key)
        self.model = model or settings.chat_model
        self.max_tokens = max_tokens or settings.max_tokens
        self.timeout = timeout or settings.model_timeout_seconds

    async def invoke(
        self,
        system: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
    ) -> ModelReply:
        """Send one request. Tools are bound only when *tools* is non-empty."""
        kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": system,
            "messages": messages,
        }
        if tools:
            kwargs["tools"] = tools

        response = await asyncio.wait_for(
            self._client.messages.create(**kwargs), timeout=self.timeout
        )
        reply = reply_from_response(response)
        logger.debug(
            "Model replied: %d tool call(s), %d in / %d out tokens",
            len(reply.tool_calls),
            reply.input_tokens,
            reply.output_tokens,
        )
        return reply
