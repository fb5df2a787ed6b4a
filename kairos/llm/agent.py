"""Tool-orchestration loop: one assistant turn, live or scheduled."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from kairos.config import settings
from kairos.llm.errors import AssistantError, ToolRoundLimitError, classify_error
from kairos.llm.prompt import build_system_prompt
from kairos.memory.history import Turn, to_api_messages
from kairos.tools import SCHEDULER_CATEGORY

if TYPE_CHECKING:
    from kairos.llm.client import ChatModel, ModelReply
    from kairos.memory.history import HistoryStore
    from kairos.memory.usage import UsageStore
    from kairos.notifications.context import MessageContext
    from kairos.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

TOOL_PREAMBLE = "I need to use some tools to help with this."


@dataclass
class RunOptions:
    """Per-run switches.

    Attributes:
        exclude_scheduling: Drop the scheduling tool from the catalog.
        skip_history: Neither load nor save conversation turns.
        system_prompt: Replaces the default system prompt when set.
    """

    exclude_scheduling: bool = False
    skip_history: bool = False
    system_prompt: str | None = None


def fold_tool_results(results: list[tuple[str, str]]) -> str:
    """Build the follow-up user turn carrying every tool result."""
    body = "\n\n".join(f"[{name}]: {content}" for name, content in results)
    return (
        f"Here are the tool results:\n\n{body}\n\n"
        "Please provide your response based on these results."
    )


class Assistant:
    """Runs the model with tools until it produces a final answer."""

    def __init__(
        self,
        model: ChatModel,
        registry: ToolRegistry,
        history: HistoryStore,
        usage: UsageStore,
        max_tool_rounds: int | None = None,
    ) -> None:
        self._model = model
        self._registry = registry
        self._history = history
        self._usage = usage
        self.max_tool_rounds = max_tool_rounds or settings.max_tool_rounds

    async def run(
        self, context: MessageContext, input_text: str, options: RunOptions | None = None
    ) -> str:
        """Answer *input_text* for *context* and return the final text.

        Raises:
            UpstreamError: The model provider failed; carries an advisory.
            ToolRoundLimitError: The model kept requesting tools.
        """
        options = options or RunOptions()
        excluded = (SCHEDULER_CATEGORY,) if options.exclude_scheduling else ()
        catalog = self._registry.select(exclude_categories=excluded)
        tools = catalog.get_schemas()

        turns = [] if options.skip_history else await self._history.load(context.channel_id)
        system = options.system_prompt or build_system_prompt()
        messages: list[dict[str, Any]] = [
            *to_api_messages(turns),
            {"role": "user", "content": input_text},
        ]
        logger.info(
            "Run for user %s in %s: %d history turn(s), %d tool(s)",
            context.user_id,
            context.channel_id,
            len(turns),
            len(tools),
        )

        tokens = [0, 0]
        try:
            reply = await self._invoke(system, messages, tools, tokens)
            rounds = 0
            while reply.tool_calls:
                rounds += 1
                if rounds > self.max_tool_rounds:
                    logger.warning("Hit max tool rounds (%d)", self.max_tool_rounds)
                    raise ToolRoundLimitError(self.max_tool_rounds)

                logger.info(
                    "Round %d: %d tool call(s): %s",
                    rounds,
                    len(reply.tool_calls),
                    ", ".join(c.name for c in reply.tool_calls),
                )
                results = []
                for call in reply.tool_calls:
                    result = await catalog.execute(call.name, call.arguments, msg_context=context)
                    results.append((call.name, result.to_content()))

                messages.append({"role": "assistant", "content": TOOL_PREAMBLE})
                messages.append({"role": "user", "content": fold_tool_results(results)})
                # Requery without tools to converge on a final answer.
                reply = await self._invoke(system, messages, None, tokens)
        except AssistantError:
            raise
        except Exception as exc:
            upstream = classify_error(exc)
            if upstream is None:
                raise
            logger.warning("Model call failed (%s): %s", upstream.kind, exc)
            raise upstream from exc
        finally:
            if tokens[0] or tokens[1]:
                await self._usage.add(context.user_id, tokens[0], tokens[1])

        output = reply.text
        if not options.skip_history:
            await self._history.append(
                context.channel_id,
                Turn(role="user", content=input_text),
                Turn(role="assistant", content=output),
            )
        logger.info("Run finished: %d in / %d out tokens", tokens[0], tokens[1])
        return output

    async def _invoke(
        self,
        system: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None,
        tokens: list[int],
    ) -> ModelReply:
        reply = await self._model.invoke(system, list(messages), tools or None)
        tokens[0] += reply.input_tokens
        tokens[1] += reply.output_tokens
        return reply
