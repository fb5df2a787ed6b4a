"""Tool catalog offered to the model, and the dispatcher that runs its entries."""

from __future__ import annotations

import inspect
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from kairos.tools.base import BaseTool, ToolParams, ToolResult

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from kairos.notifications.context import MessageContext

logger = logging.getLogger(__name__)

_EMPTY_SCHEMA: dict[str, Any] = {"type": "object", "properties": {}}


@dataclass(frozen=True)
class ToolDef:
    """One catalog entry."""

    name: str
    description: str
    category: str
    handler: Callable[..., Awaitable[ToolResult]]
    params_model: type[ToolParams] | None = None
    wants_context: bool = field(init=False)

    def __post_init__(self) -> None:
        # The handler receives msg_context only when its signature names it.
        params = inspect.signature(self.handler).parameters
        object.__setattr__(self, "wants_context", "msg_context" in params)

    def schema(self) -> dict[str, Any]:
        """The Anthropic ``tools`` entry for this tool."""
        if self.params_model is None:
            input_schema = dict(_EMPTY_SCHEMA)
        else:
            input_schema = self.params_model.model_json_schema()
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": input_schema,
        }

    def bind(self, arguments: dict[str, Any], msg_context: MessageContext | None) -> dict[str, Any]:
        """Validate *arguments* and build the handler's keyword arguments."""
        if self.params_model is None:
            kwargs = dict(arguments)
        else:
            kwargs = self.params_model.model_validate(arguments).model_dump()
        if msg_context is not None and self.wants_context:
            kwargs["msg_context"] = msg_context
        return kwargs


class ToolRegistry:
    """Named tools grouped by category.

    Stateless tools register through the decorator::

        @registry.tool(name="web_search", description="...", category="research")
        async def web_search(query: str) -> ToolResult: ...

    Tools holding a store are ``BaseTool`` instances passed to ``register()``.
    A run that must not see a category works on ``select(exclude_categories=...)``.
    """

    def __init__(self, tools: Iterable[ToolDef] = ()) -> None:
        self._tools: dict[str, ToolDef] = {t.name: t for t in tools}

    def tool(
        self,
        *,
        name: str,
        description: str,
        category: str,
        params_model: type[ToolParams] | None = None,
    ) -> Callable:
        """Register the decorated coroutine function as a tool."""

        def decorator(fn: Callable[..., Awaitable[ToolResult]]) -> Callable:
            if not inspect.iscoroutinefunction(fn):
                msg = f"Tool handler '{name}' must be an async function"
                raise TypeError(msg)
            self._add(ToolDef(name, description, category, fn, params_model))
            return fn

        return decorator

    def register(self, tool_instance: BaseTool) -> None:
        self._add(
            ToolDef(
                tool_instance.name,
                tool_instance.description,
                tool_instance.category,
                tool_instance.execute,
                tool_instance.params_model,
            )
        )

    def _add(self, tool_def: ToolDef) -> None:
        if tool_def.name in self._tools:
            logger.warning("Replacing tool '%s'", tool_def.name)
        self._tools[tool_def.name] = tool_def

    def get(self, name: str) -> ToolDef | None:
        return self._tools.get(name)

    @property
    def tool_names(self) -> list[str]:
        return list(self._tools)

    def select(self, *, exclude_categories: Iterable[str] = ()) -> ToolRegistry:
        """A new registry without the tools in *exclude_categories*."""
        excluded = frozenset(exclude_categories)
        return ToolRegistry(t for t in self._tools.values() if t.category not in excluded)

    def get_schemas(self) -> list[dict[str, Any]]:
        return [t.schema() for t in self._tools.values()]

    async def execute(
        self,
        name: str,
        arguments: dict[str, Any],
        msg_context: MessageContext | None = None,
    ) -> ToolResult:
        """Run one tool call.

        Never raises: an unknown name, invalid arguments or a failing
        handler all come back as an error ``ToolResult``.
        """
        tool_def = self._tools.get(name)
        if tool_def is None:
            return ToolResult(error=f"Unknown tool: {name}")

        logger.info("Tool '%s' called with %s", name, arguments)
        started = time.monotonic()
        try:
            result = await tool_def.handler(**tool_def.bind(arguments, msg_context))
        except Exception as exc:
            logger.exception("Tool '%s' failed after %.2fs", name, time.monotonic() - started)
            return ToolResult(error=f"Tool '{name}' failed: {exc}")

        elapsed = time.monotonic() - started
        if result.success:
            logger.info("Tool '%s' succeeded in %.2fs", name, elapsed)
        else:
            logger.warning("Tool '%s' returned error in %.2fs: %s", name, elapsed, result.error)
        return result
