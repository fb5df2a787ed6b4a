"""Tool framework — build the catalog offered to the model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kairos.config import settings
from kairos.tools.base import BaseTool, ToolParams, ToolResult
from kairos.tools.conversation_tools import ConversationTool
from kairos.tools.list_tools import ListTool
from kairos.tools.registry import ToolRegistry
from kairos.tools.scheduler_tools import CATEGORY as SCHEDULER_CATEGORY
from kairos.tools.scheduler_tools import ScheduleTool
from kairos.tools.web_tools import WebSearchParams, web_search

if TYPE_CHECKING:
    from kairos.lists.store import ListStore
    from kairos.memory.history import HistoryStore
    from kairos.memory.usage import UsageStore
    from kairos.scheduler.store import EventLedger


def build_registry(
    ledger: EventLedger,
    lists: ListStore,
    history: HistoryStore,
    usage: UsageStore,
) -> ToolRegistry:
    """Assemble the full tool catalog around the given stores."""
    reg = ToolRegistry()
    reg.register(ScheduleTool(ledger))
    reg.register(ListTool(lists))
    reg.register(ConversationTool(history, usage))

    # Web search only when a Brave Search API key is configured.
    if settings.brave_search_api_key:
        reg.tool(
            name="web_search",
            description=(
                "Search the web using Brave Search. Returns titles, URLs and "
                "descriptions for matching pages."
            ),
            category="research",
            params_model=WebSearchParams,
        )(web_search)
    return reg


__all__ = [
    "SCHEDULER_CATEGORY",
    "BaseTool",
    "ToolParams",
    "ToolRegistry",
    "ToolResult",
    "build_registry",
]
