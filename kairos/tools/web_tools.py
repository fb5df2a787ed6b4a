"""Web search via the Brave Search API."""

import logging
from typing import Literal

import httpx
from pydantic import Field

from kairos.config import settings
from kairos.tools.base import ToolParams, ToolResult

logger = logging.getLogger(__name__)

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"
MAX_RESULTS = 10

_FRESHNESS = {"day": "pd", "week": "pw", "month": "pm", "year": "py"}


class WebSearchParams(ToolParams):
    query: str = Field(description="Search query string")
    count: int = Field(default=5, description="Number of results to return (1-10)", ge=1)
    freshness: Literal["day", "week", "month", "year"] | None = Field(
        default=None, description="Only return results from the past day, week, month or year"
    )


def format_results(query: str, results: list[dict]) -> str:
    if not results:
        return f'No results found for "{query}".'
    lines = [f'Search results for "{query}":']
    for i, r in enumerate(results, start=1):
        lines.append(f"\n{i}. {r.get('title', '')}\n   {r.get('url', '')}")
        if r.get("description"):
            lines.append(f"   {r['description']}")
    return "\n".join(lines)


async def web_search(query: str, count: int = 5, freshness: str | None = None) -> ToolResult:
    api_key = settings.brave_search_api_key
    if not api_key:
        return ToolResult(error="BRAVE_SEARCH_API_KEY is not configured.")

    headers = {
        "Accept": "application/json",
        "Accept-Encoding": "gzip",
        "X-Subscription-Token": api_key,
    }
    params: dict[str, str | int] = {"q": query, "count": min(count, MAX_RESULTS)}
    if freshness in _FRESHNESS:
        params["freshness"] = _FRESHNESS[freshness]

    try:
        async with httpx.AsyncClient(timeout=20) as client:
            resp = await client.get(BRAVE_SEARCH_URL, headers=headers, params=params)

        if resp.status_code != 200:
            return ToolResult(
                error=f"Brave Search API returned {resp.status_code}: {resp.text[:200]}"
            )

        web_results = resp.json().get("web", {}).get("results", [])
        return ToolResult(text=format_results(query, web_results))
    except httpx.HTTPError as exc:
        logger.exception("Brave Search request failed")
        return ToolResult(error=f"Search request failed: {exc}")
