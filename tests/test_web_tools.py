"""Tests for the web_search tool."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from kairos.tools.web_tools import MAX_RESULTS, format_results, web_search


@pytest.fixture(autouse=True)
def _configure_api_key(monkeypatch) -> None:
    """Ensure the Brave API key is set for most tests."""
    monkeypatch.setattr("kairos.config.settings.brave_search_api_key", "test-brave-key")


def _mock_httpx_client(mock_client_cls: MagicMock, response: httpx.Response) -> AsyncMock:
    """Wire up an AsyncClient context-manager mock that returns *response*."""
    mock_client = AsyncMock()
    mock_client.get.return_value = response
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    mock_client_cls.return_value = mock_client
    return mock_client


def _brave_response(results: list[dict], status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code=status_code,
        json={"web": {"results": results}},
        request=httpx.Request("GET", "https://api.search.brave.com/res/v1/web/search"),
    )


async def test_web_search_success() -> None:
    results = [
        {"title": "Electric Cars Guide", "url": "https://example.com/ev", "description": "A guide"},
        {"title": "EV Charging", "url": "https://example.com/charging"},
    ]

    with patch("kairos.tools.web_tools.httpx.AsyncClient") as mock_cls:
        client = _mock_httpx_client(mock_cls, _brave_response(results))
        result = await web_search(query="electric cars", count=5)

    assert result.success
    assert 'Search results for "electric cars"' in result.text
    assert "1. Electric Cars Guide\n   https://example.com/ev\n   A guide" in result.text
    assert "2. EV Charging" in result.text
    params = client.get.call_args.kwargs["params"]
    assert params == {"q": "electric cars", "count": 5}
    headers = client.get.call_args.kwargs["headers"]
    assert headers["X-Subscription-Token"] == "test-brave-key"


async def test_web_search_caps_count_and_maps_freshness() -> None:
    with patch("kairos.tools.web_tools.httpx.AsyncClient") as mock_cls:
        client = _mock_httpx_client(mock_cls, _brave_response([]))
        await web_search(query="news", count=50, freshness="week")

    params = client.get.call_args.kwargs["params"]
    assert params["count"] == MAX_RESULTS
    assert params["freshness"] == "pw"


async def test_web_search_no_results() -> None:
    with patch("kairos.tools.web_tools.httpx.AsyncClient") as mock_cls:
        _mock_httpx_client(mock_cls, _brave_response([]))
        result = await web_search(query="zzzz")

    assert result.text == 'No results found for "zzzz".'


async def test_web_search_api_error() -> None:
    with patch("kairos.tools.web_tools.httpx.AsyncClient") as mock_cls:
        _mock_httpx_client(mock_cls, _brave_response([], status_code=429))
        result = await web_search(query="test")

    assert not result.success
    assert "429" in result.error


async def test_web_search_network_error() -> None:
    with patch("kairos.tools.web_tools.httpx.AsyncClient") as mock_cls:
        client = _mock_httpx_client(mock_cls, _brave_response([]))
        client.get.side_effect = httpx.ConnectError("connection refused")
        result = await web_search(query="test")

    assert not result.success
    assert "Search request failed" in result.error


async def test_web_search_without_api_key(monkeypatch) -> None:
    monkeypatch.setattr("kairos.config.settings.brave_search_api_key", "")
    result = await web_search(query="test")
    assert result.error == "BRAVE_SEARCH_API_KEY is not configured."


def test_format_results_empty() -> None:
    assert format_results("q", []) == 'No results found for "q".'
