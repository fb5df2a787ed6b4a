"""Tests for ChatModel — request shaping and reply normalisation."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from kairos.llm.client import ChatModel, ToolCall, reply_from_response


def _response(*blocks, input_tokens: int = 3, output_tokens: int = 4) -> SimpleNamespace:
    return SimpleNamespace(
        content=list(blocks),
        usage=SimpleNamespace(input_tokens=input_tokens, output_tokens=output_tokens),
    )


def _text_block(text: str) -> SimpleNamespace:
    return SimpleNamespace(type="text", text=text)


def _tool_block(block_id: str, name: str, arguments: dict) -> SimpleNamespace:
    return SimpleNamespace(type="tool_use", id=block_id, name=name, input=arguments)


def _client(response=None) -> MagicMock:
    client = MagicMock()
    client.messages.create = AsyncMock(return_value=response or _response(_text_block("hi")))
    return client


def test_reply_joins_text_blocks() -> None:
    reply = reply_from_response(_response(_text_block("Hel"), _text_block("lo")))
    assert reply.text == "Hello"
    assert reply.tool_calls == []
    assert (reply.input_tokens, reply.output_tokens) == (3, 4)


def test_reply_collects_tool_calls() -> None:
    reply = reply_from_response(
        _response(_text_block("Let me check."), _tool_block("tu_1", "echo", {"text": "x"}))
    )
    assert reply.tool_calls == [ToolCall(id="tu_1", name="echo", arguments={"text": "x"})]


def test_reply_without_usage() -> None:
    reply = reply_from_response(SimpleNamespace(content=[_text_block("ok")]))
    assert (reply.input_tokens, reply.output_tokens) == (0, 0)


async def test_invoke_sends_tools_when_given() -> None:
    client = _client()
    model = ChatModel(client=client, model="claude-test", max_tokens=100, timeout=5)
    tools = [{"name": "echo", "description": "", "input_schema": {"type": "object"}}]

    reply = await model.invoke("sys", [{"role": "user", "content": "hi"}], tools)

    assert reply.text == "hi"
    client.messages.create.assert_awaited_once_with(
        model="claude-test",
        max_tokens=100,
        system="sys",
        messages=[{"role": "user", "content": "hi"}],
        tools=tools,
    )


async def test_invoke_omits_tools_when_absent() -> None:
    client = _client()
    await ChatModel(client=client).invoke("sys", [{"role": "user", "content": "hi"}])
    assert "tools" not in client.messages.create.await_args.kwargs


async def test_invoke_times_out() -> None:
    client = MagicMock()

    async def never_returns(**kwargs):
        await asyncio.sleep(10)

    client.messages.create = never_returns
    model = ChatModel(client=client, timeout=0.01)

    with pytest.raises(asyncio.TimeoutError):
        await model.invoke("sys", [{"role": "user", "content": "hi"}])
