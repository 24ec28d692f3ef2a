"""Tests for the OpenRouter client."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import openai
import pytest

from arhan.clients.openrouter import OpenRouterClient
from arhan.exceptions import InvalidResponseError, ModelNotFoundError
from arhan.stream_handler import StreamAccumulator
from arhan.tools import get_default_tools
from arhan.types import Message


def _client(**kwargs) -> OpenRouterClient:
    return OpenRouterClient(api_key="sk-test", model="vendor/model", **kwargs)


def _chunk(content=None, tool_calls=None, finish_reason=None):
    delta = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(delta=delta, finish_reason=finish_reason)])


def _tool_delta(index, id=None, name=None, arguments=None):
    return SimpleNamespace(index=index, id=id, function=SimpleNamespace(name=name, arguments=arguments))


class _FakeStream:
    def __init__(self, chunks):
        self._chunks = list(chunks)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._chunks:
            raise StopAsyncIteration
        return self._chunks.pop(0)


class TestBuildRequest:
    """Tests for request construction."""

    def test_defaults(self):
        messages = [Message.system("sys"), Message.user("hi")]

        request = _client().build_request(messages, get_default_tools())

        assert request["model"] == "vendor/model"
        assert request["stream"] is True
        assert request["temperature"] == 0.7
        assert request["max_tokens"] == 4096
        assert request["messages"] == [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "hi"},
        ]
        assert [t["function"]["name"] for t in request["tools"]] == [
            "read_file", "write_file", "list_files", "run_command",
        ]

    def test_no_tools_key_without_tools(self):
        assert "tools" not in _client().build_request([Message.user("hi")])

    def test_config_overrides_only_supported_keys(self):
        client = _client(client_config={"temperature": 0.1, "top_p": 0.9, "provider": "x"})

        request = client.build_request([Message.user("hi")])

        assert request["temperature"] == 0.1
        assert request["top_p"] == 0.9
        assert "provider" not in request


class TestParseStreamChunk:
    """Tests for chunk normalization."""

    def test_text_chunk(self):
        chunk = _client()._parse_stream_chunk(_chunk(content="Hi", finish_reason="stop"))

        assert chunk.delta_content == "Hi"
        assert chunk.delta_tool_calls == []
        assert chunk.finish_reason == "stop"

    def test_tool_call_fragments(self):
        chunk = _client()._parse_stream_chunk(_chunk(tool_calls=[
            _tool_delta(0, id="c1", name="read_file", arguments=""),
            _tool_delta(1, arguments='{"pa'),
        ]))

        first, second = chunk.delta_tool_calls
        assert (first.index, first.id, first.name, first.arguments_delta) == (0, "c1", "read_file", None)
        assert (second.index, second.id, second.name, second.arguments_delta) == (1, None, None, '{"pa')

    def test_chunk_without_choices(self):
        chunk = _client()._parse_stream_chunk(SimpleNamespace(choices=[]))

        assert chunk.delta_content is None
        assert chunk.delta_tool_calls == []

    def test_unparsable_chunk(self):
        with pytest.raises(InvalidResponseError):
            _client()._parse_stream_chunk(SimpleNamespace(choices=[SimpleNamespace()]))


class TestStreaming:
    """Tests for the full open_stream path with a mocked SDK."""

    @pytest.mark.asyncio
    async def test_stream_is_accumulated(self):
        client = _client()
        client.client.chat.completions.create = AsyncMock(return_value=_FakeStream([
            _chunk(content="Let me check."),
            _chunk(tool_calls=[_tool_delta(0, id="c1", name="list_files", arguments='{"path"')]),
            _chunk(tool_calls=[_tool_delta(0, arguments=': "."}')]),
            _chunk(finish_reason="tool_calls"),
        ]))

        turn = await StreamAccumulator().accumulate(client.open_stream([Message.user("ls")]))

        assert turn.content == "Let me check."
        assert turn.tool_calls[0].raw_arguments == '{"path": "."}'
        assert client.client.chat.completions.create.call_args.kwargs["stream"] is True

    @pytest.mark.asyncio
    async def test_sdk_error_is_classified(self):
        client = _client()
        response = httpx.Response(404, request=httpx.Request("POST", "https://openrouter.ai/api/v1"))
        client.client.chat.completions.create = AsyncMock(
            side_effect=openai.NotFoundError("model not found", response=response, body=None)
        )

        with pytest.raises(ModelNotFoundError, match="vendor/model"):
            await StreamAccumulator().accumulate(client.open_stream([Message.user("hi")]))
