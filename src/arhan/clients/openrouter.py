"""OpenRouter client implementation.

OpenRouter exposes an OpenAI-compatible chat-completion API, so this
client drives it through the ``openai`` SDK's async client and normalizes
the streamed chunks to StreamChunk.
"""

from contextlib import contextmanager
from typing import Any, AsyncIterator

import openai
from openai import AsyncOpenAI

from ..exceptions import InvalidResponseError
from ..tools.base import BaseTool
from ..types import Message, PartialToolCall, StreamChunk
from .base import BaseLLMClient
from .errors import classify_provider_error

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterClient(BaseLLMClient):
    """Streaming chat-completion client for OpenRouter."""

    DEFAULT_API_ARGS: dict[str, Any] = {
        "temperature": 0.7,
        "max_tokens": 4096,
    }

    SUPPORTED_CONFIG_KEYS = {
        "temperature",
        "top_p",
        "top_k",
        "max_tokens",
        "stop",
        "presence_penalty",
        "frequency_penalty",
        "repetition_penalty",
        "seed",
    }

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = OPENROUTER_BASE_URL,
        default_headers: dict[str, str] | None = None,
        client_config: dict | None = None,
    ):
        """Initialize the client.

        Args:
            api_key: OpenRouter API key
            model: Model id, e.g. ``google/gemini-2.0-flash-exp:free``
            base_url: Endpoint base url
            default_headers: Extra headers (HTTP-Referer / X-Title)
            client_config: Optional request parameter overrides
        """
        super().__init__(model, client_config)
        self.client = AsyncOpenAI(
            base_url=base_url,
            api_key=api_key,
            default_headers=default_headers,
        )

    def build_request(
        self,
        messages: list[Message],
        tools: list[BaseTool] | None = None,
    ) -> dict[str, Any]:
        """Build the keyword arguments for ``chat.completions.create``."""
        api_args: dict[str, Any] = {
            "model": self.model,
            "messages": self._convert_messages(messages),
            "stream": True,
            **self.DEFAULT_API_ARGS,
        }
        if tools:
            api_args["tools"] = self._convert_tools(tools)

        # apply config overrides for supported keys
        for key, value in self.client_config.items():
            if key in self.SUPPORTED_CONFIG_KEYS:
                api_args[key] = value

        return api_args

    @contextmanager
    def _handle_api_errors(self):
        """Re-raise SDK exceptions as classified ClientErrors."""
        try:
            yield
        except openai.OpenAIError as e:
            raise classify_provider_error(e, self.model) from e

    async def _iter_chunks(
        self,
        messages: list[Message],
        tools: list[BaseTool] | None,
    ) -> AsyncIterator[StreamChunk]:
        api_args = self.build_request(messages, tools)
        with self._handle_api_errors():
            response = await self.client.chat.completions.create(**api_args)
            async for chunk in response:
                yield self._parse_stream_chunk(chunk)

    def _parse_stream_chunk(self, chunk: Any) -> StreamChunk:
        """Parse a single streaming chunk."""
        try:
            choice = chunk.choices[0] if chunk.choices else None
            if not choice:
                # usage-only and keep-alive chunks carry no choices
                return StreamChunk()

            delta = choice.delta
            partials = [
                self._parse_tool_call_from_delta(tc)
                for tc in (getattr(delta, "tool_calls", None) or [])
                if tc.index is not None
            ]
            return StreamChunk(
                delta_content=getattr(delta, "content", None),
                delta_tool_calls=partials,
                finish_reason=choice.finish_reason,
            )
        except (AttributeError, TypeError) as e:
            raise InvalidResponseError(f"Failed to parse stream chunk: {e}") from e

    def _parse_tool_call_from_delta(self, tc: Any) -> PartialToolCall:
        function = tc.function
        return PartialToolCall(
            index=tc.index,
            id=tc.id or None,
            name=function.name if function and function.name else None,
            arguments_delta=function.arguments if function and function.arguments else None,
        )
