"""Base class for the model client.

The agent consumes a single contract: given the conversation and the tool
declarations, open a ``FragmentChannel`` that delivers the streamed turn.
Implementations only provide the raw chunk iterator; running it as a
producer task is shared here.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator

from ..logging import get_logger
from ..stream_channel import FragmentChannel, pump
from ..tools.base import BaseTool
from ..types import Message, StreamChunk

logger = get_logger(__name__)


class BaseLLMClient(ABC):
    """Abstract base class for chat-completion streaming clients.

    Each client is responsible for:
    1. Converting Message list and tool schemas to the request format
    2. Making the streaming API call
    3. Converting each raw chunk to a StreamChunk
    4. Raising classified ClientError subclasses on failure
    """

    def __init__(self, model: str, client_config: dict | None = None):
        """Initialize the client.

        Args:
            model: Model id sent with every request
            client_config: Optional request parameter overrides
                           (e.g. temperature, max_tokens)
        """
        self.model = model
        self.client_config = client_config or {}

    def open_stream(
        self,
        messages: list[Message],
        tools: list[BaseTool] | None = None,
    ) -> FragmentChannel:
        """Start one model turn and return the channel it streams into.

        Must be called from a running event loop. Errors raised by the
        transport surface when the channel is consumed.
        """
        channel = FragmentChannel()
        producer = asyncio.create_task(pump(self._iter_chunks(messages, tools), channel))
        channel.attach(producer)
        logger.debug(f"opened stream for {len(messages)} messages with model {self.model}")
        return channel

    @abstractmethod
    def _iter_chunks(
        self,
        messages: list[Message],
        tools: list[BaseTool] | None,
    ) -> AsyncIterator[StreamChunk]:
        """Yield the fragments of one streamed model turn.

        Raises:
            ClientError: Classified transport or provider failure.
        """

    def _convert_messages(self, messages: list[Message]) -> list[dict[str, Any]]:
        """Convert messages to the chat-completion wire format."""
        return [message.to_dict() for message in messages]

    def _convert_tools(self, tools: list[BaseTool]) -> list[dict[str, Any]]:
        """Convert tool definitions to function-calling schemas."""
        return [tool.to_schema() for tool in tools]
