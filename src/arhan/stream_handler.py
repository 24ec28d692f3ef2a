"""Stream handling for model responses.

This module provides the StreamAccumulator which consumes a
``FragmentChannel`` and reconstructs the finished assistant text plus the
tool calls assembled from their fragments.
"""

from dataclasses import dataclass, field
from typing import Callable

from .stream_channel import FragmentChannel
from .types import PartialToolCall, ToolCall


@dataclass
class _ToolCallBuilder:
    id: str = ""
    name: str = ""
    arguments: str = ""

    def build(self, index: int) -> ToolCall:
        # some providers omit the id; keep the tool message linkable anyway
        return ToolCall(id=self.id or f"call_{index}", name=self.name, raw_arguments=self.arguments)


@dataclass
class AssembledTurn:
    """Result of consuming one streamed model turn.

    Attributes:
        content: Concatenation of all text fragments in arrival order
        calls_by_index: Assembled tool calls keyed by their stream index
        finish_reason: Last finish reason reported by the provider
    """
    content: str = ""
    calls_by_index: dict[int, ToolCall] = field(default_factory=dict)
    finish_reason: str | None = None

    @property
    def tool_calls(self) -> list[ToolCall]:
        """Tool calls in emission order (ascending stream index)."""
        return [self.calls_by_index[i] for i in sorted(self.calls_by_index)]

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.calls_by_index)


class StreamAccumulator:
    """Rebuilds an assistant turn from streamed fragments.

    Text is forwarded to ``on_text`` as soon as it arrives (live typing)
    while also being buffered for the final message. Tool call fragments
    are assembled per stream index:
    - the first fragment for an index opens an empty record
    - a present id or name overwrites the previous value
    - argument fragments are appended, never overwritten
    """

    def __init__(self, on_text: Callable[[str], None] | None = None):
        """Initialize the accumulator.

        Args:
            on_text: Called with every text fragment as it arrives.
        """
        self._on_text = on_text

    async def accumulate(self, channel: FragmentChannel) -> AssembledTurn:
        """Consume the channel until its completion sentinel.

        Raises:
            ClientError: If the transport failed before or during streaming.
                Nothing is returned in that case, so no partial turn can be
                committed by the caller.
        """
        text_parts: list[str] = []
        builders: dict[int, _ToolCallBuilder] = {}
        finish_reason = None

        try:
            async for chunk in channel:
                if chunk.delta_content:
                    text_parts.append(chunk.delta_content)
                    if self._on_text:
                        self._on_text(chunk.delta_content)

                for delta in chunk.delta_tool_calls:
                    self._apply_tool_call_delta(delta, builders)

                if chunk.finish_reason:
                    finish_reason = chunk.finish_reason
        finally:
            await channel.aclose()

        return AssembledTurn(
            content="".join(text_parts),
            calls_by_index={index: b.build(index) for index, b in builders.items()},
            finish_reason=finish_reason,
        )

    @staticmethod
    def _apply_tool_call_delta(delta: PartialToolCall, builders: dict[int, _ToolCallBuilder]) -> None:
        builder = builders.get(delta.index)
        if builder is None:
            builder = builders[delta.index] = _ToolCallBuilder()

        if delta.id:
            builder.id = delta.id
        # names arrive whole
        if delta.name:
            builder.name = delta.name
        # arguments arrive as incremental JSON text
        if delta.arguments_delta:
            builder.arguments += delta.arguments_delta
