"""Core types for the Arhan agent.

Messages are stored in the same shape the chat-completion endpoint expects,
so the persisted history can be sent to the model as-is.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any


class MessageRole(Enum):
    """Role of a message in the conversation."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(frozen=True)
class ToolCall:
    """A tool call requested by the model.

    ``raw_arguments`` is the JSON text exactly as streamed; it is only
    parsed when the call is dispatched.
    """
    id: str
    name: str
    raw_arguments: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.raw_arguments},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ToolCall":
        function = data.get("function") or {}
        return cls(
            id=data.get("id", ""),
            name=function.get("name", ""),
            raw_arguments=function.get("arguments", ""),
        )


@dataclass
class PartialToolCall:
    """A fragment of a tool call during streaming."""
    index: int
    id: str | None = None
    name: str | None = None
    arguments_delta: str | None = None


@dataclass
class StreamChunk:
    """One incremental fragment of a streamed response.

    Attributes:
        delta_content: New assistant text in this fragment
        delta_tool_calls: Partial tool call updates, keyed by their index
        finish_reason: Set on the final fragment by most providers
    """
    delta_content: str | None = None
    delta_tool_calls: list[PartialToolCall] = field(default_factory=list)
    finish_reason: str | None = None


@dataclass(frozen=True)
class Message:
    """A message in the conversation history.

    Attributes:
        role: The role of the message sender
        content: Text content of the message
        tool_calls: Tool calls requested by the model (assistant only)
        tool_call_id: ID of the tool call this message answers (tool only)
    """
    role: MessageRole
    content: str = ""
    tool_calls: tuple[ToolCall, ...] | None = None
    tool_call_id: str | None = None

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(cls, content: str, tool_calls: list[ToolCall] | None = None) -> "Message":
        return cls(
            role=MessageRole.ASSISTANT,
            content=content,
            tool_calls=tuple(tool_calls) if tool_calls else None,
        )

    @classmethod
    def tool(cls, tool_call_id: str, content: str) -> "Message":
        return cls(role=MessageRole.TOOL, content=content, tool_call_id=tool_call_id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the chat-completion wire format."""
        result: dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.tool_calls:
            result["tool_calls"] = [tc.to_dict() for tc in self.tool_calls]
        if self.tool_call_id is not None:
            result["tool_call_id"] = self.tool_call_id
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Message":
        tool_calls = data.get("tool_calls")
        return cls(
            role=MessageRole(data["role"]),
            content=data.get("content") or "",
            tool_calls=tuple(ToolCall.from_dict(tc) for tc in tool_calls) if tool_calls else None,
            tool_call_id=data.get("tool_call_id"),
        )


@dataclass(frozen=True)
class ToolResult:
    """Uniform result of a tool execution.

    ``output`` is meaningful when ``success`` is true, ``error`` otherwise.
    """
    success: bool
    output: str = ""
    error: str | None = None

    @classmethod
    def ok(cls, output: str) -> "ToolResult":
        return cls(success=True, output=output)

    @classmethod
    def fail(cls, error: str, output: str = "") -> "ToolResult":
        return cls(success=False, output=output, error=error)


@dataclass(frozen=True)
class AgentConfig:
    """Settings for one agent run; immutable once constructed."""
    model: str
    auto_approve: bool = False
    max_iterations: int = 20
    history_file: Path = Path(".arhan_history.json")

    def __post_init__(self) -> None:
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")


# ==================== agent state types ====================


class AgentState(Enum):
    """How an agent run ended."""
    COMPLETED = auto()
    BUDGET_EXHAUSTED = auto()
    ERROR = auto()


@dataclass
class AgentRunResult:
    """Outcome of ``Agent.run``.

    Attributes:
        state: How the run ended
        iterations: Number of model turns taken
        content: Last assistant text (if completed)
        error: Error message (if error state)
    """
    state: AgentState
    iterations: int
    content: str | None = None
    error: str | None = None

    @property
    def is_completed(self) -> bool:
        return self.state == AgentState.COMPLETED

    @property
    def is_budget_exhausted(self) -> bool:
        return self.state == AgentState.BUDGET_EXHAUSTED

    @property
    def is_error(self) -> bool:
        return self.state == AgentState.ERROR
