from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from ..types import ToolResult

ArgsT = TypeVar("ArgsT", bound=BaseModel)


class BaseTool(ABC, Generic[ArgsT]):
    """Abstract base class for all tools.

    Tools receive arguments already validated into their pydantic model and
    report every failure through ``ToolResult``; ``execute`` never raises
    for an ordinary I/O or process error.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the tool name."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Return the tool description."""

    @property
    @abstractmethod
    def parameters(self) -> dict[str, Any]:
        """Return the JSON schema for tool parameters."""

    @abstractmethod
    async def execute(self, args: ArgsT) -> ToolResult:
        """Execute the tool with validated arguments."""

    def to_schema(self) -> dict[str, Any]:
        """Return the tool schema for LLM function calling."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }
