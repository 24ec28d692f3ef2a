"""Arhan - an autonomous coding agent for the terminal.

This package drives a streaming tool-use loop against an OpenRouter model
with four local tools: read_file, write_file, list_files and run_command.
"""

__version__ = "1.0.0"

from .agent import Agent
from .exceptions import (
    AgentError,
    ClientError,
    ConfigurationError,
    ToolError,
)
from .types import (
    AgentConfig,
    AgentRunResult,
    AgentState,
    Message,
    MessageRole,
    StreamChunk,
    ToolCall,
    ToolResult,
)

__all__ = [
    "__version__",
    # main agent
    "Agent",
    # types
    "AgentConfig",
    "AgentRunResult",
    "AgentState",
    "Message",
    "MessageRole",
    "StreamChunk",
    "ToolCall",
    "ToolResult",
    # exceptions
    "AgentError",
    "ClientError",
    "ConfigurationError",
    "ToolError",
]
