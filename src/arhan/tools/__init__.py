"""Tool implementations for the agent.

All tools inherit from BaseTool, take validated pydantic arguments and
return a ToolResult.
"""

from .arguments import (
    ListFilesArgs,
    ReadFileArgs,
    RunCommandArgs,
    ToolArguments,
    WriteFileArgs,
    parse_tool_arguments,
)
from .base import BaseTool
from .filesystem import ListFilesTool, ReadFileTool, WriteFileTool
from .system import RunCommandTool

__all__ = [
    "BaseTool",
    "ListFilesArgs",
    "ListFilesTool",
    "ReadFileArgs",
    "ReadFileTool",
    "RunCommandArgs",
    "RunCommandTool",
    "ToolArguments",
    "WriteFileArgs",
    "WriteFileTool",
    "get_default_tools",
    "parse_tool_arguments",
]


def get_default_tools() -> list[BaseTool]:
    """Get the four tools the agent declares to the model."""
    return [
        ReadFileTool(),
        WriteFileTool(),
        ListFilesTool(),
        RunCommandTool(),
    ]
