"""Typed tool arguments.

Tool arguments arrive as JSON text. They are parsed and validated once,
into a tagged union keyed by tool name, before any tool-specific code runs.
"""

import json
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..exceptions import MalformedToolArgumentsError, ToolNotFoundError, ToolValidationError


class _ToolArgs(BaseModel):
    model_config = ConfigDict(frozen=True)


class ReadFileArgs(_ToolArgs):
    tool: Literal["read_file"] = "read_file"
    path: str


class WriteFileArgs(_ToolArgs):
    tool: Literal["write_file"] = "write_file"
    path: str
    content: str


class ListFilesArgs(_ToolArgs):
    # the declared schema sends "true"/"false" and a numeric string;
    # pydantic's lax mode coerces both
    tool: Literal["list_files"] = "list_files"
    path: str
    recursive: bool = False
    depth: int = Field(default=2, ge=0)


class RunCommandArgs(_ToolArgs):
    tool: Literal["run_command"] = "run_command"
    command: str
    cwd: str | None = None


ToolArguments = Annotated[
    Union[ReadFileArgs, WriteFileArgs, ListFilesArgs, RunCommandArgs],
    Field(discriminator="tool"),
]

TOOL_ARGUMENT_MODELS: dict[str, type[_ToolArgs]] = {
    "read_file": ReadFileArgs,
    "write_file": WriteFileArgs,
    "list_files": ListFilesArgs,
    "run_command": RunCommandArgs,
}

_adapter: TypeAdapter = TypeAdapter(ToolArguments)


def _format_errors(error: ValidationError) -> list[str]:
    messages = []
    for err in error.errors():
        # drop the union tag from the location
        field = ".".join(str(part) for part in err["loc"][1:]) or "arguments"
        messages.append(f"{field}: {err['msg']}")
    return messages


def parse_tool_arguments(tool_name: str, raw_arguments: str) -> ToolArguments:
    """Parse and validate the raw JSON arguments of a tool call.

    Args:
        tool_name: Name of the called tool.
        raw_arguments: JSON text accumulated from the stream.

    Returns:
        The validated arguments variant for ``tool_name``.

    Raises:
        ToolNotFoundError: ``tool_name`` is not one of the known tools.
        MalformedToolArgumentsError: ``raw_arguments`` is not valid JSON.
        ToolValidationError: The JSON does not match the tool's fields.
    """
    try:
        payload = json.loads(raw_arguments)
    except json.JSONDecodeError as e:
        raise MalformedToolArgumentsError(tool_name, raw_arguments) from e

    if tool_name not in TOOL_ARGUMENT_MODELS:
        raise ToolNotFoundError(tool_name)

    if not isinstance(payload, dict):
        raise ToolValidationError(tool_name, ["arguments must be a JSON object"])

    try:
        return _adapter.validate_python({**payload, "tool": tool_name})
    except ValidationError as e:
        raise ToolValidationError(tool_name, _format_errors(e)) from e
