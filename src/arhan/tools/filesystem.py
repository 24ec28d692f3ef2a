"""Filesystem tools: read_file, write_file and list_files.

Paths are used as given, relative to the process working directory.
"""

from pathlib import Path
from typing import Any

from ..types import ToolResult
from .arguments import ListFilesArgs, ReadFileArgs, WriteFileArgs
from .base import BaseTool

MAX_FILE_SIZE = 1024 * 1024  # 1MB
DIR_MARKER = "📁"
FILE_MARKER = "📄"


class ReadFileTool(BaseTool[ReadFileArgs]):
    """Read file contents, refusing files above MAX_FILE_SIZE."""

    @property
    def name(self) -> str:
        return "read_file"

    @property
    def description(self) -> str:
        return "Read the contents of a file. Warns if file is larger than 1MB."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "The path to the file to read (relative or absolute)",
                }
            },
            "required": ["path"],
        }

    async def execute(self, args: ReadFileArgs) -> ToolResult:
        try:
            path = Path(args.path)
            size = path.stat().st_size
            if size > MAX_FILE_SIZE:
                return ToolResult.fail(
                    f"Warning: File size is {size / 1024 / 1024:.2f}MB, which exceeds 1MB. "
                    "Consider reading a smaller file."
                )
            return ToolResult.ok(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            return ToolResult.fail(f"Failed to read file: {e}")


class WriteFileTool(BaseTool[WriteFileArgs]):
    """Create or overwrite a file, creating parent directories."""

    @property
    def name(self) -> str:
        return "write_file"

    @property
    def description(self) -> str:
        return "Create or overwrite a file with the given content. Creates directories if needed."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "The path to the file to write (relative or absolute)",
                },
                "content": {
                    "type": "string",
                    "description": "The content to write to the file",
                },
            },
            "required": ["path", "content"],
        }

    async def execute(self, args: WriteFileArgs) -> ToolResult:
        try:
            path = Path(args.path)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(args.content, encoding="utf-8")
            return ToolResult.ok(f"Successfully wrote to {args.path}")
        except OSError as e:
            return ToolResult.fail(f"Failed to write file: {e}")


class ListFilesTool(BaseTool[ListFilesArgs]):
    """List directory entries, optionally recursing up to a depth."""

    @property
    def name(self) -> str:
        return "list_files"

    @property
    def description(self) -> str:
        return "List files and directories in a given path. Can recursively list subdirectories."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "The directory path to list (relative or absolute)",
                },
                "recursive": {
                    "type": "string",
                    "description": "Whether to list recursively",
                    "enum": ["true", "false"],
                },
                "depth": {
                    "type": "string",
                    "description": "Maximum depth for recursive listing (default: 2)",
                },
            },
            "required": ["path"],
        }

    async def execute(self, args: ListFilesArgs) -> ToolResult:
        try:
            lines = self._list(Path(args.path), args.recursive, args.depth, 0)
        except OSError as e:
            return ToolResult.fail(f"Failed to list files: {e}")
        return ToolResult.ok("".join(lines) or "Empty directory")

    def _list(self, directory: Path, recursive: bool, max_depth: int, depth: int) -> list[str]:
        lines = []
        indent = "  " * depth
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            is_dir = entry.is_dir()
            lines.append(f"{indent}{DIR_MARKER if is_dir else FILE_MARKER} {entry.name}\n")

            if recursive and is_dir and depth < max_depth:
                try:
                    lines.extend(self._list(entry, recursive, max_depth, depth + 1))
                except OSError:
                    # unreadable subdirectories are listed but not expanded
                    continue
        return lines
