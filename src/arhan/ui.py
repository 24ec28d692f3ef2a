"""Terminal presentation.

Every function here is pure: it takes explicit data and returns a string
of Rich console markup. Callers decide where to print it.
"""

from rich.markup import escape

from .tools.arguments import ListFilesArgs, RunCommandArgs, ToolArguments
from .types import ToolResult

ACCENT = "#FF6B4A"
TEXT = "#E8E8E8"
TEXT_DIM = "#808080"
TEXT_VERY_DIM = "#505050"
SUCCESS = "#5ECC8A"
ERROR = "#FF5555"
WARNING = "#FFB84A"
KEYWORD = "#FF8C66"

RULE = "─" * 60
MAX_PREVIEW_OUTPUT = 500


def _style(style: str, text: str) -> str:
    return f"[{style}]{escape(text)}[/]"


def format_tool_name(name: str) -> str:
    """``run_command`` -> ``Run Command``."""
    return " ".join(word.capitalize() for word in name.split("_"))


def _shorten(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 3] + "..."


def truncate_output(output: str, max_length: int = MAX_PREVIEW_OUTPUT) -> str:
    """Shorten a copy of tool output for display."""
    if len(output) <= max_length:
        return output
    return output[:max_length] + "\n... (output truncated)"


def welcome() -> str:
    return f"\n{_style(ACCENT, '* ')}{_style(TEXT, 'Welcome to lowkeyarhan!')}\n"


def info(message: str) -> str:
    return _style(TEXT_DIM, f"  {message}")


def task_start(task: str) -> str:
    return "\n".join([
        _style(ACCENT, "* ") + _style(KEYWORD, "Task"),
        _style(TEXT_VERY_DIM, f"  {RULE}"),
        _style(TEXT, f"  {task}"),
        _style(TEXT_VERY_DIM, f"  {RULE}"),
        "",
    ])


def thinking() -> str:
    return _style("blue", "Arhan is thinking...")


def executing() -> str:
    return _style(TEXT_DIM, "Executing...")


def stream_text(fragment: str) -> str:
    return _style(TEXT, fragment)


def _preview(args: ToolArguments, limit: int) -> str:
    if isinstance(args, RunCommandArgs):
        return _shorten(args.command, limit)
    if isinstance(args, ListFilesArgs) and args.recursive:
        return f"{args.path} (recursive)"
    return getattr(args, "path", "")


def tool_call_start(tool_name: str, args: ToolArguments) -> str:
    preview = _preview(args, 50)
    line = _style(ACCENT, "* ") + _style(KEYWORD, format_tool_name(tool_name))
    if preview:
        line += _style(TEXT_DIM, f" → {preview}")
    return line


def summarize_output(output: str) -> str:
    """One-line summary of tool output: entry counts, line count or size."""
    if not output:
        return ""

    if "📁" in output or "📄" in output:
        lines = [line for line in output.split("\n") if line.strip()]
        file_count = sum(1 for line in lines if "📄" in line)
        dir_count = sum(1 for line in lines if "📁" in line)
        parts = []
        if file_count:
            parts.append(f"{file_count} file{'' if file_count == 1 else 's'}")
        if dir_count:
            parts.append(f"{dir_count} dir{'' if dir_count == 1 else 's'}")
        if parts:
            return ", ".join(parts)

    if "\n" in output:
        line_count = len(output.split("\n"))
        return f"{line_count} lines"

    if len(output) < 200:
        return f"{len(output)} chars"

    return "Content retrieved"


def tool_call_result(result: ToolResult) -> str:
    if not result.success:
        return _style(ERROR, "  ✗ ") + _style(TEXT, result.error or "Failed")
    summary = summarize_output(result.output)
    line = _style(SUCCESS, "  ✓")
    if summary:
        line += " " + _style(TEXT_DIM, summary)
    return line


def output_preview(output: str) -> str:
    indented = "\n".join(f"    {line}" for line in truncate_output(output).split("\n"))
    return _style(TEXT_DIM, indented)


def confirmation(tool_name: str, args: ToolArguments, destructive: bool = False) -> str:
    preview = _preview(args, 40)
    line = _style(WARNING, "  ▸ ") + _style(KEYWORD, format_tool_name(tool_name))
    if preview:
        line += _style(TEXT_DIM, f" - {preview}")
    if destructive:
        line += _style(f"bold {ERROR}", " (destructive)")
    return line + _style(WARNING, " → Proceed?")


def cancelled() -> str:
    return _style(TEXT_DIM, "  ✗ Cancelled")


def complete() -> str:
    return "\n".join([
        "",
        _style(ACCENT, "* ") + _style(KEYWORD, "Complete"),
        _style(SUCCESS, "  ✓ Task completed"),
        "",
    ])


def error(message: str) -> str:
    first, *rest = message.split("\n")
    lines = ["", _style(ERROR, "  ✗ Error: ") + _style(TEXT, first)]
    lines.extend(_style(TEXT, f"    {line}") for line in rest)
    lines.append("")
    return "\n".join(lines)


def warning(message: str) -> str:
    return _style(WARNING, f"  ⚠ {message}")


def max_iterations(limit: int) -> str:
    return f"\n{_style(WARNING, f'  ⚠ Maximum iterations reached ({limit})')}\n"


def history_cleared() -> str:
    return _style(SUCCESS, "  ✓ Conversation history cleared")


def goodbye() -> str:
    return f"\n{_style(TEXT_DIM, '  Exiting. Goodbye!')}\n"


def missing_api_key() -> str:
    return "\n".join([
        _style(ERROR, "✘ Error: OPENROUTER_API_KEY environment variable is required"),
        "",
        _style(WARNING, "Get your API key from: https://openrouter.ai/keys"),
        _style(TEXT_DIM, "Then set it in your .env file or export it:"),
        _style(TEXT_DIM, "  export OPENROUTER_API_KEY=your_key_here"),
    ])


def prompt() -> str:
    return _style(ACCENT, "> ")
