"""Tool execution by name.

The executor owns the tool registry and turns every outcome, including an
unknown tool name or an unexpected exception inside a tool, into a
ToolResult.
"""

from ..logging import get_logger
from ..tools.arguments import ToolArguments
from ..tools.base import BaseTool
from ..types import ToolResult

logger = get_logger(__name__)


class ToolExecutor:
    """Runs validated tool calls against the registered tools."""

    def __init__(self, tools: list[BaseTool]):
        """Initialize the tool executor.

        Args:
            tools: Tools to register, keyed by their ``name``.
        """
        self.tools: dict[str, BaseTool] = {tool.name: tool for tool in tools}

    @property
    def tool_list(self) -> list[BaseTool]:
        return list(self.tools.values())

    def get_tool(self, name: str) -> BaseTool | None:
        return self.tools.get(name)

    async def execute(self, name: str, args: ToolArguments) -> ToolResult:
        """Execute the named tool.

        Args:
            name: The tool name.
            args: Arguments already validated for that tool.

        Returns:
            The tool's result; never raises for tool-level failures.
        """
        tool = self.get_tool(name)
        if tool is None:
            return ToolResult.fail(f"Unknown tool: {name}")

        try:
            result = await tool.execute(args)
        except Exception as e:
            logger.exception(f"tool {name} raised")
            return ToolResult.fail(f"Tool execution failed: {e}")

        logger.debug(f"tool {name} finished (success={result.success})")
        return result
