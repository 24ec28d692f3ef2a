"""Dispatching of a single tool call.

Parses the call's arguments, runs the confirmation gate, executes the tool
and appends the resulting tool message. Tool-level failures end here as
message content for the model; they never propagate to the agent loop.
"""

from enum import Enum, auto

from rich.console import Console

from .. import ui
from ..exceptions import MalformedToolArgumentsError, ToolNotFoundError, ToolValidationError
from ..logging import get_logger
from ..prompts import CANCELLED_BY_USER
from ..tools.arguments import parse_tool_arguments
from ..types import Message, ToolCall, ToolResult
from .confirmation import ConfirmationGate
from .conversation_store import ConversationStore
from .tool_executor import ToolExecutor

logger = get_logger(__name__)


class DispatchOutcome(Enum):
    """What happened to a dispatched tool call."""
    EXECUTED = auto()
    CANCELLED = auto()
    INVALID = auto()
    SKIPPED = auto()


class ToolDispatcher:
    """Executes approved tool calls and records their results."""

    def __init__(
        self,
        executor: ToolExecutor,
        gate: ConfirmationGate,
        store: ConversationStore,
        console: Console,
        verbose: bool = False,
    ):
        self.executor = executor
        self.gate = gate
        self.store = store
        self.console = console
        self.verbose = verbose

    async def dispatch(self, tool_call: ToolCall) -> DispatchOutcome:
        """Dispatch one tool call.

        Outcomes:
        - SKIPPED: arguments were not valid JSON; the call is reported and
          no tool message is appended for it
        - INVALID: unknown tool or arguments not matching the tool; the
          error is appended as the tool message
        - CANCELLED: the user declined; a cancellation message is appended
          and the tool is not run
        - EXECUTED: the tool ran; its full output (or error) is appended
        """
        name = tool_call.name
        try:
            args = parse_tool_arguments(name, tool_call.raw_arguments)
        except MalformedToolArgumentsError as e:
            # TODO: answer the call id with an error message once we know every
            # provider accepts tool messages for calls with unparsable arguments
            logger.warning(f"skipping tool call {tool_call.id}: {e}")
            self.console.print(ui.error(str(e)))
            return DispatchOutcome.SKIPPED
        except (ToolNotFoundError, ToolValidationError) as e:
            logger.warning(f"rejecting tool call {tool_call.id}: {e}")
            self.console.print(ui.tool_call_result(ToolResult.fail(str(e))))
            self.store.append(Message.tool(tool_call.id, str(e)))
            return DispatchOutcome.INVALID

        self.console.print(ui.tool_call_start(name, args))

        if self.gate.needs_confirmation(name, args) and not await self.gate.confirm(name, args):
            self.console.print(ui.cancelled())
            self.store.append(Message.tool(tool_call.id, CANCELLED_BY_USER))
            return DispatchOutcome.CANCELLED

        with self.console.status(ui.executing()):
            result = await self.executor.execute(name, args)

        self.console.print(ui.tool_call_result(result))
        if self.verbose and result.success and result.output:
            self.console.print(ui.output_preview(result.output))
        content = result.output if result.success else (result.error or "Tool execution failed")
        self.store.append(Message.tool(tool_call.id, content))
        return DispatchOutcome.EXECUTED
