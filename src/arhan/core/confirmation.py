"""Human confirmation for side-effecting tool calls.

Policy (evaluated in order):

=============  ===========================================  ============
tool           condition                                    confirmation
=============  ===========================================  ============
write_file     always                                       required
run_command    always                                       required
run_command    command contains ``rm ``/delete/remove        required
read_file      never                                        not required
list_files     never                                        not required
=============  ===========================================  ============

Destructive commands get no stronger gate than other commands; they are
only flagged in the question shown to the user.
"""

from typing import Awaitable, Callable

from rich.console import Console
from rich.prompt import Confirm

from .. import ui
from ..logging import get_logger
from ..tools.arguments import RunCommandArgs, ToolArguments

logger = get_logger(__name__)

# (question, suggested answer) -> approved?
ConfirmCallback = Callable[[str, bool], Awaitable[bool]]

ALWAYS_CONFIRM = frozenset({"write_file", "run_command"})
READ_ONLY_TOOLS = frozenset({"read_file", "list_files"})
DESTRUCTIVE_KEYWORDS = ("rm ", "delete", "remove")


def is_destructive_command(command: str) -> bool:
    lowered = command.lower()
    return any(keyword in lowered for keyword in DESTRUCTIVE_KEYWORDS)


def needs_confirmation(tool_name: str, args: ToolArguments | None = None) -> bool:
    """Whether a call needs explicit approval; depends only on its inputs."""
    if tool_name in ALWAYS_CONFIRM:
        return True
    if isinstance(args, RunCommandArgs) and is_destructive_command(args.command):
        return True
    return False


class ConfirmationGate:
    """Decides whether a tool call needs approval and obtains it.

    With ``auto_approve`` every call is approved without asking. Otherwise
    the ``ask`` callback is awaited; by default it prompts on the terminal.
    """

    def __init__(
        self,
        auto_approve: bool = False,
        ask: ConfirmCallback | None = None,
        console: Console | None = None,
    ):
        """Initialize the gate.

        Args:
            auto_approve: Approve every call without prompting.
            ask: Coroutine function receiving the question and the suggested
                answer and returning the user's decision.
            console: Console used by the default terminal prompt.
        """
        self.auto_approve = auto_approve
        self.console = console or Console()
        self._ask = ask or self._ask_terminal

    def needs_confirmation(self, tool_name: str, args: ToolArguments | None = None) -> bool:
        return needs_confirmation(tool_name, args)

    async def confirm(self, tool_name: str, args: ToolArguments) -> bool:
        """Obtain approval for one call.

        Returns:
            True if the call may run.
        """
        if self.auto_approve:
            return True

        destructive = isinstance(args, RunCommandArgs) and is_destructive_command(args.command)
        if destructive:
            logger.warning(f"destructive command requested: {args.command!r}")

        question = ui.confirmation(tool_name, args, destructive=destructive)
        approved = await self._ask(question, tool_name in READ_ONLY_TOOLS)
        logger.info(f"{tool_name} {'approved' if approved else 'rejected'} by user")
        return approved

    async def _ask_terminal(self, question: str, default: bool) -> bool:
        # synchronous prompt; no other task runs while a call awaits approval
        try:
            return Confirm.ask(question, default=default, console=self.console)
        except EOFError:
            return False
