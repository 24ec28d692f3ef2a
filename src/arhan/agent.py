"""Main agent implementation.

The Agent drives one conversation between the user, the model and the four
local tools. Each iteration streams one model turn, appends it to the
conversation store, dispatches any tool calls in emission order and saves
the history, until the model answers without acting or the iteration
budget runs out.
"""

from rich.console import Console

from . import ui
from .clients.base import BaseLLMClient
from .core.confirmation import ConfirmationGate
from .core.conversation_store import ConversationStore
from .core.dispatcher import ToolDispatcher
from .core.narration import NarrationPolicy, PhraseNarrationPolicy
from .core.tool_executor import ToolExecutor
from .exceptions import ClientError
from .logging import get_logger
from .prompts import NARRATION_CORRECTION, format_system_prompt
from .stream_handler import AssembledTurn, StreamAccumulator
from .tools.base import BaseTool
from .types import AgentConfig, AgentRunResult, AgentState, Message, MessageRole

logger = get_logger(__name__)


class Agent:
    """Agent that coordinates between the model and the tools.

    The agent owns the iteration budget and the tool-use loop:
    1. Send the conversation to the model and stream its turn
    2. If the model requests tool calls, dispatch them one by one
    3. If it only narrates tool use, ask it to act and go again
    4. Otherwise the turn is the final answer
    """

    def __init__(
        self,
        client: BaseLLMClient,
        config: AgentConfig,
        tools: list[BaseTool],
        store: ConversationStore | None = None,
        gate: ConfirmationGate | None = None,
        console: Console | None = None,
        narration_policy: NarrationPolicy | None = None,
        verbose: bool = False,
    ):
        """Initialize the agent.

        Args:
            client: Streaming chat-completion client
            config: Model, approval mode, iteration budget and history file
            tools: Tools declared to the model
            store: Conversation store; defaults to one on ``config.history_file``
            gate: Confirmation gate; defaults to a terminal prompt honoring
                  ``config.auto_approve``
            console: Console all output goes to
            narration_policy: Predicate telling whether finished assistant
                              text describes a tool call instead of making one
            verbose: Also print a truncated preview of every tool output
        """
        self.client = client
        self.config = config
        self.console = console or Console()
        self.store = store or ConversationStore(config.history_file)
        self.executor = ToolExecutor(tools)
        self.gate = gate or ConfirmationGate(auto_approve=config.auto_approve, console=self.console)
        self.dispatcher = ToolDispatcher(
            self.executor, self.gate, self.store, self.console, verbose=verbose
        )
        self.narration_policy = narration_policy or PhraseNarrationPolicy()

    def initialize(self) -> None:
        """Load the saved conversation and make sure it opens with the system prompt."""
        self.store.load()
        messages = self.store.messages
        if messages and messages[0].role == MessageRole.SYSTEM:
            return

        system = Message.system(format_system_prompt(
            [(tool.name, tool.description) for tool in self.executor.tool_list]
        ))
        self.store.reset([system, *messages])

    def clear_history(self) -> None:
        """Forget the conversation and start over from the system prompt."""
        self.store.clear()
        self.initialize()

    async def run(self, user_message: str) -> AgentRunResult:
        """Run the tool-use loop for one user message.

        Args:
            user_message: The user's task or reply

        Returns:
            AgentRunResult telling whether the model finished, the budget ran
            out, or the model request failed

        History is saved after every iteration that finishes or fails on a
        model request. Any other exception, an interrupt included, discards
        the iteration in progress and propagates.
        """
        self.store.append(Message.user(user_message))
        limit = self.config.max_iterations
        tool_calls_made = 0
        iterations = 0
        content = None

        while iterations < limit:
            iterations += 1
            logger.debug(f"iteration {iterations}/{limit}")
            checkpoint = self.store.messages
            try:
                turn = await self._request_turn()
                content = turn.content
                self.store.append(Message.assistant(turn.content, turn.tool_calls or None))

                if turn.has_tool_calls:
                    for tool_call in turn.tool_calls:
                        await self.dispatcher.dispatch(tool_call)
                    tool_calls_made += len(turn.tool_calls)
                    finished = False
                elif tool_calls_made == 0 and self.narration_policy(turn.content):
                    logger.info("model narrated a tool call without making one")
                    self.console.print(ui.warning("No tool was called, asking the model to act"))
                    self.store.append(Message.user(NARRATION_CORRECTION))
                    finished = False
                else:
                    finished = True
            except ClientError as e:
                logger.warning(f"model request failed: {e}")
                self.console.print(ui.error(str(e)))
                self.store.save()
                return AgentRunResult(
                    state=AgentState.ERROR, iterations=iterations, error=str(e)
                )
            except BaseException:
                # an interrupted iteration may leave tool calls unanswered
                logger.debug(f"iteration {iterations} interrupted, rolling back")
                self.store.reset(checkpoint)
                raise

            self.store.save()
            if finished:
                return AgentRunResult(
                    state=AgentState.COMPLETED, iterations=iterations, content=content
                )

        logger.info(f"iteration budget of {limit} exhausted")
        self.console.print(ui.max_iterations(limit))
        return AgentRunResult(
            state=AgentState.BUDGET_EXHAUSTED, iterations=iterations, content=content
        )

    async def _request_turn(self) -> AssembledTurn:
        """Stream one model turn, showing a spinner until the first text arrives."""
        status = self.console.status(ui.thinking())
        status.start()
        printed = False

        def on_text(fragment: str) -> None:
            nonlocal printed
            if not printed:
                status.stop()
                self.console.print()
                printed = True
            self.console.print(ui.stream_text(fragment), end="")

        try:
            channel = self.client.open_stream(self.store.messages, self.executor.tool_list)
            turn = await StreamAccumulator(on_text=on_text).accumulate(channel)
        finally:
            status.stop()

        if printed:
            self.console.print()
        logger.debug(
            f"turn finished ({turn.finish_reason}): {len(turn.content)} chars, "
            f"{len(turn.tool_calls)} tool calls"
        )
        return turn
