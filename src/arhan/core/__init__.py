"""Core agent components.

- ConversationStore: Ordered message history persisted as JSON
- ConfirmationGate: Human approval for side-effecting tool calls
- ToolExecutor: Runs validated tool calls by name
- ToolDispatcher: Parses, gates, executes and records one tool call
- PhraseNarrationPolicy: Detects tool use described instead of made
"""

from .confirmation import ConfirmationGate, needs_confirmation
from .conversation_store import ConversationStore
from .dispatcher import DispatchOutcome, ToolDispatcher
from .narration import NarrationPolicy, PhraseNarrationPolicy
from .tool_executor import ToolExecutor

__all__ = [
    "ConfirmationGate",
    "ConversationStore",
    "DispatchOutcome",
    "NarrationPolicy",
    "PhraseNarrationPolicy",
    "ToolDispatcher",
    "ToolExecutor",
    "needs_confirmation",
]
