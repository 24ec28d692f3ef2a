"""Conversation history and its persistence.

The store is an append-only, ordered list of messages: it is the literal
context sent to the model. It is saved as JSON after every agent iteration.
"""

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from ..logging import get_logger
from ..types import Message, MessageRole

logger = get_logger(__name__)


class ConversationStore:
    """Append-only message list backed by a JSON history file.

    File format::

        {"messages": [...chat-completion messages...], "timestamp": "<ISO-8601>"}
    """

    def __init__(self, path: str | Path):
        """Initialize an empty store.

        Args:
            path: History file location; created on first save.
        """
        self.path = Path(path)
        self._messages: list[Message] = []

    @property
    def messages(self) -> list[Message]:
        """Snapshot of the history, oldest first."""
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def append(self, message: Message) -> None:
        """Append a message.

        Raises:
            ValueError: If a tool message does not answer a tool call of the
                latest assistant message.
        """
        if message.role == MessageRole.TOOL:
            self._check_tool_linkage(message)
        self._messages.append(message)

    def _check_tool_linkage(self, message: Message) -> None:
        for previous in reversed(self._messages):
            if previous.role == MessageRole.TOOL:
                continue
            if previous.role == MessageRole.ASSISTANT and previous.tool_calls:
                if any(tc.id == message.tool_call_id for tc in previous.tool_calls):
                    return
            break
        raise ValueError(
            f"tool message {message.tool_call_id!r} does not answer the preceding assistant message"
        )

    def reset(self, messages: list[Message]) -> None:
        """Replace the in-memory history; the file is untouched until the next save."""
        self._messages = []
        for message in messages:
            self.append(message)

    def load(self) -> None:
        """Load history from disk.

        A missing or malformed file starts a fresh, empty conversation.
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._messages = [Message.from_dict(m) for m in data.get("messages") or []]
        except FileNotFoundError:
            logger.debug(f"no history at {self.path}, starting fresh")
            self._messages = []
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"ignoring unreadable history {self.path}: {e}")
            self._messages = []
        else:
            logger.debug(f"loaded {len(self._messages)} messages from {self.path}")

    def save(self) -> None:
        """Write the full history to disk.

        The file is replaced atomically so an interrupted save never leaves
        a truncated history behind. Failures are logged, not raised.
        """
        payload = {
            "messages": [m.to_dict() for m in self._messages],
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error(f"failed to save conversation history to {self.path}: {e}")

    def clear(self) -> None:
        """Discard every message and delete the history file."""
        self._messages = []
        self.path.unlink(missing_ok=True)
        logger.info(f"cleared conversation history at {self.path}")
