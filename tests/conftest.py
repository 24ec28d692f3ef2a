"""Shared test fixtures and configuration."""

import io
import json
import logging
from typing import AsyncIterator

import pytest
from rich.console import Console

from arhan.clients.base import BaseLLMClient
from arhan.core.confirmation import ConfirmationGate
from arhan.core.conversation_store import ConversationStore
from arhan.logging import LOGGER_NAME
from arhan.tools.base import BaseTool
from arhan.types import AgentConfig, Message, PartialToolCall, StreamChunk


def text_turn(*fragments: str) -> list[StreamChunk]:
    """A scripted model turn that only streams text."""
    chunks = [StreamChunk(delta_content=fragment) for fragment in fragments]
    chunks.append(StreamChunk(finish_reason="stop"))
    return chunks


def tool_turn(name: str, arguments: dict | str, call_id: str = "call_1", index: int = 0) -> list[StreamChunk]:
    """A scripted model turn requesting one tool call, split into fragments."""
    raw = arguments if isinstance(arguments, str) else json.dumps(arguments)
    middle = len(raw) // 2
    return [
        StreamChunk(delta_tool_calls=[PartialToolCall(index=index, id=call_id, name=name)]),
        StreamChunk(delta_tool_calls=[PartialToolCall(index=index, arguments_delta=raw[:middle])]),
        StreamChunk(delta_tool_calls=[PartialToolCall(index=index, arguments_delta=raw[middle:])]),
        StreamChunk(finish_reason="tool_calls"),
    ]


class ScriptedClient(BaseLLMClient):
    """Fake model client replaying scripted turns.

    Each entry of ``turns`` is either a list of StreamChunks or an exception
    raised when that turn is requested. Once the script is used up the last
    entry is repeated.
    """

    def __init__(self, turns: list):
        super().__init__(model="test/model")
        self.turns = list(turns)
        self.requests: list[list[Message]] = []

    async def _iter_chunks(self, messages, tools) -> AsyncIterator[StreamChunk]:
        self.requests.append(list(messages))
        index = min(len(self.requests), len(self.turns)) - 1
        turn = self.turns[index]
        if isinstance(turn, Exception):
            raise turn
        for chunk in turn:
            yield chunk


class RecordingTool(BaseTool):
    """Stand-in for a real tool that records its calls."""

    def __init__(self, name: str, result):
        self._name = name
        self.result = result
        self.calls = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return f"Recording {self._name}"

    @property
    def parameters(self) -> dict:
        return {"type": "object", "properties": {}}

    async def execute(self, args):
        self.calls.append(args)
        return self.result


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging so tests don't leak them."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def console():
    """A console writing into a buffer instead of the terminal."""
    return Console(file=io.StringIO(), width=120, color_system=None)


@pytest.fixture
def history_file(tmp_path):
    return tmp_path / "history.json"


@pytest.fixture
def store(history_file):
    return ConversationStore(history_file)


@pytest.fixture
def agent_config(history_file):
    return AgentConfig(model="test/model", history_file=history_file)


def make_ask(answer: bool):
    """Confirmation callback that always gives ``answer`` and records questions."""
    questions = []

    async def ask(question: str, default: bool) -> bool:
        questions.append((question, default))
        return answer

    ask.questions = questions
    return ask


@pytest.fixture
def approve_gate(console):
    return ConfirmationGate(ask=make_ask(True), console=console)


@pytest.fixture
def deny_gate(console):
    return ConfirmationGate(ask=make_ask(False), console=console)
