"""Tests for the conversation store."""

import json

import pytest

from arhan.core.conversation_store import ConversationStore
from arhan.types import Message, MessageRole, ToolCall


@pytest.fixture
def conversation():
    call = ToolCall(id="call_1", name="read_file", raw_arguments='{"path": "a.txt"}')
    return [
        Message.system("You are Arhan"),
        Message.user("read a.txt"),
        Message.assistant("Reading it.", [call]),
        Message.tool("call_1", "file contents"),
        Message.assistant("It says: file contents"),
    ]


class TestConversationStore:
    """Tests for ConversationStore."""

    def test_save_then_load_round_trip(self, history_file, conversation):
        store = ConversationStore(history_file)
        for message in conversation:
            store.append(message)
        store.save()

        reloaded = ConversationStore(history_file)
        reloaded.load()

        assert reloaded.messages == conversation

    def test_file_format(self, history_file, conversation):
        store = ConversationStore(history_file)
        for message in conversation:
            store.append(message)
        store.save()

        data = json.loads(history_file.read_text())
        assert set(data) == {"messages", "timestamp"}
        assert data["messages"][2]["tool_calls"][0] == {
            "id": "call_1",
            "type": "function",
            "function": {"name": "read_file", "arguments": '{"path": "a.txt"}'},
        }
        assert data["messages"][3]["tool_call_id"] == "call_1"
        assert "T" in data["timestamp"]

    def test_missing_file_starts_empty(self, history_file):
        store = ConversationStore(history_file)
        store.load()

        assert store.messages == []

    @pytest.mark.parametrize("content", ["not json", "[1, 2]", '{"messages": [{"role": "robot"}]}'])
    def test_malformed_file_starts_empty(self, history_file, content):
        history_file.write_text(content)
        store = ConversationStore(history_file)
        store.load()

        assert len(store) == 0

    def test_save_leaves_no_temp_files(self, history_file, conversation):
        store = ConversationStore(history_file)
        store.append(conversation[0])
        store.save()
        store.save()

        assert [p.name for p in history_file.parent.iterdir()] == [history_file.name]

    def test_save_creates_parent_directory(self, tmp_path):
        store = ConversationStore(tmp_path / "nested" / "history.json")
        store.append(Message.user("hi"))
        store.save()

        assert (tmp_path / "nested" / "history.json").exists()

    def test_clear_removes_messages_and_file(self, history_file, conversation):
        store = ConversationStore(history_file)
        store.append(conversation[0])
        store.save()

        store.clear()

        assert store.messages == []
        assert not history_file.exists()
        # clearing twice is harmless
        store.clear()

    def test_messages_is_a_snapshot(self, history_file):
        store = ConversationStore(history_file)
        store.append(Message.user("hi"))

        store.messages.append(Message.user("sneaky"))

        assert len(store) == 1

    def test_tool_message_must_answer_latest_assistant(self, history_file):
        store = ConversationStore(history_file)
        store.append(Message.user("hi"))

        with pytest.raises(ValueError):
            store.append(Message.tool("call_1", "orphan"))

        store.append(Message.assistant("", [ToolCall(id="call_1", name="read_file")]))
        with pytest.raises(ValueError):
            store.append(Message.tool("call_2", "wrong id"))

    def test_several_tool_messages_for_one_assistant(self, history_file):
        store = ConversationStore(history_file)
        store.append(Message.assistant("", [
            ToolCall(id="a", name="read_file"),
            ToolCall(id="b", name="list_files"),
        ]))
        store.append(Message.tool("a", "1"))
        store.append(Message.tool("b", "2"))

        assert [m.role for m in store.messages] == [MessageRole.ASSISTANT, MessageRole.TOOL, MessageRole.TOOL]

    def test_reset_keeps_file_until_save(self, history_file, conversation):
        store = ConversationStore(history_file)
        store.append(Message.user("old"))
        store.save()

        store.reset(conversation)

        assert store.messages == conversation
        assert "old" in history_file.read_text()
