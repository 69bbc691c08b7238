# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Tests for the append-only conversation history."""
import pytest

from datetime import timezone
from pydantic import ValidationError

from puppycoder.src.history import History
from puppycoder.src.types.llm_types import (
    SystemMessage,
    UserMessage,
    AssistantMessage,
    ToolResponseMessage,
    ToolCall,
)


def conversation():
    return [
        SystemMessage(text="You are a coding assistant"),
        UserMessage(text="List the files"),
        AssistantMessage(
            text="",
            tool_calls=(ToolCall(id="call_1", name="list_folder_content", arguments="{}"),),
        ),
        ToolResponseMessage(call_id="call_1", text="main.py"),
        AssistantMessage(text="There is one file, main.py"),
    ]


class TestHistory:

    def test_starts_empty(self):
        history = History()
        assert len(history) == 0
        assert list(history.context()) == []

    def test_context_in_append_order(self):
        history = History()
        messages = conversation()
        for message in messages:
            history.append(message)

        assert len(history) == len(messages)
        assert list(history.context()) == messages

    def test_context_is_restartable(self):
        history = History()
        history.append(UserMessage(text="hi"))

        context = history.context()
        assert list(context) == [UserMessage(text="hi")]
        assert list(context) == []
        assert list(history.context()) == [UserMessage(text="hi")]

    def test_items_are_stamped_in_utc(self):
        history = History()
        item = history.append(UserMessage(text="hi"))

        assert item.timestamp.tzinfo == timezone.utc
        assert history.items[0] is item

    def test_items_are_frozen(self):
        history = History()
        item = history.append(UserMessage(text="hi"))

        with pytest.raises(ValidationError):
            item.message = UserMessage(text="changed")
        with pytest.raises(ValidationError):
            item.message.text = "changed"

    def test_message_union_round_trip(self):
        history = History()
        for message in conversation():
            history.append(message)

        restored = History.model_validate_json(history.model_dump_json())

        assert restored == history
        assert isinstance(list(restored.context())[3], ToolResponseMessage)
