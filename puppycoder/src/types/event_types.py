# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from enum import Enum
from datetime import datetime
from dataclasses import field, dataclass


class EventType(Enum):
    # Input events, posted by a front-end for the agent loop to handle
    SEND_MESSAGE = "send_message"  # content: text, or "" to send the draft
    SELECT_PROJECT = "select_project"  # metadata: index
    TOGGLE_TOOL = "toggle_tool"  # content: tool name
    EDIT_FIELD = "edit_field"  # metadata: field, value
    NEW_PROJECT = "new_project"  # content: optional name
    SAVE_PROJECT = "save_project"
    LOAD_PROJECT = "load_project"  # content: path of a saved project
    QUIT = "quit"

    # Output events, published by the agent loop to subscribers
    STATE_CHANGED = "state_changed"  # metadata: state
    ASSISTANT_MESSAGE = "assistant_message"
    TOOL_CALL = "tool_call"
    TOOL_RESULT = "tool_result"
    APPLICATION_ERROR = "application_error"


INPUT_EVENTS = frozenset(
    {
        EventType.SEND_MESSAGE,
        EventType.SELECT_PROJECT,
        EventType.TOGGLE_TOOL,
        EventType.EDIT_FIELD,
        EventType.NEW_PROJECT,
        EventType.SAVE_PROJECT,
        EventType.LOAD_PROJECT,
        EventType.QUIT,
    }
)

EDITABLE_FIELDS = frozenset(
    {"message", "project_name", "instructions", "model", "folder_root", "auto_continue"}
)


@dataclass
class Event:
    """Base class for all events in the stream"""

    type: EventType
    content: str = ""
    metadata: dict = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)
