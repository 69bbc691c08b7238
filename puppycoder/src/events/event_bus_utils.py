# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Terminal rendering of the events the agent loop publishes."""

from ..types.tool_types import ToolResult
from ..types.event_types import EventType, Event

TRANSCRIPT_EVENTS = (
    EventType.ASSISTANT_MESSAGE,
    EventType.TOOL_CALL,
    EventType.TOOL_RESULT,
    EventType.APPLICATION_ERROR,
)

PREVIEW_LENGTH = 80
LABEL_WIDTH = 17


def preview(text: str, length: int = PREVIEW_LENGTH) -> str:
    """A single-line preview of `text`, cut at `length` characters."""
    text = text.replace("\n", " ")
    return f"{text[:length]}..." if len(text) > length else text


def transcript_line(label: str, summary: str, detail: str = "") -> str:
    line = f"{label:<{LABEL_WIDTH}s} => {summary}"
    return f"{line} | {detail}" if detail else line


async def log_to_stdout(event: Event):
    """Print transcript events to stdout, one line per tool event."""
    if event.type == EventType.ASSISTANT_MESSAGE:
        # The reply is what the user is waiting for, so it is never cut short
        print(f"\n{event.content}\n")
        return

    label = event.type.value
    if event.type == EventType.TOOL_CALL:
        name = event.metadata.get("name", "unknown tool")
        print(transcript_line(label, name, preview(event.content)))
    elif event.type == EventType.TOOL_RESULT:
        result = event.metadata.get("tool_result")
        if not isinstance(result, ToolResult):
            return
        summary = (
            f"{result.tool_name}, success: {result.success}, "
            f"duration: {result.duration:.1f}"
        )
        print(transcript_line(label, summary, preview(event.content)))
    else:
        print(transcript_line(label, preview(event.content)))
