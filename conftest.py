# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import asyncio
import pytest

from collections import deque
from datetime import datetime

from puppycoder.src.events import EventBus
from puppycoder.src.llm.base import Completion, GenRequest
from puppycoder.src.llm.providers.base_provider import BaseProvider
from puppycoder.src.tools import tool_registry
from puppycoder.src.types.llm_types import AssistantMessage, TokenUsage
from puppycoder.src.types.project_types import Project


# Optional: Define custom command-line options for your markers
def pytest_addoption(parser):
    parser.addoption(
        "--run-llm",
        action="store_true",
        default=False,
        help="Run tests marked with 'uses_llm'",
    )
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run tests marked with 'slow'",
    )


# Skip tests based on markers unless the corresponding option is provided
def pytest_collection_modifyitems(config, items):
    if not config.getoption("--run-llm"):
        skip_llm = pytest.mark.skip(reason="need --run-llm option to run")
        for item in items:
            if "uses_llm" in item.keywords:
                item.add_marker(skip_llm)
    if not config.getoption("--run-slow"):
        skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
        for item in items:
            if "slow" in item.keywords:
                item.add_marker(skip_slow)


class ScriptedProvider(BaseProvider):
    """A provider that answers from a script instead of the network.

    Each queued reply is an AssistantMessage or an exception to raise. A reply
    may carry a gate: the completion then waits until the gate is set, which
    lets tests control the order in which concurrent requests finish.
    """

    def __init__(self, usage: TokenUsage | None = None):
        self.requests: list[GenRequest] = []
        self.replies: deque = deque()
        self.usage = usage or TokenUsage(prompt_tokens=100, completion_tokens=20)

    def reply(
        self, text: str = "", tool_calls=(), gate: asyncio.Event | None = None
    ) -> None:
        self.replies.append((AssistantMessage(text=text, tool_calls=tuple(tool_calls)), gate))

    def fail(self, error: Exception, gate: asyncio.Event | None = None) -> None:
        self.replies.append((error, gate))

    def _prepare_messages(self, messages):
        return list(messages)

    def pydantic_to_native_tool(self, tool):
        return tool.to_catalog_entry()

    async def create_completion(self, request: GenRequest) -> Completion:
        self.requests.append(request)
        reply, gate = self.replies.popleft() if self.replies else (AssistantMessage(text="ok"), None)
        start_time = datetime.now()
        if gate is not None:
            await gate.wait()
        if isinstance(reply, Exception):
            raise reply
        return Completion(
            id=f"scripted-{len(self.requests)}",
            message=reply,
            model=request.model,
            usage=self.usage,
            timing=self._get_timing_info(start_time, self.usage.completion_tokens),
        )


@pytest.fixture
def scripted_provider() -> ScriptedProvider:
    return ScriptedProvider()


@pytest.fixture
def project(tmp_path) -> Project:
    """A project with every tool enabled, sandboxed in a fresh folder."""
    root = tmp_path / "workdir"
    root.mkdir()
    return Project(
        name="test",
        folder_root=root,
        forbidden_files=[".env"],
        enabled_tools=list(tool_registry),
    )


@pytest.fixture
async def event_bus():
    """Reset the EventBus singleton between tests."""
    EventBus._instance = None
    EventBus._lock = None

    bus = await EventBus.get_instance()
    yield bus

    bus.clear()
    EventBus._instance = None
    EventBus._lock = None
