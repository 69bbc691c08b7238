# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from collections import deque
from pathlib import Path
from pydantic import BaseModel, Field, PrivateAttr

from .llm_types import Model, TokenUsage
from ..history import History

MEMORY_CAPACITY = 20


class TodoItem(BaseModel):
    name: str
    content: str
    done: bool = False


class MemoryItem(BaseModel):
    name: str
    content: str


class Project(BaseModel):
    """
    One conversation with its sandbox folder, tool set and accounting.

    The project is the unit of sandboxing: every tool call resolves paths
    against `folder_root` and only the tools named in `enabled_tools` may run.
    """

    name: str = "untitled"
    model: Model = Model.GPT_4O_MINI
    instructions: str = ""
    history: History = Field(default_factory=History)
    todo_items: list[TodoItem] = Field(default_factory=list)
    memories: list[MemoryItem] = Field(default_factory=list)
    folder_root: Path = Path("workdir")
    forbidden_files: list[str] = Field(default_factory=list)
    enabled_tools: list[str] = Field(default_factory=list)
    auto_continue: bool = False

    input_tokens: int = 0
    output_tokens: int = 0
    input_cost: float = 0.0
    output_cost: float = 0.0
    last_error: str | None = None

    # Runtime-only state, owned by the agent loop and never persisted
    _in_flight: str | None = PrivateAttr(default=None)
    _pending: deque[str] = PrivateAttr(default_factory=deque)
    _auto_rounds: int = PrivateAttr(default=0)

    @property
    def in_flight(self) -> str | None:
        return self._in_flight

    @property
    def pending_messages(self) -> list[str]:
        return list(self._pending)

    @property
    def total_cost(self) -> float:
        return self.input_cost + self.output_cost

    def open_todos(self) -> list[TodoItem]:
        return [t for t in self.todo_items if not t.done]

    def find_memory(self, name: str) -> MemoryItem | None:
        for memory in self.memories:
            if memory.name == name:
                return memory
        return None

    def record_usage(
        self, usage: TokenUsage, input_cost: float, output_cost: float
    ) -> None:
        self.input_tokens += usage.prompt_tokens
        self.output_tokens += usage.completion_tokens
        self.input_cost += input_cost
        self.output_cost += output_cost


class State(BaseModel):
    """Read-only snapshot of everything a front-end needs to render."""

    projects: list[Project] = Field(default_factory=list)
    active_project: int | None = None
    draft_message: str = ""

    @property
    def active(self) -> Project | None:
        if self.active_project is None:
            return None
        return self.projects[self.active_project]
