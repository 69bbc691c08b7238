# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import logging

from pydantic import Field

from .base_tool import BaseTool
from ..types.tool_types import ToolResult, NotFound
from ..types.project_types import Project, TodoItem

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


class AddNewTodo(BaseTool):
    TOOL_NAME = "add_new_todo"
    TOOL_DESCRIPTION = """Add a new todo item for yourself.

Open todo items are shown to you at the start of every request, so use them to keep track of the steps of a longer task."""

    name: str | None = Field(
        default=None,
        description="Name of the todo item. One is generated when omitted",
    )
    content: str = Field(..., description="Content of the todo item")

    async def run(self, project: Project) -> ToolResult:
        name = self.name or self._next_name(project)
        project.todo_items.append(TodoItem(name=name, content=self.content))
        return ToolResult(
            tool_name=self.TOOL_NAME, success=True, output=f"todo added: {name}"
        )

    @staticmethod
    def _next_name(project: Project) -> str:
        taken = {item.name for item in project.todo_items}
        n = len(project.todo_items) + 1
        while f"todo-{n}" in taken:
            n += 1
        return f"todo-{n}"


class CompleteTodo(BaseTool):
    TOOL_NAME = "complete_todo"
    TOOL_DESCRIPTION = "Mark a todo item as complete."

    name: str = Field(..., description="Name of the todo item you want to complete")

    async def run(self, project: Project) -> ToolResult:
        for item in project.todo_items:
            if item.name == self.name:
                item.done = True
                return ToolResult(
                    tool_name=self.TOOL_NAME,
                    success=True,
                    output=f"todo completed: {self.name}",
                )
        raise NotFound(f"no todo item named {self.name!r}")
