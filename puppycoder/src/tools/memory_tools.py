# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import logging

from pydantic import Field

from .base_tool import BaseTool
from ..types.tool_types import ToolResult, NotFound
from ..types.project_types import Project, MemoryItem, MEMORY_CAPACITY

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


class AddMemory(BaseTool):
    TOOL_NAME = "add_memory"
    TOOL_DESCRIPTION = f"""Add a memory which is always available to you.

You can only keep {MEMORY_CAPACITY} memories at a time; when full, forget one with the forget_memory tool before adding another. Adding a memory under an existing name replaces its content."""

    name: str | None = Field(
        default=None,
        description="Name of the memory. One is generated when omitted",
    )
    content: str = Field(..., description="Content you want to remember")

    async def run(self, project: Project) -> ToolResult:
        if self.name is not None:
            existing = project.find_memory(self.name)
            if existing is not None:
                existing.content = self.content
                return ToolResult(
                    tool_name=self.TOOL_NAME,
                    success=True,
                    output=f"memory updated: {self.name}",
                )

        if len(project.memories) >= MEMORY_CAPACITY:
            logger.info(f"Memory store of project {project.name} is full")
            return ToolResult(
                tool_name=self.TOOL_NAME,
                success=True,
                output=(
                    f"memory not added: all {MEMORY_CAPACITY} memory slots are in use. "
                    "Forget a memory first to free up space."
                ),
            )

        name = self.name or self._next_name(project)
        project.memories.append(MemoryItem(name=name, content=self.content))
        return ToolResult(
            tool_name=self.TOOL_NAME, success=True, output=f"memory added: {name}"
        )

    @staticmethod
    def _next_name(project: Project) -> str:
        n = len(project.memories) + 1
        while project.find_memory(f"memory-{n}") is not None:
            n += 1
        return f"memory-{n}"


class ForgetMemory(BaseTool):
    TOOL_NAME = "forget_memory"
    TOOL_DESCRIPTION = "Forget a memory to free up space for new ones."

    name: str = Field(..., description="Name of the memory you want to forget")

    async def run(self, project: Project) -> ToolResult:
        memory = project.find_memory(self.name)
        if memory is None:
            raise NotFound(f"no memory named {self.name!r}")
        project.memories.remove(memory)
        return ToolResult(
            tool_name=self.TOOL_NAME, success=True, output=f"memory forgotten: {self.name}"
        )
