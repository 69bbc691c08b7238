# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Tests for the todo and memory tools."""
import pytest

from puppycoder.src.tools import AddNewTodo, CompleteTodo, AddMemory, ForgetMemory
from puppycoder.src.types.tool_types import NotFound
from puppycoder.src.types.project_types import MEMORY_CAPACITY, MemoryItem


class TestTodoTools:

    @pytest.mark.asyncio
    async def test_add_with_generated_names(self, project):
        await AddNewTodo(content="first").run(project)
        await AddNewTodo(content="second").run(project)

        assert [t.name for t in project.todo_items] == ["todo-1", "todo-2"]
        assert not any(t.done for t in project.todo_items)

    @pytest.mark.asyncio
    async def test_generated_name_skips_taken_names(self, project):
        await AddNewTodo(name="todo-2", content="chosen").run(project)

        result = await AddNewTodo(content="generated").run(project)

        assert result.output == "todo added: todo-3"
        assert [t.name for t in project.todo_items] == ["todo-2", "todo-3"]

    @pytest.mark.asyncio
    async def test_add_named(self, project):
        result = await AddNewTodo(name="tests", content="write tests").run(project)
        assert result.output == "todo added: tests"
        assert project.todo_items[0].content == "write tests"

    @pytest.mark.asyncio
    async def test_complete(self, project):
        await AddNewTodo(name="tests", content="write tests").run(project)
        await AddNewTodo(name="docs", content="write docs").run(project)

        await CompleteTodo(name="tests").run(project)

        assert [t.name for t in project.open_todos()] == ["docs"]

    @pytest.mark.asyncio
    async def test_complete_unknown(self, project):
        with pytest.raises(NotFound):
            await CompleteTodo(name="nope").run(project)

    @pytest.mark.asyncio
    async def test_complete_twice(self, project):
        await AddNewTodo(name="tests", content="write tests").run(project)
        await CompleteTodo(name="tests").run(project)

        result = await CompleteTodo(name="tests").run(project)

        assert result.success
        assert result.output == "todo completed: tests"
        assert project.todo_items[0].done
        with pytest.raises(NotFound):
            await CompleteTodo(name="docs").run(project)


class TestMemoryTools:

    @pytest.mark.asyncio
    async def test_add(self, project):
        await AddMemory(content="uses pydantic").run(project)
        await AddMemory(name="style", content="four space indents").run(project)

        assert project.memories == [
            MemoryItem(name="memory-1", content="uses pydantic"),
            MemoryItem(name="style", content="four space indents"),
        ]

    @pytest.mark.asyncio
    async def test_existing_name_replaces_content(self, project):
        await AddMemory(name="style", content="tabs").run(project)
        result = await AddMemory(name="style", content="spaces").run(project)

        assert result.output == "memory updated: style"
        assert project.memories == [MemoryItem(name="style", content="spaces")]

    @pytest.mark.asyncio
    async def test_capacity(self, project):
        for i in range(MEMORY_CAPACITY):
            await AddMemory(name=f"m{i}", content=f"fact {i}").run(project)
        before = [m.model_copy() for m in project.memories]

        result = await AddMemory(name="extra", content="one too many").run(project)

        assert MEMORY_CAPACITY == 20
        assert result.success
        assert "not added" in result.output
        assert project.memories == before

    @pytest.mark.asyncio
    async def test_replacing_when_full_is_allowed(self, project):
        for i in range(MEMORY_CAPACITY):
            await AddMemory(name=f"m{i}", content=f"fact {i}").run(project)

        result = await AddMemory(name="m0", content="updated").run(project)

        assert result.output == "memory updated: m0"
        assert project.find_memory("m0").content == "updated"
        assert len(project.memories) == MEMORY_CAPACITY

    @pytest.mark.asyncio
    async def test_forget_frees_a_slot(self, project):
        for i in range(MEMORY_CAPACITY):
            await AddMemory(name=f"m{i}", content=f"fact {i}").run(project)

        await ForgetMemory(name="m3").run(project)
        result = await AddMemory(name="new", content="fits now").run(project)

        assert result.output == "memory added: new"
        assert project.find_memory("m3") is None
        assert len(project.memories) == MEMORY_CAPACITY

    @pytest.mark.asyncio
    async def test_generated_name_avoids_collisions(self, project):
        await AddMemory(name="memory-1", content="taken").run(project)
        await AddMemory(content="auto").run(project)

        assert [m.name for m in project.memories] == ["memory-1", "memory-2"]

    @pytest.mark.asyncio
    async def test_forget_unknown(self, project):
        with pytest.raises(NotFound):
            await ForgetMemory(name="nope").run(project)
