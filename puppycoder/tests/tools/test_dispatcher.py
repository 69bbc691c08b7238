# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Tests for the tool dispatcher's failure semantics."""
import pytest

from puppycoder.src.tools import (
    BaseTool,
    ToolDispatcher,
    tool_registry,
    make_tool_call,
    ReadFile,
    WriteFile,
    CompleteTodo,
)
from puppycoder.src.types.llm_types import ToolCall
from puppycoder.src.types.tool_types import ToolResult


@pytest.fixture
def dispatcher():
    return ToolDispatcher()


class TestToolDispatcher:

    def setup_method(self):
        self.original_registry = dict(tool_registry)

    def teardown_method(self):
        tool_registry.clear()
        tool_registry.update(self.original_registry)

    @pytest.mark.asyncio
    async def test_success(self, dispatcher, project):
        call = make_tool_call("call_1", WriteFile(path="a.txt", content="hi", line_number=0))

        result = await dispatcher.dispatch(project, call)

        assert result.success
        assert result.tool_name == "write_file"
        assert result.invocation_id == "call_1"
        assert result.duration >= 0
        assert (project.folder_root / "a.txt").read_text() == "hi"

    @pytest.mark.asyncio
    async def test_unknown_tool(self, dispatcher, project):
        result = await dispatcher.dispatch(
            project, ToolCall(id="call_1", name="launch_rockets", arguments="{}")
        )
        assert not result.success
        assert result.to_response_text() == "error: unknown tool: launch_rockets"

    @pytest.mark.asyncio
    async def test_malformed_arguments(self, dispatcher, project):
        result = await dispatcher.dispatch(
            project, ToolCall(id="call_1", name="read_file", arguments='{"start_line": 1}')
        )
        assert not result.success
        assert "malformed arguments for read_file" in result.errors

    @pytest.mark.asyncio
    async def test_tool_not_enabled(self, dispatcher, project):
        project.enabled_tools = ["read_file"]
        call = make_tool_call("call_1", WriteFile(path="a.txt", content="hi", line_number=0))

        result = await dispatcher.dispatch(project, call)

        assert not result.success
        assert "write_file" in result.errors
        assert not (project.folder_root / "a.txt").exists()

    @pytest.mark.asyncio
    async def test_not_found(self, dispatcher, project):
        result = await dispatcher.execute(project, CompleteTodo(name="nope"))
        assert not result.success
        assert "nope" in result.errors

    @pytest.mark.asyncio
    async def test_io_error(self, dispatcher, project):
        result = await dispatcher.execute(project, ReadFile(path="missing.txt"))
        assert not result.success
        assert result.to_response_text().startswith("error: ")

    @pytest.mark.asyncio
    async def test_sandbox_violation(self, dispatcher, project):
        result = await dispatcher.execute(project, ReadFile(path="../../etc/passwd"))
        assert not result.success
        assert "escapes the project folder" in result.errors

    @pytest.mark.asyncio
    async def test_binary_file_is_a_tool_failure(self, dispatcher, project):
        (project.folder_root / "blob.bin").write_bytes(b"\xff\xfe\x00abc")

        result = await dispatcher.execute(project, ReadFile(path="blob.bin"))

        assert not result.success
        assert result.errors == "not a UTF-8 text file: blob.bin"

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_contained(self, dispatcher, project):
        class ExplodingTool(BaseTool):
            TOOL_NAME = "exploding_tool"
            TOOL_DESCRIPTION = "Always fails"

            async def run(self, project) -> ToolResult:
                raise RuntimeError("boom")

        project.enabled_tools.append("exploding_tool")

        result = await dispatcher.execute(project, ExplodingTool())

        assert not result.success
        assert "boom" in result.errors


class TestToolResult:

    def test_response_text(self):
        ok = ToolResult(tool_name="read_file", success=True, output="content")
        failed = ToolResult(tool_name="read_file", success=False, errors="no such file")

        assert ok.to_response_text() == "content"
        assert failed.to_response_text() == "error: no such file"
        assert "Success: False" in str(failed)

    def test_empty_output(self):
        assert ToolResult(tool_name="x", success=True).to_response_text() == ""
