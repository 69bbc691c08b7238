# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import logging

from pydantic import Field

from .base_tool import BaseTool
from .edit_tools.line_patch import read_text_file, split_lines, write_patched_file
from ..utils.sandbox import resolve_in_sandbox, is_forbidden, relative_posix
from ..types.tool_types import ToolResult
from ..types.project_types import Project

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

FORBIDDEN_WRITE = "write refused: forbidden file"


class ReadFile(BaseTool):
    TOOL_NAME = "read_file"
    TOOL_DESCRIPTION = """Read file contents.

Returns the requested range of lines, joined by newlines. Line numbers are zero-based. Reading past the end of the file returns an empty result."""

    path: str = Field(
        ...,
        description="Path of the file you want to read, relative to the project folder",
    )
    start_line: int = Field(
        default=0,
        ge=0,
        description="Zero-based line from which to start reading. Default is 0",
    )
    line_count: int | None = Field(
        default=None,
        ge=0,
        description="Number of lines to read. Default is the rest of the file",
    )

    async def run(self, project: Project) -> ToolResult:
        path = resolve_in_sandbox(project.folder_root, self.path)
        lines = split_lines(read_text_file(path))

        end = len(lines)
        if self.line_count is not None:
            end = min(self.start_line + self.line_count, end)

        return ToolResult(
            tool_name=self.TOOL_NAME,
            success=True,
            output="\n".join(lines[self.start_line : end]),
        )


class WriteFile(BaseTool):
    TOOL_NAME = "write_file"
    TOOL_DESCRIPTION = """Write file contents.

The content replaces as many lines as it has, starting at the zero-based line_number; the rest of the file is kept. Writing past the end of the file extends it, padding any gap with empty lines. Missing files and folders are created. A file with CRLF line endings keeps them."""

    path: str = Field(
        ...,
        description="Path of the file you want to write, relative to the project folder",
    )
    content: str = Field(
        ...,
        description="Content you want to write in the file",
    )
    line_number: int = Field(
        ...,
        ge=0,
        description="Zero-based line from which you want to write to the file",
    )

    async def run(self, project: Project) -> ToolResult:
        path = resolve_in_sandbox(project.folder_root, self.path)
        if is_forbidden(project.folder_root, path, project.forbidden_files):
            logger.warning(f"Refused write to forbidden file {self.path}")
            return ToolResult(
                tool_name=self.TOOL_NAME, success=True, output=FORBIDDEN_WRITE
            )

        line_count = write_patched_file(path, self.content, self.line_number)
        logger.info(
            f"Wrote {relative_posix(project.folder_root, path)} ({line_count} lines)"
        )
        return ToolResult(
            tool_name=self.TOOL_NAME,
            success=True,
            output=f"file written ({line_count} lines)",
        )


class RemoveFile(BaseTool):
    TOOL_NAME = "remove_file"
    TOOL_DESCRIPTION = "Remove a file from the project folder."

    path: str = Field(
        ...,
        description="Path of the file you want to delete, relative to the project folder",
    )

    async def run(self, project: Project) -> ToolResult:
        path = resolve_in_sandbox(project.folder_root, self.path)
        if is_forbidden(project.folder_root, path, project.forbidden_files):
            logger.warning(f"Refused removal of forbidden file {self.path}")
            return ToolResult(
                tool_name=self.TOOL_NAME, success=True, output=FORBIDDEN_WRITE
            )

        if not path.exists():
            return ToolResult(
                tool_name=self.TOOL_NAME, success=True, output="file does not exist"
            )

        path.unlink()
        return ToolResult(tool_name=self.TOOL_NAME, success=True, output="file removed")
