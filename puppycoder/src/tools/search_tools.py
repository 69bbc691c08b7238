# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import logging

from pydantic import Field

from .base_tool import BaseTool
from .edit_tools.line_patch import read_text_file, split_lines
from ..utils.sandbox import resolve_in_sandbox
from ..types.tool_types import ToolResult
from ..types.project_types import Project

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


class FindInFile(BaseTool):
    """Literal substring search within a single file."""

    TOOL_NAME = "find_in_file"
    TOOL_DESCRIPTION = """Find content in a file.

Returns every line containing the pattern (matched literally, case-sensitive) prefixed with its 1-based line number, e.g. "12: def main():"."""

    path: str = Field(
        ...,
        description="Path of the file in which you want to search, relative to the project folder",
    )
    pattern: str = Field(..., description="Text you want to search for")

    async def run(self, project: Project) -> ToolResult:
        path = resolve_in_sandbox(project.folder_root, self.path)
        lines = split_lines(read_text_file(path))

        matches = [
            f"{i}: {line}" for i, line in enumerate(lines, start=1) if self.pattern in line
        ]
        return ToolResult(
            tool_name=self.TOOL_NAME,
            success=True,
            output="\n".join(matches) if matches else "no matches",
        )
