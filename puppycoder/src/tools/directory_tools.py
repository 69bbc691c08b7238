# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import logging

from pydantic import Field

from .base_tool import BaseTool
from ..utils.sandbox import resolve_in_sandbox, relative_posix
from ..types.tool_types import ToolResult
from ..types.project_types import Project

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


class ListFolderContent(BaseTool):
    """Lists the immediate children of a folder in the project."""

    TOOL_NAME = "list_folder_content"
    TOOL_DESCRIPTION = """List folder content.

Returns one entry per line, as paths relative to the project folder. Folders end with a "/"."""

    path: str = Field(
        default=".",
        description="Path of the folder you want to list, relative to the project folder",
    )

    async def run(self, project: Project) -> ToolResult:
        path = resolve_in_sandbox(project.folder_root, self.path)
        if not path.exists():
            return ToolResult(
                tool_name=self.TOOL_NAME, success=True, output="path does not exist"
            )
        if not path.is_dir():
            raise NotADirectoryError(f"not a folder: {self.path}")

        entries = []
        for child in sorted(path.iterdir(), key=lambda p: p.name):
            entry = relative_posix(project.folder_root, child.absolute())
            entries.append(entry + "/" if child.is_dir() else entry)

        return ToolResult(
            tool_name=self.TOOL_NAME,
            success=True,
            output="\n".join(entries) if entries else "folder is empty",
        )
