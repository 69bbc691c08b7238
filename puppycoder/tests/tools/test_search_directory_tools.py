# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Tests for list_folder_content and find_in_file."""
import pytest

from puppycoder.src.tools import ListFolderContent, FindInFile
from puppycoder.src.types.tool_types import SandboxViolation, NotTextFile


class TestListFolderContent:

    @pytest.mark.asyncio
    async def test_lists_children_sorted(self, project):
        root = project.folder_root
        (root / "src").mkdir()
        (root / "src" / "nested.py").write_text("")
        (root / "b.txt").write_text("")
        (root / "a.txt").write_text("")

        result = await ListFolderContent().run(project)

        assert result.output == "a.txt\nb.txt\nsrc/"

    @pytest.mark.asyncio
    async def test_subfolder_paths_are_root_relative(self, project):
        (project.folder_root / "src" / "pkg").mkdir(parents=True)
        (project.folder_root / "src" / "main.py").write_text("")

        result = await ListFolderContent(path="src").run(project)

        assert result.output == "src/main.py\nsrc/pkg/"

    @pytest.mark.asyncio
    async def test_empty_folder(self, project):
        result = await ListFolderContent().run(project)
        assert result.output == "folder is empty"

    @pytest.mark.asyncio
    async def test_missing_path(self, project):
        result = await ListFolderContent(path="nowhere").run(project)
        assert result.success
        assert result.output == "path does not exist"

    @pytest.mark.asyncio
    async def test_file_path(self, project):
        (project.folder_root / "a.txt").write_text("")
        with pytest.raises(NotADirectoryError):
            await ListFolderContent(path="a.txt").run(project)

    @pytest.mark.asyncio
    async def test_sandbox_escape(self, project):
        with pytest.raises(SandboxViolation):
            await ListFolderContent(path="..").run(project)


class TestFindInFile:

    @pytest.mark.asyncio
    async def test_matches_with_line_numbers(self, project):
        (project.folder_root / "main.py").write_text(
            "import os\n\ndef main():\n    pass\n\ndef helper():\n    pass\n"
        )

        result = await FindInFile(path="main.py", pattern="def ").run(project)

        assert result.output == "3: def main():\n6: def helper():"

    @pytest.mark.asyncio
    async def test_pattern_is_literal(self, project):
        (project.folder_root / "a.txt").write_text("a.b\naxb\n")

        result = await FindInFile(path="a.txt", pattern="a.b").run(project)

        assert result.output == "1: a.b"

    @pytest.mark.asyncio
    async def test_no_matches(self, project):
        (project.folder_root / "a.txt").write_text("nothing here\n")
        result = await FindInFile(path="a.txt", pattern="TODO").run(project)
        assert result.output == "no matches"

    @pytest.mark.asyncio
    async def test_missing_file(self, project):
        with pytest.raises(FileNotFoundError):
            await FindInFile(path="missing.txt", pattern="x").run(project)

    @pytest.mark.asyncio
    async def test_binary_file(self, project):
        (project.folder_root / "blob.bin").write_bytes(b"\xff\xfe\x00abc")
        with pytest.raises(NotTextFile, match="blob.bin"):
            await FindInFile(path="blob.bin", pattern="abc").run(project)
