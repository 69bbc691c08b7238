# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Line-addressed file patching.

A patch replaces `len(content)` lines starting at a zero-based line number,
extending the file where the patch runs past its end. Patching beyond the end
pads the gap with empty lines. Files are UTF-8; a file that used CRLF line
endings keeps them.
"""
from pathlib import Path

from ...types.tool_types import NotTextFile


def read_text_file(path: Path) -> str:
    """Reads `path` as UTF-8 without translating line endings.

    Raises:
        NotTextFile: if the file is not valid UTF-8
        OSError: if the file cannot be read
    """
    try:
        with path.open(encoding="utf-8", newline="") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise NotTextFile(path.name) from e


def split_lines(text: str) -> list[str]:
    """Splits on "\\n", dropping a trailing "\\r" from each line.

    A trailing newline does not produce a final empty line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def apply_line_patch(
    existing: list[str], content: list[str], line_number: int
) -> list[str]:
    if line_number < 0:
        raise ValueError(f"line_number must be non-negative, got {line_number}")

    patched = list(existing)
    if line_number > len(patched):
        patched.extend([""] * (line_number - len(patched)))
    patched[line_number : line_number + len(content)] = content
    return patched


def write_patched_file(path: Path, content: str, line_number: int) -> int:
    """Applies a patch to the file at `path`, creating it if needed.

    The whole file is rewritten, with "\\r\\n" line endings if the file
    already used them and "\\n" otherwise. Returns the new line count.
    """
    original = read_text_file(path) if path.exists() else ""
    newline = "\r\n" if "\r\n" in original else "\n"
    patched = apply_line_patch(split_lines(original), split_lines(content), line_number)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(newline.join(patched), encoding="utf-8", newline="")
    return len(patched)
