# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Path resolution inside a project's folder root."""

from pathlib import Path, PurePosixPath

from ..types.tool_types import SandboxViolation


def resolve_in_sandbox(root: Path, path: str) -> Path:
    """Joins `path` onto `root` and canonicalises it.

    Raises SandboxViolation if the result lies outside the canonical root,
    whether through `..`, an absolute path or a symlink pointing out.
    """
    canonical_root = root.resolve()
    candidate = (canonical_root / path).resolve()
    if not candidate.is_relative_to(canonical_root):
        raise SandboxViolation(path)
    return candidate


def relative_posix(root: Path, path: Path) -> str:
    return path.relative_to(root.resolve()).as_posix()


def is_forbidden(root: Path, resolved: Path, forbidden_files: list[str]) -> bool:
    """
    An entry without a "/" names a file anywhere in the tree; an entry with
    one is a root-relative path and matches only that file.
    """
    relative = relative_posix(root, resolved)
    for entry in forbidden_files:
        entry = PurePosixPath(entry.strip("/")).as_posix()
        if "/" in entry:
            if relative == entry:
                return True
        elif resolved.name == entry:
            return True
    return False
