# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Project persistence: one JSON document per project.

Only the durable fields of a project are written; the agent loop's runtime
state (in-flight request, queued messages) is never persisted.
"""

import re
import json
import logging

from pathlib import Path

from ..types.project_types import Project

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def project_filename(name: str) -> str:
    slug = re.sub(r"[^A-Za-z0-9._-]+", "_", name).strip("._") or "untitled"
    return f"{slug}.json"


class ProjectStore:
    """Reads and writes projects in a single directory."""

    def __init__(self, directory: Path):
        self.directory = directory

    def path_for(self, name: str) -> Path:
        """The file a project called `name` is saved to.

        Names that slug to the same filename get numbered files, so "a b" and
        "a_b" never overwrite each other.
        """
        slug = project_filename(name).removesuffix(".json")
        path = self.directory / f"{slug}.json"
        n = 1
        while path.exists() and _stored_name(path) != name:
            n += 1
            path = self.directory / f"{slug}-{n}.json"
        if n > 1:
            logger.warning(
                f"Project name {name!r} clashes with another project's filename, saving as {path.name}"
            )
        return path

    def save(self, project: Project) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(project.name)
        path.write_text(project.model_dump_json(indent=2), encoding="utf-8")
        logger.info(f"Saved project {project.name} to {path}")
        return path

    def load(self, path: Path | str) -> Project:
        """Loads a project from `path`; a bare name is looked up in the store.

        Raises:
            FileNotFoundError: if no such project file exists
            pydantic.ValidationError: if the file is not a valid project
        """
        path = Path(path)
        if not path.exists() and path.parent == Path("."):
            path = self._find(str(path))
        return Project.model_validate_json(path.read_text(encoding="utf-8"))

    def _find(self, name: str) -> Path:
        for candidate in self.list_projects():
            if _stored_name(candidate) == name:
                return candidate
        return self.directory / project_filename(Path(name).stem)

    def list_projects(self) -> list[Path]:
        if not self.directory.exists():
            return []
        return sorted(self.directory.glob("*.json"))


def _stored_name(path: Path) -> str | None:
    """The project name recorded in a saved file, or None if it has none."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return data.get("name") if isinstance(data, dict) else None
