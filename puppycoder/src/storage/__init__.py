# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Persistent storage for projects."""

from .project_store import ProjectStore, project_filename

__all__ = [
    "ProjectStore",
    "project_filename",
]
