# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from .line_patch import read_text_file, split_lines, apply_line_patch, write_patched_file

__all__ = ["read_text_file", "split_lines", "apply_line_patch", "write_patched_file"]
