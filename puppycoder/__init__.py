# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""A conversational coding agent that edits files in a sandboxed project folder."""

__version__ = "0.1.0"
