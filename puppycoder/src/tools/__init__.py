# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
The agent's tools. Import order fixes the order of the tool registry, and so
the order of the catalog sent to the model.
"""

from .base_tool import (
    BaseTool,
    tool_registry,
    describe_tools,
    encode_tool_call,
    decode_tool_call,
    make_tool_call,
)
from .file_tools import ReadFile, WriteFile, RemoveFile
from .todo_tools import AddNewTodo, CompleteTodo
from .memory_tools import AddMemory, ForgetMemory
from .directory_tools import ListFolderContent
from .search_tools import FindInFile
from .dispatcher import ToolDispatcher

__all__ = [
    "BaseTool",
    "tool_registry",
    "describe_tools",
    "encode_tool_call",
    "decode_tool_call",
    "make_tool_call",
    "ReadFile",
    "WriteFile",
    "RemoveFile",
    "AddNewTodo",
    "CompleteTodo",
    "AddMemory",
    "ForgetMemory",
    "ListFolderContent",
    "FindInFile",
    "ToolDispatcher",
]
