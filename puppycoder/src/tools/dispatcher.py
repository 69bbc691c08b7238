# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Executes decoded tool calls against a project.

Every outcome, including decode failures and unexpected exceptions, comes back
as a ToolResult so that each tool call in the conversation gets a response.
"""
import time
import logging

from .base_tool import BaseTool, decode_tool_call
from ..types.llm_types import ToolCall
from ..types.tool_types import ToolResult, ToolCallError, DecodeError
from ..types.project_types import Project

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


class ToolDispatcher:

    async def dispatch(self, project: Project, tool_call: ToolCall) -> ToolResult:
        try:
            params = decode_tool_call(tool_call.name, tool_call.arguments)
        except DecodeError as e:
            logger.warning(f"Could not decode tool call {tool_call.id}: {e}")
            return ToolResult(tool_name=tool_call.name, success=False, errors=str(e))

        result = await self.execute(project, params)
        result.invocation_id = tool_call.id
        return result

    async def execute(self, project: Project, params: BaseTool) -> ToolResult:
        tool_name = params.TOOL_NAME
        if tool_name not in project.enabled_tools:
            return ToolResult(
                tool_name=tool_name,
                success=False,
                errors=f"tool {tool_name} is not enabled for this project",
            )

        start_time = time.time()
        try:
            result = await params.run(project)
        except (ToolCallError, OSError) as e:
            logger.info(f"Tool {tool_name} failed: {e}")
            return ToolResult(
                tool_name=tool_name,
                success=False,
                errors=str(e),
                duration=time.time() - start_time,
            )
        except Exception as e:
            logger.exception(f"Unexpected error while running tool {tool_name}")
            return ToolResult(
                tool_name=tool_name,
                success=False,
                errors=f"tool runtime error: {e}",
                duration=time.time() - start_time,
            )

        result.duration = time.time() - start_time
        return result
