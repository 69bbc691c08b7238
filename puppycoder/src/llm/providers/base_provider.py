# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Base provider interface for LLM interactions."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable
from datetime import datetime

from ..base import Completion, GenRequest, TimingInfo
from ...tools.base_tool import tool_registry
from ...types.llm_types import Message
from ...types.tool_types import ToolDefinition

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """Abstract base class for LLM providers.

    Implementations raise NetworkError or BackendError on failure; the
    generation client converts those into error results.
    """

    def native_tools(self, names: Iterable[str]) -> list[dict]:
        """The provider-native schemas of the named tools, in the given order.

        Names missing from the registry are skipped with a warning.
        """
        tools = []
        for name in names:
            if name not in tool_registry:
                logger.warning(f"Not offering unregistered tool {name}")
                continue
            tools.append(self.pydantic_to_native_tool(tool_registry[name].definition()))
        return tools

    def _get_timing_info(
        self,
        start_time: datetime,
        output_token_count: int,
        end_time: datetime | None = None,
    ) -> TimingInfo:
        if end_time is None:
            end_time = datetime.now()
        total_duration = end_time - start_time
        seconds = total_duration.total_seconds()
        return TimingInfo(
            start_time=start_time,
            end_time=end_time,
            total_duration=total_duration,
            tokens_per_second=output_token_count / seconds if seconds > 0 else None,
        )

    # Abstract methods --------------------------------------------------------

    @abstractmethod
    def _prepare_messages(self, messages: list[Message]) -> Any:
        """Maps conversation messages into the provider's request format"""
        pass

    @abstractmethod
    async def create_completion(self, request: GenRequest) -> Completion:
        """Run one generation round for `request`."""
        pass

    @abstractmethod
    def pydantic_to_native_tool(self, tool: ToolDefinition) -> dict:
        """
        Converts a tool definition into a schema for native tool calling for
        this particular provider.
        """
        pass
