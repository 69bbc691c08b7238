# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""OpenAI chat-completions provider implementation."""

import logging
import openai

from typing import Any
from datetime import datetime
from openai import AsyncOpenAI

from ..base import Completion, GenRequest
from .base_provider import BaseProvider
from ...types.tool_types import ToolDefinition
from ...types.llm_types import (
    TokenUsage,
    Message,
    SystemMessage,
    UserMessage,
    AssistantMessage,
    ToolResponseMessage,
    ToolCall,
    NetworkError,
    BackendError,
)

logger = logging.getLogger(__name__)


class OpenAIProvider(BaseProvider):
    """Provider implementation for OpenAI-compatible chat completion APIs."""

    def __init__(self, api_key: str, base_url: str, client: AsyncOpenAI | None = None):
        self.api_key = api_key
        self.base_url = base_url
        self.client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=0,
        )

    def _create_token_usage(self, response: Any) -> TokenUsage:
        """Create TokenUsage object from response."""
        usage = getattr(response, "usage", None)
        if not usage:
            logger.warning("Missing usage information from OpenAI API response. Setting to 0")
            return TokenUsage()

        return TokenUsage(
            prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
        )

    def pydantic_to_native_tool(self, tool: ToolDefinition) -> dict:
        return {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.to_json_schema(),
            },
        }

    def _prepare_messages(self, messages: list[Message]) -> list[dict]:
        oai_messages = []
        for msg in messages:
            if isinstance(msg, (SystemMessage, UserMessage)):
                oai_messages.append({"role": msg.role, "content": msg.text})
            elif isinstance(msg, AssistantMessage):
                oai_msg: dict[str, Any] = {"role": "assistant", "content": msg.text}
                if msg.tool_calls:
                    oai_msg["tool_calls"] = [
                        {
                            "id": tc.id,
                            "type": "function",
                            "function": {"name": tc.name, "arguments": tc.arguments},
                        }
                        for tc in msg.tool_calls
                    ]
                oai_messages.append(oai_msg)
            elif isinstance(msg, ToolResponseMessage):
                oai_messages.append(
                    {"role": "tool", "tool_call_id": msg.call_id, "content": msg.text}
                )
        return oai_messages

    async def create_completion(self, request: GenRequest) -> Completion:
        start_time = datetime.now()

        args: dict[str, Any] = {
            "model": request.model.id,
            "messages": self._prepare_messages(list(request.messages)),
        }
        tools = self.native_tools(request.tools)
        if tools:
            args["tools"] = tools

        try:
            response = await self.client.chat.completions.create(**args)
        except openai.APIStatusError as e:
            raise BackendError(str(e), status_code=e.status_code) from e
        except openai.APIConnectionError as e:
            # Also covers APITimeoutError
            raise NetworkError(str(e)) from e
        except openai.APIError as e:
            raise BackendError(str(e)) from e

        if not response.choices:
            raise BackendError("response contained no choices")

        token_usage = self._create_token_usage(response)
        timing_info = self._get_timing_info(
            start_time, output_token_count=token_usage.completion_tokens
        )

        message = response.choices[0].message
        tool_calls = tuple(
            ToolCall(id=tc.id, name=tc.function.name, arguments=tc.function.arguments)
            for tc in (message.tool_calls or [])
        )

        return Completion(
            id=response.id,
            message=AssistantMessage(text=message.content or "", tool_calls=tool_calls),
            model=request.model,
            usage=token_usage,
            timing=timing_info,
        )
