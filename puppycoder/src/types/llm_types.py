# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Models, messages and accounting types shared by the llm layer and the agent."""

from enum import Enum
from typing import Annotated, Literal, Union
from pydantic import BaseModel, ConfigDict, Field


class TokenCost(BaseModel):
    """Price of a model, in USD per million tokens."""

    input_per_million: float = Field(ge=0)
    output_per_million: float = Field(ge=0)

    model_config = ConfigDict(frozen=True)

    def input_cost(self, tokens: int) -> float:
        return tokens * self.input_per_million / 1_000_000

    def output_cost(self, tokens: int) -> float:
        return tokens * self.output_per_million / 1_000_000


class Model(str, Enum):
    """The closed set of backend models. Unknown ids fail validation."""

    GPT_4O = "gpt-4o"
    GPT_4O_MINI = "gpt-4o-mini"

    @property
    def id(self) -> str:
        return self.value

    @property
    def default_token_cost(self) -> TokenCost:
        return _LIST_PRICES[self]


_LIST_PRICES: dict[Model, TokenCost] = {
    Model.GPT_4O: TokenCost(input_per_million=2.50, output_per_million=10.00),
    Model.GPT_4O_MINI: TokenCost(input_per_million=0.150, output_per_million=0.600),
}


class TokenUsage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens

    def calculate_cost(self, token_cost: TokenCost) -> tuple[float, float]:
        """Returns the (input, output) cost of this usage."""
        return (
            token_cost.input_cost(self.prompt_tokens),
            token_cost.output_cost(self.completion_tokens),
        )

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        return TokenUsage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
        )


# Conversation messages =======================================================


class ToolCall(BaseModel):
    """A tool invocation as issued by the model: the tool name and its raw
    argument JSON. Use `decode_tool_call` to get the typed parameters."""

    id: str
    name: str
    arguments: str

    model_config = ConfigDict(frozen=True)

    def decode(self):
        """The typed parameters of this call. See `decode_tool_call`."""
        from ..tools.base_tool import decode_tool_call

        return decode_tool_call(self.name, self.arguments)


class SystemMessage(BaseModel):
    role: Literal["system"] = "system"
    text: str

    model_config = ConfigDict(frozen=True)


class UserMessage(BaseModel):
    role: Literal["user"] = "user"
    text: str

    model_config = ConfigDict(frozen=True)


class AssistantMessage(BaseModel):
    role: Literal["assistant"] = "assistant"
    text: str = ""
    tool_calls: tuple[ToolCall, ...] = ()

    model_config = ConfigDict(frozen=True)


class ToolResponseMessage(BaseModel):
    role: Literal["tool"] = "tool"
    call_id: str
    text: str

    model_config = ConfigDict(frozen=True)


Message = Annotated[
    Union[SystemMessage, UserMessage, AssistantMessage, ToolResponseMessage],
    Field(discriminator="role"),
]


# Generation errors ===========================================================


class GenerationError(Exception):
    """Base class for failures talking to the LLM backend."""


class NetworkError(GenerationError):
    """The backend could not be reached, or the connection broke."""


class BackendError(GenerationError):
    """The backend answered with a non-2xx status or an unusable body."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
