# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Request and result models for generation rounds."""

import uuid

from typing import Literal, Optional, Union
from datetime import datetime, timedelta
from pydantic import BaseModel, ConfigDict, Field

from ..types.llm_types import TokenUsage, Model, Message, AssistantMessage


class TimingInfo(BaseModel):
    """Timing information for LLM interactions."""

    start_time: datetime = Field(description="When the request started")
    end_time: datetime = Field(description="When the response completed")
    total_duration: timedelta = Field(description="Total duration of the request")
    tokens_per_second: Optional[float] = Field(
        None, description="Average tokens per second for completion"
    )

    def __str__(self) -> str:
        fmt = "%Y-%m-%d %H:%M:%S"
        parts = [
            f"- Start {self.start_time.strftime(fmt)}, End {self.end_time.strftime(fmt)}",
            f"- Duration: {self.total_duration}",
        ]
        if self.tokens_per_second is not None:
            parts.append(f"- TPS: {self.tokens_per_second:.2f}")
        return "\n".join(parts)


class GenRequest(BaseModel):
    """One generation round: the full context plus the tools the model may call."""

    request_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    model: Model
    messages: tuple[Message, ...]
    tools: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)


class Completion(BaseModel):
    """What a provider hands back for one request."""

    id: str
    message: AssistantMessage
    model: Model
    usage: TokenUsage
    timing: TimingInfo


class GenSuccess(BaseModel):
    kind: Literal["success"] = "success"
    request_id: str
    message: AssistantMessage
    usage: TokenUsage
    input_cost: float
    output_cost: float
    timing: TimingInfo


class GenError(BaseModel):
    kind: Literal["network", "backend", "timeout"]
    request_id: str
    description: str
    status_code: int | None = None


GenResult = Union[GenSuccess, GenError]
