# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import os

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Literal
from pydantic import BaseModel, ConfigDict, Field

from .project_types import Project


class ToolResult(BaseModel):
    """Represents the result of a tool execution."""

    tool_name: str
    success: bool
    duration: float = 0.0  # on tool error paths, duration is often 0
    output: str | None = None
    errors: str | None = None
    invocation_id: str = Field(default_factory=lambda: os.urandom(4).hex())

    def __str__(self):
        tool_response_str = f"{self.tool_name} response:"
        tool_response_str += f"\nSuccess: {self.success}"
        if self.output is not None:
            tool_response_str += f"\nResult: {self.output}"
        if self.errors is not None:
            tool_response_str += f"\nErrors: {self.errors}"
        tool_response_str += f"\nDuration: {self.duration:.3f}"
        return tool_response_str

    def to_response_text(self) -> str:
        """The text recorded in the conversation as the tool's response."""
        if self.success:
            return self.output or ""
        return f"error: {self.errors or 'unknown failure'}"


ParameterType = Literal["string", "integer", "number", "boolean"]


class ParameterSpec(BaseModel):
    type: ParameterType
    description: str = ""
    required: bool = True

    model_config = ConfigDict(frozen=True)


class ToolDefinition(BaseModel):
    """The schema of one tool, as advertised to the model."""

    name: str
    description: str
    parameters: dict[str, ParameterSpec]

    model_config = ConfigDict(frozen=True)

    def to_json_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                name: {"type": spec.type, "description": spec.description}
                for name, spec in self.parameters.items()
            },
            "required": [n for n, spec in self.parameters.items() if spec.required],
        }

    def to_catalog_entry(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.to_json_schema(),
        }


class ToolInterface(BaseModel, ABC):
    """Abstract interface for all tools"""

    # Class variables
    TOOL_NAME: ClassVar[str]
    TOOL_DESCRIPTION: ClassVar[str]

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    @abstractmethod
    async def run(self, project: Project) -> ToolResult:
        """Execute the tool against the project's sandbox and state.

        Failures are signalled by raising ToolCallError or OSError; the
        dispatcher turns those into failed results.
        """
        pass

    @classmethod
    @abstractmethod
    def definition(cls) -> ToolDefinition:
        """The tool's schema, derived from its fields."""
        pass


# Tool errors =================================================================


class ToolCallError(Exception):
    """Base class for errors raised while decoding or running a tool call."""


class DecodeError(ToolCallError):
    pass


class UnknownTool(DecodeError):
    def __init__(self, name: str):
        super().__init__(f"unknown tool: {name}")
        self.name = name


class MalformedArguments(DecodeError):
    def __init__(self, name: str, reason: str):
        super().__init__(f"malformed arguments for {name}: {reason}")
        self.name = name
        self.reason = reason


class NotFound(ToolCallError):
    """A todo or memory referenced by name does not exist."""


class SandboxViolation(ToolCallError):
    """A path resolved outside of the project's folder root."""

    def __init__(self, path: str):
        super().__init__(f"path escapes the project folder: {path}")
        self.path = path


class NotTextFile(ToolCallError):
    """A file's bytes are not valid UTF-8 text."""

    def __init__(self, path: str):
        super().__init__(f"not a UTF-8 text file: {path}")
        self.path = path
