# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
The tool registry and the codec between typed tool parameters and the
(name, argument-JSON) wire form the model speaks.
"""
import json
import logging

from types import NoneType, UnionType
from typing import Any, ClassVar, Iterable, Union, get_args, get_origin
from pydantic import ValidationError
from json_repair import repair_json

from ..types.llm_types import ToolCall
from ..types.tool_types import (
    ToolInterface,
    ToolDefinition,
    ParameterSpec,
    UnknownTool,
    MalformedArguments,
)

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


# Populated in declaration order as tool modules are imported
tool_registry: dict[str, type["BaseTool"]] = {}

_JSON_TYPES: dict[type, str] = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
}


def _json_type(annotation: Any) -> str:
    if get_origin(annotation) in (Union, UnionType):
        args = [a for a in get_args(annotation) if a is not NoneType]
        if len(args) == 1:
            return _json_type(args[0])
    json_type = _JSON_TYPES.get(annotation)
    if json_type is None:
        raise TypeError(f"unsupported tool parameter type: {annotation!r}")
    return json_type


class BaseTool(ToolInterface):
    """Abstract base class for all tools"""

    # Class variables for tool metadata
    TOOL_NAME: ClassVar[str]
    TOOL_DESCRIPTION: ClassVar[str]

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        # Skip registering the BaseTool class itself.
        if cls.__name__ == "BaseTool":
            return
        existing = tool_registry.get(cls.TOOL_NAME)
        if existing is not None and existing is not cls:
            raise ValueError(
                f"tool name {cls.TOOL_NAME!r} is already registered by {existing.__name__}"
            )
        tool_registry[cls.TOOL_NAME] = cls

    @classmethod
    def definition(cls) -> ToolDefinition:
        parameters = {
            name: ParameterSpec(
                type=_json_type(field.annotation),
                description=field.description or "",
                required=field.is_required(),
            )
            for name, field in cls.model_fields.items()
        }
        return ToolDefinition(
            name=cls.TOOL_NAME,
            description=cls.TOOL_DESCRIPTION,
            parameters=parameters,
        )


def describe_tools(names: Iterable[str] | None = None) -> list[dict[str, Any]]:
    """The tool catalog in registry order, optionally limited to `names`."""
    wanted = None if names is None else set(names)
    return [
        tool_cls.definition().to_catalog_entry()
        for name, tool_cls in tool_registry.items()
        if wanted is None or name in wanted
    ]


def encode_tool_call(params: BaseTool) -> tuple[str, str]:
    return params.TOOL_NAME, params.model_dump_json()


def _parse_arguments(name: str, args_json: str) -> Any:
    if not args_json.strip():
        return {}
    try:
        return json.loads(args_json)
    except json.JSONDecodeError:
        pass

    repaired, repair_logs = repair_json(args_json, return_objects=True, logging=True)
    if repair_logs:
        logger.info(
            f"Repaired arguments for {name}: "
            + "; ".join(log.get("text", "") for log in repair_logs)
        )
    return repaired


def decode_tool_call(name: str, args_json: str) -> BaseTool:
    """Parses a wire-form call into its typed parameters.

    Raises:
        UnknownTool: if no tool is registered under `name`
        MalformedArguments: if the arguments are not a JSON object matching
            the tool's fields exactly
    """
    tool_cls = tool_registry.get(name)
    if tool_cls is None:
        raise UnknownTool(name)

    args = _parse_arguments(name, args_json)
    if not isinstance(args, dict):
        raise MalformedArguments(name, "arguments must be a JSON object")

    try:
        return tool_cls.model_validate(args)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        raise MalformedArguments(name, errors) from e


def make_tool_call(call_id: str, params: BaseTool) -> ToolCall:
    name, arguments = encode_tool_call(params)
    return ToolCall(id=call_id, name=name, arguments=arguments)
