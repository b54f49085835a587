"""
ToolRegistry - 工具定义、@tool 装饰器、参数 schema 自动生成。

一个工具 = 参数 schema (:class:`Definition`) + 接收原始 JSON 参数的 handler。
参数 schema 由 dataclass 反射得到，导出格式兼容 OpenAI function calling。
"""

from __future__ import annotations

import inspect
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from toolschema.core.config import SchemaConfig
from toolschema.schema.definition import DataType, Definition
from toolschema.schema.reflect import generate_schema

logger = logging.getLogger("toolschema.tools")

RawArgs = Union[str, bytes, bytearray]


def _empty_parameters() -> Definition:
    return Definition(type=DataType.OBJECT, properties={}, additional_properties=False)


# ──────────────────────────────────────────────
# FunctionDefinition
# ──────────────────────────────────────────────


@dataclass
class FunctionDefinition:
    """Function description sent to the model.

    Attributes:
        name: Unique function name.
        description: Human-readable description (shown to LLM).
        parameters: Object schema of the arguments.
        strict: Ask the provider to enforce the schema exactly.
    """

    name: str
    description: str = ""
    parameters: Definition = field(default_factory=_empty_parameters)
    strict: bool = False

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"name": self.name}
        if self.description:
            d["description"] = self.description
        d["parameters"] = self.parameters.to_dict()
        if self.strict:
            d["strict"] = True
        return d


# ──────────────────────────────────────────────
# Tool
# ──────────────────────────────────────────────


class Tool(ABC):
    """A schema paired with an executable handler."""

    @abstractmethod
    def get_definition(self) -> FunctionDefinition:
        """Return the function definition describing this tool."""

    @abstractmethod
    async def execute(self, args: RawArgs) -> Any:
        """Run the tool with raw serialized arguments."""

    def to_openai_schema(self) -> Dict[str, Any]:
        """Export in OpenAI function calling format.

        Returns::

            {
                "type": "function",
                "function": { "name": ..., "description": ..., "parameters": ... }
            }
        """
        return {
            "type": "function",
            "function": self.get_definition().to_dict(),
        }


@dataclass
class ToolDef(Tool):
    """A tool backed by a plain function.

    Attributes:
        name: Unique tool name.
        description: Human-readable description (shown to LLM).
        parameters: Object schema of the arguments.
        handler: Callable receiving the raw JSON argument string.
        is_async: Whether the handler is async.
        strict: Forwarded to :class:`FunctionDefinition`.
    """

    name: str
    description: str = ""
    parameters: Definition = field(default_factory=_empty_parameters)
    handler: Optional[Callable[[RawArgs], Any]] = None
    is_async: bool = False
    strict: bool = False

    def get_definition(self) -> FunctionDefinition:
        return FunctionDefinition(
            name=self.name,
            description=self.description,
            parameters=self.parameters,
            strict=self.strict,
        )

    async def execute(self, args: RawArgs) -> Any:
        if self.handler is None:
            raise RuntimeError(f"Tool {self.name!r} has no handler")
        if self.is_async:
            return await self.handler(args)
        return self.handler(args)


# ──────────────────────────────────────────────
# @tool decorator
# ──────────────────────────────────────────────


def _build_tool_def(
    fn: Callable,
    params: Any = None,
    name: Optional[str] = None,
    description: Optional[str] = None,
    config: Optional[SchemaConfig] = None,
) -> ToolDef:
    config = config or SchemaConfig()
    docstring = inspect.getdoc(fn) or ""
    func_desc = description or ""
    if not func_desc and docstring:
        # First line of docstring as description
        func_desc = docstring.split("\n")[0].strip()

    parameters = _empty_parameters() if params is None else generate_schema(params, config)
    if not parameters.is_object:
        raise TypeError(
            f"Tool parameters must reflect to an object schema, got {parameters.type}"
        )

    return ToolDef(
        name=name or fn.__name__,
        description=func_desc,
        parameters=parameters,
        handler=fn,
        is_async=inspect.iscoroutinefunction(fn),
        strict=config.strict,
    )


def tool(
    fn: Optional[Callable] = None,
    *,
    params: Any = None,
    name: Optional[str] = None,
    description: Optional[str] = None,
    config: Optional[SchemaConfig] = None,
) -> Union[ToolDef, Callable[[Callable], ToolDef]]:
    """Decorator that turns a function into a :class:`ToolDef`.

    Can be used with or without arguments::

        @tool
        def ping(args: str) -> str: ...

        @tool(params=WeatherArgs, description="Current weather")
        async def weather(args: str) -> str:
            req = decode_arguments(args, WeatherArgs)
            ...

    ``params`` is a dataclass (or a representative value) whose schema
    becomes the tool's ``parameters``.
    """

    def decorator(func: Callable) -> ToolDef:
        return _build_tool_def(
            func, params=params, name=name, description=description, config=config
        )

    if fn is not None:
        # @tool without parentheses
        return decorator(fn)
    # @tool(...) with arguments
    return decorator


# ──────────────────────────────────────────────
# ToolRegistry
# ──────────────────────────────────────────────


class ToolRegistry:
    """Central registry for tools.

    Usage::

        registry = ToolRegistry()
        registry.register(weather)
        tools_param = registry.to_openai_schema()
        result = await registry.execute("weather", '{"city": "Berlin"}')
    """

    def __init__(self) -> None:
        self._tools: Dict[str, Tool] = {}

    def register(self, t: Union[Tool, Callable]) -> Tool:
        """Register a tool.

        Accepts any :class:`Tool` or a plain callable (wrapped with no
        parameters).
        """
        if not isinstance(t, Tool):
            t = _build_tool_def(t)
        tool_name = t.get_definition().name
        if tool_name in self._tools:
            logger.warning("Tool %r already registered, overwriting", tool_name)
        self._tools[tool_name] = t
        logger.debug("Tool registered: %s", tool_name)
        return t

    def get(self, name: str) -> Optional[Tool]:
        """Get a tool by name."""
        return self._tools.get(name)

    def list(self) -> List[Tool]:
        """Return all registered tools."""
        return list(self._tools.values())

    def names(self) -> List[str]:
        """Return all tool names."""
        return list(self._tools.keys())

    def remove(self, name: str) -> None:
        """Remove a tool by name."""
        self._tools.pop(name, None)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    # ─── Schema export ───

    def definitions(self) -> List[FunctionDefinition]:
        return [t.get_definition() for t in self._tools.values()]

    def to_openai_schema(self) -> List[Dict[str, Any]]:
        """Export all tools in OpenAI function calling format.

        Returns a list suitable for the ``tools`` parameter of
        ``openai.chat.completions.create()``.
        """
        return [t.to_openai_schema() for t in self._tools.values()]

    # ─── Execution ───

    async def execute(
        self,
        name: str,
        args: Union[RawArgs, Dict[str, Any], None] = None,
    ) -> Any:
        """Execute a tool by name.

        Parameters:
            name: Tool name.
            args: Raw JSON arguments. A dict is serialized first; ``None``
                becomes ``"{}"``.

        Raises:
            KeyError: If the tool is not registered.
        """
        t = self._tools.get(name)
        if t is None:
            raise KeyError(f"Tool not found: {name!r}")

        if args is None:
            raw: RawArgs = "{}"
        elif isinstance(args, dict):
            raw = json.dumps(args, ensure_ascii=False)
        else:
            raw = args

        try:
            return await t.execute(raw)
        except Exception as e:
            logger.error("Tool call failed: %s(%s) -> %s", name, raw, e)
            raise
