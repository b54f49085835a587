"""
Tool 定义 - 参数 schema 与 handler 的组合，导出为 OpenAI function calling 格式。

Quick Start::

    from dataclasses import dataclass, field
    from toolschema import tags
    from toolschema.tools import ToolRegistry, decode_arguments, tool

    @dataclass
    class WeatherArgs:
        city: str = field(metadata=tags(description="City name"))

    @tool(params=WeatherArgs)
    async def get_weather(args: str) -> str:
        \"\"\"获取指定城市的当前天气。\"\"\"
        req = decode_arguments(args, WeatherArgs)
        return f"{req.city}: 25°C"

    registry = ToolRegistry()
    registry.register(get_weather)

    # 导出给 LLM
    tools_param = registry.to_openai_schema()

    # 执行
    result = await registry.execute("get_weather", '{"city": "上海"}')
"""

from toolschema.tools.arguments import ArgumentsError, decode_arguments
from toolschema.tools.registry import (
    FunctionDefinition,
    Tool,
    ToolDef,
    ToolRegistry,
    tool,
)

__all__ = [
    "FunctionDefinition",
    "Tool",
    "ToolDef",
    "ToolRegistry",
    "tool",
    "decode_arguments",
    "ArgumentsError",
]
