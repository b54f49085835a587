"""
toolschema - 从 Python 类型定义生成 LLM function calling 参数 schema。

以 dataclass 描述工具参数，字段 metadata 标签补充名称、说明、枚举值与
required 信息，递归反射得到 JSON Schema 子集。

Quick Start:
    from dataclasses import dataclass, field
    from toolschema import generate_schema, tags

    @dataclass
    class WeatherArgs:
        city: str = field(metadata=tags(description="City name"))
        unit: str = field(default="celsius", metadata=tags(
            json="unit,omitempty", enum="celsius,fahrenheit"))

    generate_schema(WeatherArgs).to_json()
"""

__version__ = "0.1.0"

from toolschema.core.config import SchemaConfig
from toolschema.schema.definition import DataType, Definition
from toolschema.schema.errors import CyclicTypeError, SchemaError, UnsupportedTypeError
from toolschema.schema.fields import tags
from toolschema.schema.reflect import generate_schema, reflect_schema
from toolschema.tools.arguments import ArgumentsError, decode_arguments
from toolschema.tools.registry import FunctionDefinition, Tool, ToolDef, ToolRegistry, tool
from toolschema.utils.logger import setup_logging

__all__ = [
    "SchemaConfig",
    "DataType",
    "Definition",
    "SchemaError",
    "UnsupportedTypeError",
    "CyclicTypeError",
    "tags",
    "generate_schema",
    "reflect_schema",
    "ArgumentsError",
    "decode_arguments",
    "FunctionDefinition",
    "Tool",
    "ToolDef",
    "ToolRegistry",
    "tool",
    "setup_logging",
    "__version__",
]
