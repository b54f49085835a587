"""
Schema 反射 - 从 dataclass 类型定义自动生成 JSON Schema。

Usage::

    from dataclasses import dataclass, field
    from toolschema.schema import generate_schema, tags

    @dataclass
    class SearchArgs:
        query: str = field(metadata=tags(description="Search keywords"))
        limit: int = field(default=10, metadata=tags(json="limit,omitempty"))

    generate_schema(SearchArgs).to_dict()
    # {"type": "object", "properties": {...}, "required": ["query"],
    #  "additionalProperties": False}
"""

from toolschema.schema.definition import DataType, Definition
from toolschema.schema.errors import CyclicTypeError, SchemaError, UnsupportedTypeError
from toolschema.schema.fields import FieldInfo, process_field, tags
from toolschema.schema.reflect import generate_schema, reflect_object, reflect_schema

__all__ = [
    "DataType",
    "Definition",
    "SchemaError",
    "UnsupportedTypeError",
    "CyclicTypeError",
    "FieldInfo",
    "process_field",
    "tags",
    "generate_schema",
    "reflect_schema",
    "reflect_object",
]
