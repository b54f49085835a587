"""
Schema Node - JSON Schema 子集的数据结构与序列化。

只覆盖工具参数描述所需的最小词汇:
type / description / enum / properties / required / items / additionalProperties。

序列化规则:
- 空值字段不输出
- object 节点总是输出 ``properties``（为空时输出 ``{}``）
- object 节点总是输出 ``additionalProperties``
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class DataType(str, Enum):
    OBJECT = "object"
    NUMBER = "number"
    INTEGER = "integer"
    STRING = "string"
    ARRAY = "array"
    NULL = "null"
    BOOLEAN = "boolean"


@dataclass
class Definition:
    """Description of one value's allowed shape.

    Attributes:
        type: Schema kind.
        description: Human-readable text shown to the model.
        enum: Allowed string values, in order.
        properties: Child nodes by field name (object only).
        required: Names of required fields, in declaration order (object only).
        items: Element node (array only).
        additional_properties: Whether unlisted keys are valid (object only).
            Usually a bool, but any JSON value is accepted.
    """

    type: Optional[DataType] = None
    description: str = ""
    enum: Optional[List[str]] = None
    properties: Optional[Dict[str, "Definition"]] = None
    required: Optional[List[str]] = None
    items: Optional["Definition"] = None
    additional_properties: Any = None

    @property
    def is_object(self) -> bool:
        return self.type == DataType.OBJECT

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain JSON-compatible dict.

        Returns::

            {"type": "object", "properties": {...}, "required": [...],
             "additionalProperties": False}
        """
        d: Dict[str, Any] = {}
        if self.type is not None:
            d["type"] = DataType(self.type).value
        if self.description:
            d["description"] = self.description
        if self.enum:
            d["enum"] = list(self.enum)
        if self.properties or self.is_object:
            d["properties"] = {
                name: child.to_dict() for name, child in (self.properties or {}).items()
            }
        if self.required:
            d["required"] = list(self.required)
        if self.items is not None:
            d["items"] = self.items.to_dict()
        if self.is_object:
            d["additionalProperties"] = (
                False if self.additional_properties is None else self.additional_properties
            )
        elif self.additional_properties is not None:
            d["additionalProperties"] = self.additional_properties
        return d

    def to_json(self, **kwargs: Any) -> str:
        """Serialize to a JSON string. Extra kwargs go to :func:`json.dumps`."""
        kwargs.setdefault("ensure_ascii", False)
        return json.dumps(self.to_dict(), **kwargs)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Definition":
        """Rebuild a node from its serialized form.

        Unknown keys are ignored. An unknown ``type`` raises ``ValueError``.
        """
        raw_type = d.get("type")
        props = d.get("properties")
        items = d.get("items")
        return cls(
            type=DataType(raw_type) if raw_type else None,
            description=d.get("description", ""),
            enum=list(d["enum"]) if d.get("enum") else None,
            properties=(
                {name: cls.from_dict(child) for name, child in props.items()}
                if isinstance(props, dict)
                else None
            ),
            required=list(d["required"]) if d.get("required") else None,
            items=cls.from_dict(items) if isinstance(items, dict) else None,
            additional_properties=d.get("additionalProperties"),
        )
