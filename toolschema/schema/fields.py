"""
Field Processor - 从 dataclass 字段的 metadata 标签提取 schema 元数据。

标签词汇（与 ``json`` 序列化标签保持一致）:
- ``json``: ``"name,omitempty"``；第一段为序列化名称，``"-"`` 或空名称表示忽略字段
- ``description``: 字段说明
- ``enum``: 逗号分隔的可选值列表
- ``required``: 可解析为布尔值的字符串，覆盖默认的 required 推断

Usage::

    @dataclass
    class SearchArgs:
        query: str = field(metadata=tags(description="Search keywords"))
        limit: int = field(default=10, metadata=tags(json="limit,omitempty"))
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from toolschema.schema.definition import Definition

logger = logging.getLogger("toolschema.schema")

SKIP = "-"
OMITEMPTY = "omitempty"

_TRUE_VALUES = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_VALUES = {"0", "f", "F", "FALSE", "false", "False"}


@dataclass
class FieldInfo:
    """Result of processing one record field.

    Attributes:
        name: Serialized property name.
        schema: The field's value schema, with tag metadata merged in.
        required: Whether the property is listed in ``required``.
    """

    name: str
    schema: Definition
    required: bool = True


def tags(
    json: Optional[str] = None,
    description: Optional[str] = None,
    enum: Union[str, Sequence[str], None] = None,
    required: Union[bool, str, None] = None,
) -> Dict[str, Any]:
    """Build a field metadata mapping for ``dataclasses.field(metadata=...)``.

    Only the arguments that are given end up in the mapping, so the result
    can be merged with other metadata keys.
    """
    meta: Dict[str, Any] = {}
    if json is not None:
        meta["json"] = json
    if description is not None:
        meta["description"] = description
    if enum is not None:
        meta["enum"] = enum if isinstance(enum, str) else list(enum)
    if required is not None:
        meta["required"] = required
    return meta


def parse_bool(value: Any) -> Optional[bool]:
    """Parse a boolean tag value. Returns ``None`` if it is not parseable."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
    return None


def parse_enum(value: Any) -> List[str]:
    """Split an enum tag into trimmed, non-empty entries (order preserved)."""
    if isinstance(value, str):
        entries = value.split(",")
    else:
        entries = [str(v) for v in value]
    return [e.strip() for e in entries if e.strip()]


def resolve_name(field_name: str, metadata: Mapping[str, Any]) -> Tuple[str, bool]:
    """Resolve ``(serialized_name, required)`` from the ``json`` tag.

    The name is empty, meaning the field is skipped, when the tag is ``"-"``
    or its name segment is empty (``",omitempty"``).
    """
    json_tag = metadata.get("json") or ""
    if json_tag == SKIP:
        return "", False
    if not json_tag:
        return field_name, True

    name, *options = json_tag.split(",")
    required = not any(opt.strip() == OMITEMPTY for opt in options)
    return name, required


def process_field(
    f: dataclasses.Field,
    field_type: Any,
    reflect: Callable[[Any], Definition],
) -> Optional[FieldInfo]:
    """Process one dataclass field into a :class:`FieldInfo`.

    Parameters:
        f: The dataclass field.
        field_type: Its resolved type annotation.
        reflect: Type reflector used for the value schema.

    Returns:
        ``None`` if the field is skipped (``json:"-"`` or an empty name
        segment).

    Raises:
        SchemaError: If the field type cannot be reflected.
    """
    metadata = f.metadata or {}
    name, required = resolve_name(f.name, metadata)
    if not name:
        return None

    schema = reflect(field_type)

    description = str(metadata.get("description") or "").strip()
    if description:
        schema.description = description

    enum_tag = metadata.get("enum")
    if enum_tag:
        values = parse_enum(enum_tag)
        if values:
            schema.enum = values

    req_tag = metadata.get("required")
    if req_tag is not None and req_tag != "":
        parsed = parse_bool(req_tag)
        if parsed is None:
            logger.debug("Ignoring unparseable required tag on %s: %r", f.name, req_tag)
        else:
            required = parsed

    return FieldInfo(name=name, schema=schema, required=required)
