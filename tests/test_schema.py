"""
测试类型反射 (Type Reflector) 与对象组装。
"""

import asyncio
import queue
import typing
from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Sequence, Set, Tuple, Union

import pytest

from toolschema.core.config import SchemaConfig
from toolschema.schema.definition import DataType, Definition
from toolschema.schema.errors import CyclicTypeError, SchemaError, UnsupportedTypeError
from toolschema.schema.fields import tags
from toolschema.schema.reflect import generate_schema, reflect_object, reflect_schema


# ══════════════════════════════════════════════
# Fixture types
# ══════════════════════════════════════════════


@dataclass
class Address:
    street: str
    zip_code: int = field(metadata=tags(json="zip"))


@dataclass
class Person:
    name: str = field(metadata=tags(description="Full name"))
    age: int
    height: float
    active: bool
    tags_: List[str] = field(metadata=tags(json="tags,omitempty"))
    address: Address
    nickname: Optional[str] = field(default=None, metadata=tags(json="nickname,omitempty"))


@dataclass
class Empty:
    pass


@dataclass
class WithPrivate:
    visible: str
    _hidden: int = 0


@dataclass
class WithMap:
    name: str
    extra: Dict[str, str]


@dataclass
class WithCallback:
    callback: Callable[[int], int]


@dataclass
class TreeNode:
    value: int
    children: List["TreeNode"]


@dataclass
class Parent:
    child: "Child"


@dataclass
class Child:
    parent: Optional[Parent]


@dataclass
class Pair:
    left: Address
    right: Address


class Color(Enum):
    RED = "red"


class Priority(IntEnum):
    LOW = 1


class Mode(str, Enum):
    FAST = "fast"


class Port(int):
    pass


class Name(str):
    pass


class Ratio(float):
    pass


@dataclass
class Endpoint:
    host: Name
    port: Port
    weight: Optional[Ratio] = None


# ══════════════════════════════════════════════
# Primitive kinds
# ══════════════════════════════════════════════


class TestPrimitives:
    """基础类型映射测试。"""

    @pytest.mark.parametrize(
        "tp, expected",
        [
            (str, DataType.STRING),
            (int, DataType.INTEGER),
            (float, DataType.NUMBER),
            (bool, DataType.BOOLEAN),
        ],
    )
    def test_kind_mapping(self, tp, expected):
        schema = reflect_schema(tp)
        assert schema.type == expected
        assert schema.items is None
        assert schema.properties is None

    def test_bool_is_not_integer(self):
        assert reflect_schema(bool).to_dict() == {"type": "boolean"}

    def test_newtype_uses_supertype(self):
        UserId = typing.NewType("UserId", int)
        assert reflect_schema(UserId).type == DataType.INTEGER

    def test_annotated_is_unwrapped(self):
        assert reflect_schema(typing.Annotated[str, "meta"]).type == DataType.STRING

    @pytest.mark.parametrize(
        "tp, expected",
        [
            (Port, DataType.INTEGER),
            (Name, DataType.STRING),
            (Ratio, DataType.NUMBER),
        ],
    )
    def test_primitive_subclasses(self, tp, expected):
        assert reflect_schema(tp) == Definition(type=expected)

    def test_subclass_fields_in_object(self):
        schema = reflect_schema(Endpoint)
        assert schema.to_dict()["properties"] == {
            "host": {"type": "string"},
            "port": {"type": "integer"},
            "weight": {"type": "number"},
        }

    @pytest.mark.parametrize("tp", [Priority, Mode])
    def test_int_and_str_enums_unsupported(self, tp):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            reflect_schema(tp)
        assert exc_info.value.kind == "enum"


# ══════════════════════════════════════════════
# Sequences
# ══════════════════════════════════════════════


class TestSequences:
    """数组类型测试。"""

    @pytest.mark.parametrize(
        "tp",
        [List[int], list[int], Sequence[int], Set[int], FrozenSet[int], Tuple[int, ...], Tuple[int, int]],
    )
    def test_array_of_integers(self, tp):
        schema = reflect_schema(tp)
        assert schema.type == DataType.ARRAY
        assert schema.items == reflect_schema(int)

    def test_nested_arrays(self):
        schema = reflect_schema(List[List[str]])
        assert schema.to_dict() == {
            "type": "array",
            "items": {"type": "array", "items": {"type": "string"}},
        }

    def test_array_of_objects(self):
        schema = reflect_schema(List[Address])
        assert schema.items == reflect_schema(Address)

    def test_heterogeneous_tuple_unsupported(self):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            reflect_schema(Tuple[int, str])
        assert exc_info.value.kind == "tuple"

    def test_bare_list_unsupported(self):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            reflect_schema(list)
        assert exc_info.value.kind == "interface"

    def test_element_failure_propagates(self):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            reflect_schema(List[Dict[str, int]])
        assert exc_info.value.kind == "map"


# ══════════════════════════════════════════════
# Optional wrappers
# ══════════════════════════════════════════════


class TestOptional:
    """Optional 透明展开测试。"""

    @pytest.mark.parametrize("tp", [int, str, List[float], Address])
    def test_optional_is_transparent(self, tp):
        assert reflect_schema(Optional[tp]) == reflect_schema(tp)

    def test_pep604_union(self):
        assert reflect_schema(int | None) == reflect_schema(int)

    def test_multi_member_union_unsupported(self):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            reflect_schema(Union[int, str])
        assert exc_info.value.kind == "interface"

    def test_optional_of_unsupported_fails(self):
        with pytest.raises(UnsupportedTypeError):
            reflect_schema(Optional[Dict[str, int]])


# ══════════════════════════════════════════════
# Objects
# ══════════════════════════════════════════════


class TestObjects:
    """dataclass → object 测试。"""

    def test_person_schema(self):
        schema = reflect_schema(Person)
        assert schema.type == DataType.OBJECT
        assert schema.additional_properties is False
        assert set(schema.properties) == {
            "name", "age", "height", "active", "tags", "address", "nickname",
        }
        assert schema.required == ["name", "age", "height", "active", "address"]
        assert schema.properties["name"].description == "Full name"
        assert schema.properties["tags"].type == DataType.ARRAY
        assert schema.properties["nickname"].type == DataType.STRING

    def test_nested_object_is_closed(self):
        schema = reflect_schema(Person)
        address = schema.properties["address"]
        assert address.type == DataType.OBJECT
        assert address.additional_properties is False
        assert address.required == ["street", "zip"]

    def test_empty_dataclass(self):
        schema = reflect_schema(Empty)
        assert schema.properties == {}
        assert schema.to_dict() == {
            "type": "object",
            "properties": {},
            "additionalProperties": False,
        }

    def test_private_fields_skipped(self):
        schema = reflect_schema(WithPrivate)
        assert list(schema.properties) == ["visible"]
        assert schema.required == ["visible"]

    def test_map_field_aborts_object(self):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            reflect_schema(WithMap)
        assert exc_info.value.kind == "map"
        assert str(exc_info.value) == "unsupported type: map"

    def test_reflect_object_requires_dataclass(self):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            reflect_object(Color)
        assert exc_info.value.kind == "Color"
        assert exc_info.value.type is Color

    def test_func_field_aborts_object(self):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            reflect_object(WithCallback)
        assert exc_info.value.kind == "func"

    def test_same_type_twice_is_not_a_cycle(self):
        schema = reflect_schema(Pair)
        assert schema.properties["left"] == schema.properties["right"]

    def test_idempotent(self):
        first = reflect_schema(Person)
        second = reflect_schema(Person)
        assert first == second
        assert first is not second
        assert first.to_dict() == second.to_dict()

    def test_result_is_independent(self):
        first = reflect_schema(Person)
        first.properties["name"].description = "changed"
        assert reflect_schema(Person).properties["name"].description == "Full name"


# ══════════════════════════════════════════════
# Unsupported kinds
# ══════════════════════════════════════════════


class TestUnsupported:
    """不支持类型测试。"""

    @pytest.mark.parametrize(
        "tp, kind",
        [
            (None, "invalid"),
            ("Address", "invalid"),
            (Any, "interface"),
            (object, "interface"),
            (dict, "map"),
            (Dict[str, int], "map"),
            (Mapping[str, int], "map"),
            (OrderedDict, "map"),
            (complex, "complex"),
            (asyncio.Queue, "chan"),
            (queue.Queue, "chan"),
            (Callable[[], None], "func"),
            (memoryview, "uintptr"),
            (Color, "enum"),
        ],
    )
    def test_kind_named(self, tp, kind):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            reflect_schema(tp)
        assert exc_info.value.kind == kind
        assert exc_info.value.type is tp or exc_info.value.type == tp

    def test_unenumerated_kind_is_unsupported(self):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            reflect_schema(bytes)
        assert exc_info.value.kind == "bytes"

    def test_plain_class_is_unsupported(self):
        class NotADataclass:
            x: int

        with pytest.raises(UnsupportedTypeError):
            reflect_schema(NotADataclass)

    def test_is_schema_error(self):
        with pytest.raises(SchemaError):
            reflect_schema(complex)


# ══════════════════════════════════════════════
# Cycles
# ══════════════════════════════════════════════


class TestCycles:
    """自引用类型检测测试。"""

    def test_direct_self_reference(self):
        with pytest.raises(CyclicTypeError) as exc_info:
            reflect_schema(TreeNode)
        assert exc_info.value.type is TreeNode
        assert exc_info.value.path == (TreeNode,)

    def test_indirect_reference(self):
        with pytest.raises(CyclicTypeError) as exc_info:
            reflect_schema(Parent)
        assert exc_info.value.path == (Parent, Child)
        assert "Parent -> Child -> Parent" in str(exc_info.value)

    def test_detection_can_be_disabled(self):
        with pytest.raises(RecursionError):
            reflect_schema(TreeNode, SchemaConfig(detect_cycles=False))


# ══════════════════════════════════════════════
# generate_schema
# ══════════════════════════════════════════════


class TestGenerateSchema:
    """generate_schema 入口测试。"""

    def test_from_type(self):
        assert generate_schema(Address) == reflect_schema(Address)

    def test_from_value(self):
        value = Address(street="Main", zip_code=12345)
        assert generate_schema(value) == reflect_schema(Address)

    def test_from_primitive_values(self):
        assert generate_schema("text").type == DataType.STRING
        assert generate_schema(3).type == DataType.INTEGER
        assert generate_schema(2.5).type == DataType.NUMBER
        assert generate_schema(True).type == DataType.BOOLEAN

    def test_from_generic_alias(self):
        assert generate_schema(List[int]).type == DataType.ARRAY

    def test_none_is_invalid(self):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            generate_schema(None)
        assert exc_info.value.kind == "invalid"

    def test_map_value_fails(self):
        with pytest.raises(UnsupportedTypeError):
            generate_schema({"a": 1})


# ══════════════════════════════════════════════
# Definition serialization
# ══════════════════════════════════════════════


class TestDefinition:
    """Schema Node 序列化测试。"""

    def test_full_object_shape(self):
        schema = reflect_schema(Address)
        assert schema.to_dict() == {
            "type": "object",
            "properties": {
                "street": {"type": "string"},
                "zip": {"type": "integer"},
            },
            "required": ["street", "zip"],
            "additionalProperties": False,
        }

    def test_object_without_properties_emits_empty_map(self):
        d = Definition(type=DataType.OBJECT).to_dict()
        assert d["properties"] == {}
        assert d["additionalProperties"] is False

    def test_custom_additional_properties(self):
        d = Definition(type=DataType.OBJECT, additional_properties={"type": "string"}).to_dict()
        assert d["additionalProperties"] == {"type": "string"}

    def test_primitive_omits_empty_keys(self):
        d = Definition(type=DataType.STRING, enum=[], required=[]).to_dict()
        assert d == {"type": "string"}

    def test_enum_and_description(self):
        d = Definition(type=DataType.STRING, description="unit", enum=["c", "f"]).to_dict()
        assert d == {"type": "string", "description": "unit", "enum": ["c", "f"]}

    def test_to_json_keeps_unicode(self):
        text = Definition(type=DataType.STRING, description="城市").to_json()
        assert "城市" in text

    def test_from_dict(self):
        original = reflect_schema(Person)
        rebuilt = Definition.from_dict(original.to_dict())
        assert rebuilt.to_dict() == original.to_dict()
        assert rebuilt.properties["address"].type == DataType.OBJECT

    def test_plain_string_type(self):
        d = Definition(type="object").to_dict()
        assert d == {"type": "object", "properties": {}, "additionalProperties": False}

    def test_from_dict_unknown_type(self):
        with pytest.raises(ValueError):
            Definition.from_dict({"type": "tuple"})
