"""
Type Reflector - 将 Python 类型注解递归转换为 JSON Schema。

类型映射:
- ``str`` → string，``int`` → integer，``float`` → number，``bool`` → boolean
- ``list[T]`` / ``Sequence[T]`` / ``set[T]`` / ``tuple[T, ...]`` → array (items = T)
- ``@dataclass`` → object (additionalProperties = false)
- ``Optional[T]`` → 透明展开为 T

其余类型（dict、Any、Callable、complex、Queue、Enum ...）一律抛出
:class:`UnsupportedTypeError`，不会生成半成品 schema。

Usage::

    from toolschema import generate_schema

    @dataclass
    class WeatherArgs:
        city: str = field(metadata=tags(description="City name"))
        unit: str = field(default="celsius", metadata=tags(
            json="unit,omitempty", enum="celsius,fahrenheit"))

    generate_schema(WeatherArgs).to_dict()
"""

from __future__ import annotations

import asyncio
import collections.abc
import dataclasses
import enum
import logging
import queue
import types
import typing
from typing import Any, Dict, List, Optional, Tuple

from toolschema.core.config import SchemaConfig
from toolschema.schema.definition import DataType, Definition
from toolschema.schema.errors import CyclicTypeError, UnsupportedTypeError
from toolschema.schema.fields import process_field

logger = logging.getLogger("toolschema.schema")

# ──────────────────────────────────────────────
# Type tables
# ──────────────────────────────────────────────

# bool before int: bool subclasses int
_PRIMITIVES: Tuple[Tuple[type, DataType], ...] = (
    (bool, DataType.BOOLEAN),
    (int, DataType.INTEGER),
    (float, DataType.NUMBER),
    (str, DataType.STRING),
)

_SEQUENCE_ORIGINS: Tuple[Any, ...] = (
    list,
    set,
    frozenset,
    collections.deque,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
)

_MAP_ORIGINS: Tuple[Any, ...] = (
    dict,
    collections.OrderedDict,
    collections.defaultdict,
    collections.Counter,
    collections.ChainMap,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
)

_CHANNEL_TYPES: Tuple[type, ...] = (asyncio.Queue, queue.Queue, queue.SimpleQueue)

_UNION_ORIGINS: Tuple[Any, ...] = (typing.Union,) + (
    (types.UnionType,) if hasattr(types, "UnionType") else ()
)

_NONE_TYPE = type(None)


def _kind_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or repr(tp)


# ──────────────────────────────────────────────
# Reflector
# ──────────────────────────────────────────────


class _Reflector:
    """One top-level reflection walk.

    Holds the record types on the current recursion path so that a record
    reaching itself raises :class:`CyclicTypeError` instead of recursing
    forever.
    """

    def __init__(self, config: Optional[SchemaConfig] = None) -> None:
        self.config = config or SchemaConfig()
        self._path: List[type] = []

    def reflect(self, tp: Any) -> Definition:
        if tp is None or isinstance(tp, (str, typing.ForwardRef)):
            raise UnsupportedTypeError("invalid", tp)
        if tp is Any or tp is object or isinstance(tp, typing.TypeVar):
            raise UnsupportedTypeError("interface", tp)

        # NewType: reflect the underlying type
        supertype = getattr(tp, "__supertype__", None)
        if supertype is not None:
            return self.reflect(supertype)

        origin = typing.get_origin(tp)
        if origin is not None:
            return self._reflect_generic(tp, origin)

        if isinstance(tp, type) and dataclasses.is_dataclass(tp):
            return self.reflect_object(tp)

        # IntEnum / StrEnum stay unsupported like every Enum
        if isinstance(tp, type) and not issubclass(tp, enum.Enum):
            for base, kind in _PRIMITIVES:
                if issubclass(tp, base):
                    return Definition(type=kind)

        raise UnsupportedTypeError(self._classify_unsupported(tp), tp)

    def _reflect_generic(self, tp: Any, origin: Any) -> Definition:
        args = typing.get_args(tp)

        if origin is typing.Annotated:
            return self.reflect(args[0])

        if origin in _UNION_ORIGINS:
            members = [a for a in args if a is not _NONE_TYPE]
            if len(members) == 1 and len(members) < len(args):
                return self.reflect(members[0])
            raise UnsupportedTypeError("interface", tp)

        if origin is tuple:
            return self._reflect_tuple(tp, args)

        if origin in _SEQUENCE_ORIGINS:
            if not args:
                raise UnsupportedTypeError("interface", tp)
            return Definition(type=DataType.ARRAY, items=self.reflect(args[0]))

        if origin in _MAP_ORIGINS:
            raise UnsupportedTypeError("map", tp)
        if origin is collections.abc.Callable:
            raise UnsupportedTypeError("func", tp)
        if isinstance(origin, type) and issubclass(origin, _CHANNEL_TYPES):
            raise UnsupportedTypeError("chan", tp)
        raise UnsupportedTypeError(_kind_name(origin), tp)

    def _reflect_tuple(self, tp: Any, args: Tuple[Any, ...]) -> Definition:
        # tuple[T, ...] is variable length; tuple[T, T] is fixed length
        if len(args) == 2 and args[1] is Ellipsis:
            element = args[0]
        elif args and all(a == args[0] for a in args):
            element = args[0]
        else:
            raise UnsupportedTypeError("tuple", tp)
        return Definition(type=DataType.ARRAY, items=self.reflect(element))

    def _classify_unsupported(self, tp: Any) -> str:
        if not isinstance(tp, type):
            if callable(tp):
                return "func"
            return "invalid"
        if tp is collections.abc.Callable:
            return "func"
        if issubclass(tp, enum.Enum):
            return "enum"
        if issubclass(tp, collections.abc.Mapping):
            return "map"
        if issubclass(tp, complex):
            return "complex"
        if issubclass(tp, _CHANNEL_TYPES):
            return "chan"
        if issubclass(tp, memoryview) or tp.__module__ == "ctypes":
            return "uintptr"
        if issubclass(tp, (types.FunctionType, types.BuiltinFunctionType, types.MethodType)):
            return "func"
        if tp in (list, tuple, set, frozenset):
            return "interface"
        return _kind_name(tp)

    def reflect_object(self, cls: type) -> Definition:
        """Build an object node from a dataclass.

        Only exported fields (no leading underscore) are considered. The first
        field that fails aborts the whole object.
        """
        if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
            raise UnsupportedTypeError(_kind_name(cls), cls)
        if self.config.detect_cycles and cls in self._path:
            raise CyclicTypeError(cls, self._path[self._path.index(cls):])

        try:
            hints = typing.get_type_hints(cls)
        except NameError as exc:
            raise UnsupportedTypeError("invalid", cls) from exc

        self._path.append(cls)
        try:
            properties: Dict[str, Definition] = {}
            required: List[str] = []
            for f in dataclasses.fields(cls):
                if f.name.startswith("_"):
                    continue
                info = process_field(f, hints.get(f.name, f.type), self.reflect)
                if info is None:
                    continue
                properties[info.name] = info.schema
                if info.required:
                    required.append(info.name)
        finally:
            self._path.pop()

        return Definition(
            type=DataType.OBJECT,
            properties=properties,
            required=required or None,
            additional_properties=False,
        )


# ──────────────────────────────────────────────
# Public API
# ──────────────────────────────────────────────


def reflect_schema(tp: Any, config: Optional[SchemaConfig] = None) -> Definition:
    """Reflect a type descriptor into a :class:`Definition`.

    Raises:
        UnsupportedTypeError: If any reachable type has no schema kind.
        CyclicTypeError: If a dataclass refers back to itself.
    """
    return _Reflector(config).reflect(tp)


def reflect_object(cls: type, config: Optional[SchemaConfig] = None) -> Definition:
    """Reflect a dataclass into an object :class:`Definition`."""
    return _Reflector(config).reflect_object(cls)


def is_type_descriptor(v: Any) -> bool:
    """Whether *v* is a type annotation rather than a plain value."""
    return (
        isinstance(v, type)
        or typing.get_origin(v) is not None
        or v is Any
        or isinstance(v, (typing.TypeVar, typing.ForwardRef))
        or getattr(v, "__supertype__", None) is not None
    )


def generate_schema(v: Any, config: Optional[SchemaConfig] = None) -> Definition:
    """Generate a schema from a type descriptor or a representative value.

    Values are reflected through ``type(v)``; ``None`` is an invalid type.
    """
    tp = v if v is None or is_type_descriptor(v) else type(v)
    schema = reflect_schema(tp, config)
    logger.debug("Generated schema for %s: %s", _kind_name(tp), schema.type)
    return schema
