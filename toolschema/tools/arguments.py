"""Decode raw tool-call arguments into the dataclass that described them."""

from __future__ import annotations

import dataclasses
import json
import types
import typing
from typing import Any, Dict, Type, TypeVar

from toolschema.schema.fields import resolve_name

T = TypeVar("T")

_NONE_TYPE = type(None)
_UNION_ORIGINS = (typing.Union,) + ((types.UnionType,) if hasattr(types, "UnionType") else ())


class ArgumentsError(ValueError):
    """Raised when raw arguments do not fit the parameter dataclass."""


def decode_arguments(raw: Any, params_cls: Type[T]) -> T:
    """Parse raw JSON arguments into an instance of *params_cls*.

    Property names follow the same ``json`` tags used for the schema, so a
    field declared as ``json="city_name"`` is read from ``"city_name"``.
    Missing optional fields keep their dataclass defaults.

    Raises:
        ArgumentsError: If the payload is not UTF-8 JSON, not a JSON object,
            or a required field is missing.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ArgumentsError(f"arguments are not valid UTF-8: {exc}") from exc
    if isinstance(raw, str):
        try:
            data = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as exc:
            raise ArgumentsError(f"invalid JSON arguments: {exc}") from exc
    else:
        data = raw
    return _decode_object(data, params_cls)


def _decode_object(data: Any, cls: Any) -> Any:
    if not isinstance(data, dict):
        raise ArgumentsError(f"expected object for {cls.__name__}, got {type(data).__name__}")

    hints = typing.get_type_hints(cls)
    kwargs: Dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if f.name.startswith("_") or not f.init:
            continue
        name, _ = resolve_name(f.name, f.metadata or {})
        if not name or name not in data:
            continue
        kwargs[f.name] = _decode_value(data[name], hints.get(f.name, f.type))

    try:
        return cls(**kwargs)
    except TypeError as exc:
        raise ArgumentsError(f"cannot build {cls.__name__}: {exc}") from exc


def _decode_value(value: Any, tp: Any) -> Any:
    if value is None:
        return None

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin is typing.Annotated:
        return _decode_value(value, args[0])

    if origin in _UNION_ORIGINS:
        members = [a for a in args if a is not _NONE_TYPE]
        return _decode_value(value, members[0]) if len(members) == 1 else value

    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        return _decode_object(value, tp)

    if origin is not None and args and isinstance(value, list):
        if origin is tuple:
            element = args[0]
            return tuple(_decode_value(v, element) for v in value)
        items = [_decode_value(v, args[0]) for v in value]
        if origin in (set, frozenset):
            return origin(items)
        return items

    if tp is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    return value
