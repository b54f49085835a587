"""Schema reflection errors."""

from __future__ import annotations

from typing import Any, Sequence, Tuple


class SchemaError(Exception):
    """Base class for all schema generation failures."""


class UnsupportedTypeError(SchemaError):
    """Raised when a type cannot be represented in the schema vocabulary.

    Attributes:
        kind: Short kind name (``"map"``, ``"func"``, ``"complex"`` ...).
        type: The offending type descriptor.
    """

    def __init__(self, kind: str, type_: Any = None) -> None:
        self.kind = kind
        self.type = type_
        super().__init__(f"unsupported type: {kind}")


class CyclicTypeError(SchemaError):
    """Raised when a record type refers back to itself.

    Attributes:
        type: The record type that was reached twice.
        path: Record types on the recursion path, outermost first.
    """

    def __init__(self, type_: Any, path: Sequence[Any] = ()) -> None:
        self.type = type_
        self.path: Tuple[Any, ...] = tuple(path)
        chain = " -> ".join(getattr(t, "__name__", repr(t)) for t in (*self.path, type_))
        super().__init__(f"cyclic type: {chain}")
