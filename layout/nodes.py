"""
layout/nodes.py

Schema nodes for the binary layout codec. A schema is a plain value built
from these nodes, so message layouts can be composed and parameterised at
runtime; layout.codec compiles each node into a construct parser/builder.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Tuple, Union

ENDIANNESS = ("big", "little")


class PrefixedEmpty(bytes):
    """Zero-length bytes that were decoded from an explicit zero length prefix.

    Compares equal to ``b""``. Encoding it emits the prefix even for fields
    declared ``omit_if_empty``.
    """

    def __new__(cls, value: bytes = b"") -> "PrefixedEmpty":
        if value:
            raise ValueError("PrefixedEmpty can only hold empty bytes")
        return super().__new__(cls, b"")

    def __reduce__(self):
        return (PrefixedEmpty, ())

    def __repr__(self) -> str:
        return "PrefixedEmpty()"


@dataclass(frozen=True)
class UInt:
    """Fixed-width unsigned integer."""

    size: int
    endian: str = "big"

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError(f"UInt size must be positive, got {self.size}")
        if self.endian not in ENDIANNESS:
            raise ValueError(f"Unknown endianness {self.endian!r}")

    @property
    def max_value(self) -> int:
        return (1 << (8 * self.size)) - 1


@dataclass(frozen=True)
class FixedBytes:
    size: int


@dataclass(frozen=True)
class Prefix:
    """Constant magic bytes. Checked on decode, never part of the decoded value."""

    value: bytes


@dataclass(frozen=True)
class Struct:
    fields: Tuple[Tuple[str, "Node"], ...]

    def field_names(self) -> Tuple[str, ...]:
        return tuple(name for name, node in self.fields if not isinstance(node, Prefix))


@dataclass(frozen=True)
class Variant:
    """Decoded value of a tagged union: the variant name and its payload (or None)."""

    name: str
    value: Any = None


@dataclass(frozen=True)
class TaggedUnion:
    tag: UInt
    variants: Mapping[int, Tuple[str, Optional["Node"]]]

    def tag_for(self, name: str) -> Optional[int]:
        for tag, (variant_name, _payload) in self.variants.items():
            if variant_name == name:
                return tag
        return None


@dataclass(frozen=True)
class Sequence:
    """Repeated element. ``length_size=None`` means the rest of the enclosing window."""

    element: "Node"
    length_size: Optional[int] = None
    length_endian: str = "big"


@dataclass(frozen=True)
class Bytes:
    """Variable-length bytes.

    ``length_size`` is the width of the length prefix, or None to take the rest
    of the enclosing window. ``layout`` decodes the bytes inside the window as
    another node. ``omit_if_empty`` marks a trailing field whose absence means
    empty: an empty value is written with no prefix at all.
    """

    length_size: Optional[int] = None
    layout: Optional["Node"] = None
    omit_if_empty: bool = False
    length_endian: str = "big"


@dataclass(frozen=True)
class Custom:
    """A base node plus a transform between its raw value and a richer type."""

    base: "Node"
    decode: Callable[[Any], Any]
    encode: Callable[[Any], Any]
    name: str = "custom"


Node = Union[UInt, FixedBytes, Prefix, Struct, TaggedUnion, Sequence, Bytes, Custom]


def struct(*fields: Tuple[str, Node]) -> Struct:
    """Build a Struct from ``(name, node)`` pairs in declaration order."""
    names = [name for name, node in fields if not isinstance(node, Prefix)]
    if len(names) != len(set(names)):
        raise ValueError(f"Duplicate field names in struct: {names}")
    return Struct(fields=tuple(fields))


def uint(size: int, endian: str = "big") -> UInt:
    return UInt(size, endian)
