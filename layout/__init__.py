from .codec import decode, deserialize, encode, serialize
from .nodes import (
    Bytes,
    Custom,
    FixedBytes,
    Node,
    Prefix,
    PrefixedEmpty,
    Sequence,
    Struct,
    TaggedUnion,
    UInt,
    Variant,
    struct,
    uint,
)

__all__ = [
    "encode",
    "decode",
    "serialize",
    "deserialize",
    "Node",
    "UInt",
    "FixedBytes",
    "Prefix",
    "Struct",
    "TaggedUnion",
    "Variant",
    "Sequence",
    "Bytes",
    "Custom",
    "PrefixedEmpty",
    "struct",
    "uint",
]
