"""
layout/codec.py

Encoder/decoder for layout nodes. Each node is compiled once into a
``construct`` parser/builder and the compiled form is cached per node
object; construct's own errors are translated into SchemaViolation.
"""

from __future__ import annotations

import io
from collections.abc import Iterable, Mapping
from typing import Any, Dict, Tuple

from construct import (
    Adapter,
    Bytes as RawBytes,
    BytesInteger,
    ConstError,
    Const,
    Construct,
    ConstructError,
    ExprAdapter,
    FocusedSeq,
    GreedyBytes,
    GreedyRange,
    Pass,
    Prefixed,
    PrefixedArray,
    SizeofError,
    StreamError,
    Struct as RawStruct,
    Subconstruct,
    Switch,
    Terminated,
    TerminatedError,
    this,
)

from errors import SchemaViolation, ValueOutOfRange

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
)

_BYTES_LIKE = (bytes, bytearray, memoryview)


def _as_bytes(value: Any, path: str) -> bytes:
    if not isinstance(value, _BYTES_LIKE):
        raise SchemaViolation(f"{path}: expected bytes, got {type(value).__name__}")
    return bytes(value)


class _UInt(Adapter):
    def __init__(self, size: int, endian: str) -> None:
        super().__init__(BytesInteger(size, swapped=endian == "little"))
        self.size = size

    def _decode(self, obj, context, path):
        return obj

    def _encode(self, obj, context, path):
        if isinstance(obj, bool) or not isinstance(obj, int):
            raise SchemaViolation(f"{path}: expected an integer, got {type(obj).__name__}")
        if obj < 0 or obj >= 1 << (8 * self.size):
            raise ValueOutOfRange(f"{path}: {obj} does not fit in an unsigned {8 * self.size}-bit field")
        return int(obj)


class _FixedBytes(Adapter):
    def __init__(self, size: int) -> None:
        super().__init__(RawBytes(size))
        self.size = size

    def _decode(self, obj, context, path):
        return bytes(obj)

    def _encode(self, obj, context, path):
        raw = _as_bytes(obj, path)
        if len(raw) != self.size:
            raise SchemaViolation(f"{path}: expected {self.size} bytes, got {len(raw)}")
        return raw


class _RawBytes(Adapter):
    """Unstructured bytes; an explicit zero length decodes to PrefixedEmpty."""

    def __init__(self, subcon: Construct, prefixed: bool) -> None:
        super().__init__(subcon)
        self.prefixed = prefixed

    def _decode(self, obj, context, path):
        if self.prefixed and not obj:
            return PrefixedEmpty()
        return bytes(obj)

    def _encode(self, obj, context, path):
        return _as_bytes(obj, path)


class _Record(Adapter):
    """construct Struct exposed as a plain dict of the named fields."""

    def __init__(self, subcon: Construct, names: Tuple[str, ...]) -> None:
        super().__init__(subcon)
        self.names = names

    def _decode(self, obj, context, path):
        return {name: obj[name] for name in self.names}

    def _encode(self, obj, context, path):
        if not isinstance(obj, Mapping):
            raise SchemaViolation(f"{path}: expected a mapping, got {type(obj).__name__}")
        for name in self.names:
            if name not in obj:
                raise SchemaViolation(f"{path}: missing field '{name}'")
        return {name: obj[name] for name in self.names}


class _List(Adapter):
    def _decode(self, obj, context, path):
        return list(obj)

    def _encode(self, obj, context, path):
        if isinstance(obj, (str, Mapping) + _BYTES_LIKE) or not isinstance(obj, Iterable):
            raise SchemaViolation(f"{path}: expected a sequence, got {type(obj).__name__}")
        return list(obj)


class _Tagged(Adapter):
    def __init__(self, subcon: Construct, node: TaggedUnion) -> None:
        super().__init__(subcon)
        self.node = node

    def _decode(self, obj, context, path):
        name, _payload = self.node.variants[obj["tag"]]
        return Variant(name, obj["value"])

    def _encode(self, obj, context, path):
        if not isinstance(obj, Variant):
            raise SchemaViolation(f"{path}: expected a Variant, got {type(obj).__name__}")
        tag = self.node.tag_for(obj.name)
        if tag is None:
            raise SchemaViolation(f"{path}: unknown variant '{obj.name}'")
        return {"tag": tag, "value": obj.value}


class _UnmappedTag(Construct):
    def _parse(self, stream, context, path):
        raise SchemaViolation(f"{path}: unmapped tag {context.tag}")

    def _build(self, obj, stream, context, path):
        raise SchemaViolation(f"{path}: unmapped tag {context.tag}")

    def _sizeof(self, context, path):
        raise SizeofError("tagged union payload has no fixed size", path=path)


def _at_end(stream) -> bool:
    position = stream.tell()
    stream.seek(0, io.SEEK_END)
    end = stream.tell()
    stream.seek(position)
    return position >= end


class _OmitIfEmpty(Subconstruct):
    """Trailing field whose absence means empty; plain ``b""`` writes nothing."""

    def _parse(self, stream, context, path):
        if _at_end(stream):
            return b""
        return self.subcon._parsereport(stream, context, path)

    def _build(self, obj, stream, context, path):
        if isinstance(obj, _BYTES_LIKE) and not obj and not isinstance(obj, PrefixedEmpty):
            return b""
        return self.subcon._build(obj, stream, context, path)

    def _sizeof(self, context, path):
        raise SizeofError("optional trailing field has no fixed size", path=path)


def _window(inner: Construct) -> Construct:
    # the embedded value must use up its whole window
    return FocusedSeq("value", "value" / inner, Terminated)


def _compile_bytes(node: Bytes) -> Construct:
    if node.layout is None:
        body = GreedyBytes
    else:
        body = _window(_compile(node.layout))
    if node.length_size is None:
        return _RawBytes(body, prefixed=False) if node.layout is None else body
    compiled = Prefixed(_UInt(node.length_size, node.length_endian), body)
    if node.layout is None:
        compiled = _RawBytes(compiled, prefixed=True)
    if node.omit_if_empty:
        compiled = _OmitIfEmpty(compiled)
    return compiled


def _compile_sequence(node: Sequence) -> Construct:
    element = _compile(node.element)
    if node.length_size is not None:
        return _List(PrefixedArray(_UInt(node.length_size, node.length_endian), element))
    try:
        if element.sizeof() == 0:
            raise SchemaViolation("an implicit sequence element must consume bytes")
    except SizeofError:
        pass
    return _List(GreedyRange(element))


def _build_construct(node: Node) -> Construct:
    if isinstance(node, UInt):
        return _UInt(node.size, node.endian)
    if isinstance(node, FixedBytes):
        return _FixedBytes(node.size)
    if isinstance(node, Prefix):
        return ExprAdapter(Const(node.value), lambda obj, ctx: None, lambda obj, ctx: None)
    if isinstance(node, Struct):
        fields = [
            _compile(field) if isinstance(field, Prefix) else name / _compile(field)
            for name, field in node.fields
        ]
        return _Record(RawStruct(*fields), node.field_names())
    if isinstance(node, TaggedUnion):
        cases = {
            tag: Pass if payload is None else _compile(payload)
            for tag, (_name, payload) in node.variants.items()
        }
        inner = RawStruct(
            "tag" / _compile(node.tag),
            "value" / Switch(this.tag, cases, default=_UnmappedTag()),
        )
        return _Tagged(inner, node)
    if isinstance(node, Sequence):
        return _compile_sequence(node)
    if isinstance(node, Bytes):
        return _compile_bytes(node)
    if isinstance(node, Custom):
        return ExprAdapter(
            _compile(node.base),
            lambda obj, ctx: node.decode(obj),
            lambda obj, ctx: node.encode(obj),
        )
    raise SchemaViolation(f"unsupported layout node {node!r}")


# keyed by id(); the node is held alongside so the id cannot be reused
_COMPILED: Dict[int, Tuple[Node, Construct]] = {}


def _compile(node: Node) -> Construct:
    cached = _COMPILED.get(id(node))
    if cached is not None and cached[0] is node:
        return cached[1]
    compiled = _build_construct(node)
    _COMPILED[id(node)] = (node, compiled)
    return compiled


def _translate(exc: ConstructError) -> SchemaViolation:
    if isinstance(exc, ConstError):
        return SchemaViolation(f"prefix mismatch: {exc}")
    if isinstance(exc, TerminatedError):
        return SchemaViolation(f"unconsumed bytes inside length window: {exc}")
    if isinstance(exc, StreamError):
        return SchemaViolation(f"truncated input: {exc}")
    return SchemaViolation(str(exc))


def encode(schema: Node, value: Any) -> bytes:
    """Serialize ``value`` according to ``schema``."""
    try:
        return _compile(schema).build(value)
    except ConstructError as exc:
        raise _translate(exc) from exc


def decode(schema: Node, data: bytes) -> Tuple[Any, int]:
    """Deserialize a value from the start of ``data``.

    Returns the value and the number of bytes consumed; trailing bytes are
    left to the caller.
    """
    stream = io.BytesIO(bytes(data))
    try:
        value = _compile(schema).parse_stream(stream)
    except ConstructError as exc:
        raise _translate(exc) from exc
    return value, stream.tell()


def deserialize(schema: Node, data: bytes) -> Any:
    """Deserialize ``data`` and require that every byte belongs to the value."""
    value, consumed = decode(schema, data)
    if consumed != len(data):
        raise SchemaViolation(f"value: {len(data) - consumed} trailing bytes after decoding")
    return value


serialize = encode
