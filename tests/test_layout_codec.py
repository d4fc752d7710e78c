import unittest

from errors import SchemaViolation, ValueOutOfRange
from layout import (
    Bytes,
    Custom,
    FixedBytes,
    Prefix,
    PrefixedEmpty,
    Sequence,
    TaggedUnion,
    UInt,
    Variant,
    decode,
    deserialize,
    encode,
    struct,
)


class TestPrimitives(unittest.TestCase):
    def test_uint_big_and_little_endian(self):
        self.assertEqual(encode(UInt(2), 0x0102), b"\x01\x02")
        self.assertEqual(encode(UInt(2, "little"), 0x0102), b"\x02\x01")
        self.assertEqual(deserialize(UInt(4), b"\x00\x00\x01\x00"), 256)
        self.assertEqual(deserialize(UInt(2, "little"), b"\x02\x01"), 0x0102)

    def test_uint_out_of_range(self):
        with self.assertRaises(ValueOutOfRange):
            encode(UInt(1), 256)
        with self.assertRaises(ValueOutOfRange):
            encode(UInt(8), -1)
        self.assertEqual(encode(UInt(8), (1 << 64) - 1), b"\xff" * 8)

    def test_uint_rejects_non_integers(self):
        with self.assertRaises(SchemaViolation):
            encode(UInt(1), "1")
        with self.assertRaises(SchemaViolation):
            encode(UInt(1), True)

    def test_fixed_bytes_length_checked(self):
        self.assertEqual(encode(FixedBytes(3), b"abc"), b"abc")
        with self.assertRaises(SchemaViolation):
            encode(FixedBytes(3), b"ab")

    def test_prefix_mismatch(self):
        schema = struct(("magic", Prefix(b"\x99N")), ("x", UInt(1)))
        self.assertEqual(deserialize(schema, b"\x99N\x05"), {"x": 5})
        with self.assertRaisesRegex(SchemaViolation, "prefix mismatch"):
            deserialize(schema, b"\x99M\x05")

    def test_truncated_input(self):
        with self.assertRaisesRegex(SchemaViolation, "truncated"):
            deserialize(UInt(4), b"\x00\x01")

    def test_trailing_bytes(self):
        value, consumed = decode(UInt(1), b"\x01\x02")
        self.assertEqual((value, consumed), (1, 1))
        with self.assertRaisesRegex(SchemaViolation, "trailing"):
            deserialize(UInt(1), b"\x01\x02")


class TestComposites(unittest.TestCase):
    def test_struct_field_order_and_missing_field(self):
        schema = struct(("a", UInt(1)), ("b", UInt(2)))
        self.assertEqual(encode(schema, {"b": 2, "a": 1}), b"\x01\x00\x02")
        with self.assertRaisesRegex(SchemaViolation, "missing field 'b'"):
            encode(schema, {"a": 1})

    def test_struct_rejects_duplicate_names(self):
        with self.assertRaises(ValueError):
            struct(("a", UInt(1)), ("a", UInt(1)))

    def test_tagged_union(self):
        schema = TaggedUnion(
            tag=UInt(1),
            variants={0: ("Locking", None), 1: ("Burning", UInt(2))},
        )
        self.assertEqual(encode(schema, Variant("Locking")), b"\x00")
        self.assertEqual(encode(schema, Variant("Burning", 7)), b"\x01\x00\x07")
        self.assertEqual(deserialize(schema, b"\x01\x00\x07"), Variant("Burning", 7))
        with self.assertRaisesRegex(SchemaViolation, "unmapped tag 2"):
            deserialize(schema, b"\x02")
        with self.assertRaises(SchemaViolation):
            encode(schema, Variant("Minting"))

    def test_counted_sequence(self):
        schema = Sequence(UInt(2), length_size=1)
        self.assertEqual(encode(schema, [1, 2]), b"\x02\x00\x01\x00\x02")
        self.assertEqual(deserialize(schema, b"\x02\x00\x01\x00\x02"), [1, 2])

    def test_sequence_fills_window(self):
        schema = Bytes(length_size=1, layout=Sequence(UInt(1)))
        self.assertEqual(encode(schema, [7, 8, 9]), b"\x03\x07\x08\x09")
        self.assertEqual(deserialize(schema, b"\x03\x07\x08\x09"), [7, 8, 9])

    def test_sequence_rejects_non_iterables(self):
        with self.assertRaises(SchemaViolation):
            encode(Sequence(UInt(1), length_size=1), 5)
        with self.assertRaises(SchemaViolation):
            encode(Sequence(UInt(1)), None)
        with self.assertRaises(SchemaViolation):
            encode(Sequence(UInt(1)), b"\x01\x02")

    def test_bytes_window_must_be_consumed(self):
        schema = Bytes(length_size=1, layout=UInt(1))
        with self.assertRaisesRegex(SchemaViolation, "unconsumed"):
            deserialize(schema, b"\x02\x01\x02")

    def test_bytes_length_exceeds_input(self):
        with self.assertRaises(SchemaViolation):
            deserialize(Bytes(length_size=2, layout=UInt(1)), b"\x00\x05\x01")

    def test_length_overflowing_prefix(self):
        with self.assertRaises(ValueOutOfRange):
            encode(Bytes(length_size=1), b"\x00" * 256)
        with self.assertRaises(ValueOutOfRange):
            encode(Sequence(UInt(1), length_size=1), [0] * 256)

    def test_nested_windows(self):
        inner = struct(("n", UInt(1)))
        schema = struct(
            ("outer", Bytes(length_size=2, layout=struct(
                ("middle", Bytes(length_size=1, layout=struct(
                    ("items", Bytes(length_size=1, layout=Sequence(inner))),
                ))),
            ))),
        )
        value = {"outer": {"middle": {"items": [{"n": 1}, {"n": 2}]}}}
        data = encode(schema, value)
        self.assertEqual(data, b"\x00\x04\x03\x02\x01\x02")
        self.assertEqual(deserialize(schema, data), value)

    def test_bytes_rest_of_input(self):
        self.assertEqual(deserialize(Bytes(), b"abc"), b"abc")
        self.assertEqual(encode(Bytes(), b"abc"), b"abc")

    def test_custom_conversion(self):
        schema = Custom(UInt(1), decode=lambda raw: raw == 1, encode=int, name="flag")
        self.assertIs(deserialize(schema, b"\x01"), True)
        self.assertEqual(encode(schema, False), b"\x00")


class TestOptionalTrailingBytes(unittest.TestCase):
    schema = struct(("x", UInt(1)), ("extra", Bytes(length_size=2, omit_if_empty=True)))

    def test_absent_field_decodes_empty_and_encodes_nothing(self):
        value = deserialize(self.schema, b"\x05")
        self.assertEqual(value, {"x": 5, "extra": b""})
        self.assertNotIsInstance(value["extra"], PrefixedEmpty)
        self.assertEqual(encode(self.schema, value), b"\x05")

    def test_explicit_zero_length_is_preserved(self):
        data = b"\x05\x00\x00"
        value = deserialize(self.schema, data)
        self.assertEqual(value["extra"], b"")
        self.assertIsInstance(value["extra"], PrefixedEmpty)
        self.assertEqual(encode(self.schema, value), data)

    def test_non_empty_payload(self):
        data = b"\x05\x00\x02\xab\xcd"
        value = deserialize(self.schema, data)
        self.assertEqual(value["extra"], b"\xab\xcd")
        self.assertEqual(encode(self.schema, value), data)

    def test_plain_empty_bytes_always_emit_prefix_without_omit(self):
        schema = struct(("extra", Bytes(length_size=2)))
        self.assertEqual(encode(schema, {"extra": b""}), b"\x00\x00")


if __name__ == "__main__":
    unittest.main()
