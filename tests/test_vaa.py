import unittest

from errors import MalformedAttestation
from vaa import (
    DigestScheme,
    GuardianSignature,
    RecoveredSigner,
    RecoveryFailed,
    Vaa,
    address_from_private_key,
    build_body,
    digest_for,
    double_keccak_digest,
    eth_message_hash,
    eth_signed_message_digest,
    keccak256,
    parse_body,
    parse_vaa,
    recover_address,
    recover_all,
    recover_signer,
    serialize_vaa,
    sign_digest,
    to_checksum_address,
)

PRIVATE_KEY_ONE = (1).to_bytes(32, "big")
ADDRESS_ONE = "0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf"
PRIVATE_KEY_TWO = (2).to_bytes(32, "big")


def _body(payload: bytes = b"hello") -> bytes:
    return build_body(2, b"\x00" * 12 + b"\xab" * 20, 42, payload, timestamp=1700000000, nonce=7)


class TestHashing(unittest.TestCase):
    def test_keccak_empty(self):
        self.assertEqual(
            keccak256(b"").hex(),
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470",
        )

    def test_eth_message_hash_uses_decimal_length(self):
        message = b"\x11" * 32
        self.assertEqual(
            eth_message_hash(message),
            keccak256(b"\x19Ethereum Signed Message:\n32" + message),
        )

    def test_checksum_address(self):
        raw = bytes.fromhex("5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")
        self.assertEqual(to_checksum_address(raw), "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed")
        with self.assertRaises(ValueError):
            to_checksum_address(b"\x00" * 19)

    def test_digest_schemes(self):
        body = _body()
        self.assertEqual(digest_for(DigestScheme.DOUBLE_KECCAK, body), keccak256(keccak256(body)))
        self.assertEqual(double_keccak_digest(body), keccak256(keccak256(body)))
        self.assertEqual(
            eth_signed_message_digest(body),
            keccak256(b"\x19Ethereum Signed Message:\n32" + keccak256(body)),
        )
        self.assertEqual(DigestScheme.ETH_SIGNED_MESSAGE.value, "ethSignedMsgHash32")


class TestParse(unittest.TestCase):
    def _signed_vaa(self, *keys: bytes) -> Vaa:
        body = _body()
        digest = double_keccak_digest(body)
        signatures = tuple(sign_digest(digest, key, guardian_index=i) for i, key in enumerate(keys))
        return Vaa(version=1, guardian_set_index=4, signatures=signatures, body=body)

    def test_pack_and_parse(self):
        vaa = self._signed_vaa(PRIVATE_KEY_ONE, PRIVATE_KEY_TWO)
        data = serialize_vaa(vaa)
        self.assertEqual(len(data), 6 + 2 * 66 + len(vaa.body))
        parsed = parse_vaa(data)
        self.assertEqual(parsed, vaa)
        self.assertEqual(parsed.guardian_set_index, 4)
        self.assertEqual([sig.guardian_index for sig in parsed.signatures], [0, 1])
        self.assertIn(parsed.signatures[0].recovery_id, (0, 1))

    def test_zero_signatures_rejected(self):
        data = b"\x01" + (0).to_bytes(4, "big") + b"\x00" + _body()
        with self.assertRaisesRegex(MalformedAttestation, "No signatures in VAA"):
            parse_vaa(data)

    def test_truncated_header(self):
        with self.assertRaises(MalformedAttestation):
            parse_vaa(b"\x01\x00\x00")

    def test_truncated_signatures(self):
        data = serialize_vaa(self._signed_vaa(PRIVATE_KEY_ONE))
        # claim two signatures while only one is present and the body is dropped
        tampered = data[:5] + b"\x02" + data[6:6 + 66]
        with self.assertRaises(MalformedAttestation):
            parse_vaa(tampered)

    def test_serialize_requires_signature(self):
        with self.assertRaises(MalformedAttestation):
            serialize_vaa(Vaa(version=1, guardian_set_index=0, signatures=(), body=_body()))

    def test_parse_body(self):
        body = parse_body(_body(b"\x99NTT"))
        self.assertEqual(body.timestamp, 1700000000)
        self.assertEqual(body.nonce, 7)
        self.assertEqual(body.emitter_chain, 2)
        self.assertEqual(body.emitter_address, b"\x00" * 12 + b"\xab" * 20)
        self.assertEqual(body.sequence, 42)
        self.assertEqual(body.consistency_level, 1)
        self.assertEqual(body.payload, b"\x99NTT")
        with self.assertRaises(MalformedAttestation):
            parse_body(b"\x00" * 50)


class TestRecovery(unittest.TestCase):
    def test_address_from_private_key(self):
        self.assertEqual(address_from_private_key(PRIVATE_KEY_ONE), ADDRESS_ONE)

    def test_recover_under_double_keccak(self):
        body = _body()
        signature = sign_digest(double_keccak_digest(body), PRIVATE_KEY_ONE)
        report = recover_signer(signature, body)
        self.assertEqual(report.results[DigestScheme.DOUBLE_KECCAK], RecoveredSigner(ADDRESS_ONE))
        self.assertEqual(report.matching_schemes(ADDRESS_ONE), [DigestScheme.DOUBLE_KECCAK])
        self.assertEqual(report.matching_schemes(ADDRESS_ONE.lower()), [DigestScheme.DOUBLE_KECCAK])

    def test_recover_under_eth_signed_message(self):
        body = _body()
        signature = sign_digest(eth_signed_message_digest(body), PRIVATE_KEY_TWO)
        report = recover_signer(signature, body)
        expected = address_from_private_key(PRIVATE_KEY_TWO)
        self.assertEqual(report.matching_schemes(expected), [DigestScheme.ETH_SIGNED_MESSAGE])

    def test_recovery_id_27_accepted(self):
        digest = double_keccak_digest(_body())
        signature = sign_digest(digest, PRIVATE_KEY_ONE)
        legacy = GuardianSignature(0, signature.r, signature.s, signature.recovery_id + 27)
        self.assertEqual(recover_address(digest, legacy), RecoveredSigner(ADDRESS_ONE))

    def test_recover_all(self):
        body = _body()
        digest = double_keccak_digest(body)
        vaa = Vaa(
            version=1,
            guardian_set_index=0,
            signatures=(sign_digest(digest, PRIVATE_KEY_ONE, 0), sign_digest(digest, PRIVATE_KEY_TWO, 1)),
            body=body,
        )
        reports = recover_all(parse_vaa(serialize_vaa(vaa)))
        signers = [report.results[DigestScheme.DOUBLE_KECCAK].address for report in reports]
        self.assertEqual(signers, [ADDRESS_ONE, address_from_private_key(PRIVATE_KEY_TWO)])

    def test_invalid_signatures_do_not_raise(self):
        digest = double_keccak_digest(_body())
        cases = [
            GuardianSignature(0, b"\x00" * 32, b"\x01" * 32, 0),
            GuardianSignature(0, b"\xff" * 32, b"\x01" * 32, 0),
            GuardianSignature(0, b"\x01" * 32, b"\x01" * 32, 5),
            GuardianSignature(0, b"\x01" * 31, b"\x01" * 32, 0),
        ]
        for signature in cases:
            self.assertIsInstance(recover_address(digest, signature), RecoveryFailed)

    def test_report_survives_failures(self):
        body = _body()
        report = recover_signer(GuardianSignature(3, b"\x00" * 32, b"\x00" * 32, 0), body)
        for result in report.results.values():
            self.assertIsInstance(result, RecoveryFailed)
        as_dict = report.to_dict()
        self.assertEqual(as_dict["sig"]["guardianIndex"], 3)
        self.assertTrue(as_dict["recovered"]["doubleKeccak"].startswith("(recover failed:"))
        self.assertEqual(set(as_dict["digests"]), {"doubleKeccak", "ethSignedMsgHash32"})


if __name__ == "__main__":
    unittest.main()
