"""
vaa/recovery.py

Offline signer recovery for VAA signatures.

Each signature is tried against two digest conventions side by side so a
caller can tell which one a given chain or tool signed with:

* DOUBLE_KECCAK: keccak256(keccak256(body)), what guardians sign.
* ETH_SIGNED_MESSAGE: EIP-191 hash of keccak256(body), what wallet-style
  signers produce.

No guardian-set membership or quorum checks happen here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Union

from py_ecc.secp256k1.secp256k1 import N, ecdsa_raw_recover, ecdsa_raw_sign, privtopub

from .hashing import eth_message_hash, keccak256, public_key_to_address
from .parser import GuardianSignature, Vaa

logger = logging.getLogger(__name__)


class DigestScheme(Enum):
    DOUBLE_KECCAK = "doubleKeccak"
    ETH_SIGNED_MESSAGE = "ethSignedMsgHash32"


@dataclass(frozen=True)
class RecoveredSigner:
    address: str


@dataclass(frozen=True)
class RecoveryFailed:
    reason: str


RecoveryResult = Union[RecoveredSigner, RecoveryFailed]


def double_keccak_digest(body: bytes) -> bytes:
    return keccak256(keccak256(body))


def eth_signed_message_digest(body: bytes) -> bytes:
    return eth_message_hash(keccak256(body))


_DIGESTS = {
    DigestScheme.DOUBLE_KECCAK: double_keccak_digest,
    DigestScheme.ETH_SIGNED_MESSAGE: eth_signed_message_digest,
}


def digest_for(scheme: DigestScheme, body: bytes) -> bytes:
    return _DIGESTS[scheme](body)


def _normalize_recovery_id(recovery_id: int) -> int:
    # VAAs carry 0/1; tooling sometimes hands over 27/28
    return recovery_id - 27 if recovery_id >= 27 else recovery_id


def recover_address(digest: bytes, signature: GuardianSignature) -> RecoveryResult:
    """Recover the signing address for ``digest``; failures come back as RecoveryFailed."""
    v = _normalize_recovery_id(signature.recovery_id)
    if v not in (0, 1):
        return RecoveryFailed(f"invalid recovery id {signature.recovery_id}")
    if len(signature.r) != 32 or len(signature.s) != 32:
        return RecoveryFailed("r and s must be 32 bytes each")
    r = int.from_bytes(signature.r, byteorder="big")
    s = int.from_bytes(signature.s, byteorder="big")
    if not (0 < r < N and 0 < s < N):
        return RecoveryFailed("signature r or s out of range")
    try:
        x, y = ecdsa_raw_recover(digest, (v + 27, r, s))
    except (ValueError, ArithmeticError) as exc:
        return RecoveryFailed(str(exc))
    if x == 0 and y == 0:
        return RecoveryFailed("recovered point at infinity")
    return RecoveredSigner(public_key_to_address(x, y))


@dataclass(frozen=True)
class RecoveryReport:
    signature: GuardianSignature
    digests: Dict[DigestScheme, bytes]
    results: Dict[DigestScheme, RecoveryResult]

    def matching_schemes(self, address: str) -> List[DigestScheme]:
        """Schemes under which ``address`` is the recovered signer."""
        wanted = address.lower()
        return [
            scheme
            for scheme, result in self.results.items()
            if isinstance(result, RecoveredSigner) and result.address.lower() == wanted
        ]

    def to_dict(self) -> Dict[str, Any]:
        recovered = {}
        for scheme, result in self.results.items():
            if isinstance(result, RecoveredSigner):
                recovered[scheme.value] = result.address
            else:
                recovered[scheme.value] = f"(recover failed: {result.reason})"
        return {
            "sig": {
                "guardianIndex": self.signature.guardian_index,
                "r": "0x" + self.signature.r.hex(),
                "s": "0x" + self.signature.s.hex(),
                "v": self.signature.recovery_id,
            },
            "digests": {scheme.value: "0x" + digest.hex() for scheme, digest in self.digests.items()},
            "recovered": recovered,
        }


def recover_signer(signature: GuardianSignature, body: bytes) -> RecoveryReport:
    digests = {scheme: digest_for(scheme, body) for scheme in DigestScheme}
    results = {scheme: recover_address(digest, signature) for scheme, digest in digests.items()}
    for scheme, result in results.items():
        if isinstance(result, RecoveryFailed):
            logger.debug(
                "Guardian %s: %s recovery failed: %s",
                signature.guardian_index,
                scheme.value,
                result.reason,
            )
    return RecoveryReport(signature=signature, digests=digests, results=results)


def recover_all(vaa: Vaa) -> List[RecoveryReport]:
    return [recover_signer(signature, vaa.body) for signature in vaa.signatures]


def address_from_private_key(private_key: bytes) -> str:
    x, y = privtopub(bytes(private_key))
    return public_key_to_address(x, y)


def sign_digest(digest: bytes, private_key: bytes, guardian_index: int = 0) -> GuardianSignature:
    """Sign a 32-byte digest the way the devnet guardian does (recovery id 0/1)."""
    if len(digest) != 32:
        raise ValueError(f"digest must be 32 bytes, got {len(digest)}")
    if len(private_key) != 32:
        raise ValueError(f"private key must be 32 bytes, got {len(private_key)}")
    v, r, s = ecdsa_raw_sign(bytes(digest), bytes(private_key))
    return GuardianSignature(
        guardian_index=guardian_index,
        r=r.to_bytes(32, byteorder="big"),
        s=s.to_bytes(32, byteorder="big"),
        recovery_id=v - 27,
    )
