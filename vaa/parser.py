"""
vaa/parser.py

Guardian attestation (VAA) framing:

    version(1) || guardian_set_index(4, BE) || n_sigs(1)
    || n_sigs * [guardian_index(1) || r(32) || s(32) || recovery_id(1)]
    || body(rest)

The body itself starts with the 51-byte core message header (timestamp,
nonce, emitter chain, emitter address, sequence, consistency level) followed
by the emitted payload.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from errors import MalformedAttestation

logger = logging.getLogger(__name__)

HEADER_LEN = 6
SIGNATURE_LEN = 66
BODY_HEADER_LEN = 51


@dataclass(frozen=True)
class GuardianSignature:
    guardian_index: int
    r: bytes
    s: bytes
    recovery_id: int

    def to_bytes(self) -> bytes:
        return (
            self.guardian_index.to_bytes(1, byteorder="big")
            + bytes(self.r)
            + bytes(self.s)
            + self.recovery_id.to_bytes(1, byteorder="big")
        )


@dataclass(frozen=True)
class Vaa:
    version: int
    guardian_set_index: int
    signatures: Tuple[GuardianSignature, ...]
    body: bytes


@dataclass(frozen=True)
class VaaBody:
    timestamp: int
    nonce: int
    emitter_chain: int
    emitter_address: bytes
    sequence: int
    consistency_level: int
    payload: bytes


def parse_vaa(data: bytes) -> Vaa:
    """Split VAA bytes into header, signatures and body.

    Signatures are neither deduplicated nor checked for ordering.
    """
    buf = bytes(data)
    if len(buf) < HEADER_LEN:
        raise MalformedAttestation(f"VAA header truncated: {len(buf)} bytes, need {HEADER_LEN}")
    version = buf[0]
    guardian_set_index = int.from_bytes(buf[1:5], byteorder="big")
    n_sigs = buf[5]
    if n_sigs < 1:
        raise MalformedAttestation("No signatures in VAA")
    sigs_end = HEADER_LEN + n_sigs * SIGNATURE_LEN
    if len(buf) < sigs_end:
        raise MalformedAttestation(
            f"VAA declares {n_sigs} signatures ({sigs_end} bytes) but only {len(buf)} bytes present"
        )

    signatures = []
    offset = HEADER_LEN
    for _ in range(n_sigs):
        chunk = buf[offset:offset + SIGNATURE_LEN]
        signatures.append(
            GuardianSignature(
                guardian_index=chunk[0],
                r=chunk[1:33],
                s=chunk[33:65],
                recovery_id=chunk[65],
            )
        )
        offset += SIGNATURE_LEN

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Parsed VAA v%s gsi=%s sigs=%s body=%s bytes",
            version,
            guardian_set_index,
            n_sigs,
            len(buf) - sigs_end,
        )
    return Vaa(
        version=version,
        guardian_set_index=guardian_set_index,
        signatures=tuple(signatures),
        body=buf[sigs_end:],
    )


def serialize_vaa(vaa: Vaa) -> bytes:
    if not vaa.signatures:
        raise MalformedAttestation("A VAA needs at least one signature")
    if len(vaa.signatures) > 255:
        raise MalformedAttestation(f"Too many signatures: {len(vaa.signatures)}")
    for sig in vaa.signatures:
        if len(sig.r) != 32 or len(sig.s) != 32:
            raise MalformedAttestation("Signature r and s must be 32 bytes each")
    return (
        vaa.version.to_bytes(1, byteorder="big")
        + vaa.guardian_set_index.to_bytes(4, byteorder="big")
        + len(vaa.signatures).to_bytes(1, byteorder="big")
        + b"".join(sig.to_bytes() for sig in vaa.signatures)
        + bytes(vaa.body)
    )


def build_body(
    emitter_chain: int,
    emitter_address: bytes,
    sequence: int,
    payload: bytes,
    *,
    timestamp: int = 0,
    nonce: int = 0,
    consistency_level: int = 1,
) -> bytes:
    if len(emitter_address) != 32:
        raise ValueError("emitter_address must be 32 bytes")
    return (
        timestamp.to_bytes(4, byteorder="big")
        + nonce.to_bytes(4, byteorder="big")
        + emitter_chain.to_bytes(2, byteorder="big")
        + bytes(emitter_address)
        + sequence.to_bytes(8, byteorder="big")
        + consistency_level.to_bytes(1, byteorder="big")
        + bytes(payload)
    )


def parse_body(body: bytes) -> VaaBody:
    body = bytes(body)
    if len(body) < BODY_HEADER_LEN:
        raise MalformedAttestation(f"VAA body truncated: {len(body)} bytes, need {BODY_HEADER_LEN}")
    return VaaBody(
        timestamp=int.from_bytes(body[0:4], byteorder="big"),
        nonce=int.from_bytes(body[4:8], byteorder="big"),
        emitter_chain=int.from_bytes(body[8:10], byteorder="big"),
        emitter_address=body[10:42],
        sequence=int.from_bytes(body[42:50], byteorder="big"),
        consistency_level=body[50],
        payload=body[BODY_HEADER_LEN:],
    )
