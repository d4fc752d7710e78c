"""Keccak-256 helpers and Ethereum-style addresses."""
from __future__ import annotations

from Crypto.Hash import keccak

ETH_SIGNED_MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n"


def keccak256(data: bytes) -> bytes:
    h = keccak.new(digest_bits=256)
    h.update(bytes(data))
    return h.digest()


def eth_message_hash(message: bytes) -> bytes:
    """EIP-191 personal-message hash of ``message``."""
    message = bytes(message)
    return keccak256(ETH_SIGNED_MESSAGE_PREFIX + str(len(message)).encode("ascii") + message)


def to_checksum_address(address: bytes) -> str:
    """EIP-55 mixed-case hex for a 20-byte address."""
    if len(address) != 20:
        raise ValueError(f"Address must be 20 bytes, got {len(address)}")
    lower = address.hex()
    digest = keccak256(lower.encode("ascii")).hex()
    return "0x" + "".join(
        ch.upper() if ch.isalpha() and int(digest[i], 16) >= 8 else ch
        for i, ch in enumerate(lower)
    )


def public_key_to_address(x: int, y: int) -> str:
    raw = x.to_bytes(32, byteorder="big") + y.to_bytes(32, byteorder="big")
    return to_checksum_address(keccak256(raw)[-20:])
