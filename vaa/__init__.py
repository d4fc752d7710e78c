from .hashing import eth_message_hash, keccak256, public_key_to_address, to_checksum_address
from .parser import (
    GuardianSignature,
    Vaa,
    VaaBody,
    build_body,
    parse_body,
    parse_vaa,
    serialize_vaa,
)
from .recovery import (
    DigestScheme,
    RecoveredSigner,
    RecoveryFailed,
    RecoveryReport,
    address_from_private_key,
    digest_for,
    double_keccak_digest,
    eth_signed_message_digest,
    recover_address,
    recover_all,
    recover_signer,
    sign_digest,
)

__all__ = [
    "eth_message_hash",
    "keccak256",
    "public_key_to_address",
    "to_checksum_address",
    "GuardianSignature",
    "Vaa",
    "VaaBody",
    "build_body",
    "parse_body",
    "parse_vaa",
    "serialize_vaa",
    "DigestScheme",
    "RecoveredSigner",
    "RecoveryFailed",
    "RecoveryReport",
    "address_from_private_key",
    "digest_for",
    "double_keccak_digest",
    "eth_signed_message_digest",
    "recover_address",
    "recover_all",
    "recover_signer",
    "sign_digest",
]
