"""
ntt/layouts.py

Message schemas for Native Token Transfers, composed from layout nodes.

The manager and transceiver wrappers take their inner payload schema as an
argument, so another payload (for example the multi-token transfer) slots in
without touching the wrappers.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any, Dict, Optional

from errors import SchemaViolation, ValueOutOfRange
from layout import Bytes, Custom, FixedBytes, Node, Prefix, Struct, UInt, struct

from .amount import TrimmedAmount
from .chains import to_chain_id, to_chain_name

logger = logging.getLogger(__name__)

NTT_PREFIX = bytes.fromhex("994e5454")  # \x99NTT
GMP_PREFIX = bytes.fromhex("99474d50")  # \x99GMP
WH_TRANSCEIVER_PREFIX = bytes.fromhex("9945ff10")
TRANSCEIVER_INFO_PREFIX = bytes.fromhex("9c23bd3b")
TRANSCEIVER_REGISTRATION_PREFIX = bytes.fromhex("18fc67c2")


class Mode(IntEnum):
    LOCKING = 0
    BURNING = 1


def _chain_from_id(chain_id: int) -> str:
    try:
        return to_chain_name(chain_id)
    except ValueError as exc:
        raise SchemaViolation(str(exc)) from exc


def _chain_to_id(name: Any) -> int:
    if not isinstance(name, str):
        raise SchemaViolation(f"chain must be a chain name, got {type(name).__name__}")
    try:
        return to_chain_id(name)
    except ValueError as exc:
        raise ValueOutOfRange(str(exc)) from exc


def chain_item() -> Custom:
    """u16 Wormhole chain id exposed as a chain name."""
    return Custom(UInt(2), decode=_chain_from_id, encode=_chain_to_id, name="chain")


def _mode_from_raw(raw: int) -> Mode:
    try:
        return Mode(raw)
    except ValueError as exc:
        raise SchemaViolation(f"unknown transfer mode {raw}") from exc


def _mode_to_raw(value: Any) -> int:
    try:
        return Mode(value).value
    except ValueError as exc:
        raise ValueOutOfRange(f"unknown transfer mode {value!r}") from exc


def _trimmed_from_raw(raw: Dict[str, int]) -> TrimmedAmount:
    return TrimmedAmount(amount=raw["amount"], decimals=raw["decimals"])


def _trimmed_to_raw(value: Any) -> Dict[str, int]:
    if not isinstance(value, TrimmedAmount):
        raise SchemaViolation(f"expected TrimmedAmount, got {type(value).__name__}")
    return {"decimals": value.decimals, "amount": value.amount}


UNIVERSAL_ADDRESS = FixedBytes(32)

MODE_ITEM = Custom(UInt(1), decode=_mode_from_raw, encode=_mode_to_raw, name="mode")

TRIMMED_AMOUNT_ITEM = Custom(
    struct(("decimals", UInt(1)), ("amount", UInt(8))),
    decode=_trimmed_from_raw,
    encode=_trimmed_to_raw,
    name="trimmed_amount",
)

NATIVE_TOKEN_TRANSFER_LAYOUT = struct(
    ("prefix", Prefix(NTT_PREFIX)),
    ("trimmed_amount", TRIMMED_AMOUNT_ITEM),
    ("source_token", UNIVERSAL_ADDRESS),
    ("recipient_address", UNIVERSAL_ADDRESS),
    ("recipient_chain", chain_item()),
    # Writers omit the length entirely when there is no additional payload
    ("additional_payload", Bytes(length_size=2, omit_if_empty=True)),
)

TOKEN_META_LAYOUT = struct(
    ("name", UNIVERSAL_ADDRESS),
    ("symbol", UNIVERSAL_ADDRESS),
    ("decimals", UInt(1)),
)

TOKEN_ID_LAYOUT = struct(
    ("chain_id", chain_item()),
    ("token_address", UNIVERSAL_ADDRESS),
)

TOKEN_INFO_LAYOUT = struct(
    ("meta", TOKEN_META_LAYOUT),
    ("token", TOKEN_ID_LAYOUT),
)

MULTI_TOKEN_TRANSFER_LAYOUT = struct(
    ("prefix", Prefix(NTT_PREFIX)),
    ("trimmed_amount", TRIMMED_AMOUNT_ITEM),
    ("token", TOKEN_INFO_LAYOUT),
    ("sender", UNIVERSAL_ADDRESS),
    ("to", UNIVERSAL_ADDRESS),
)

TRANSCEIVER_INFO_LAYOUT = struct(
    ("prefix", Prefix(TRANSCEIVER_INFO_PREFIX)),
    ("manager_address", UNIVERSAL_ADDRESS),
    ("mode", MODE_ITEM),
    ("token", UNIVERSAL_ADDRESS),
    ("decimals", UInt(1)),
)

TRANSCEIVER_REGISTRATION_LAYOUT = struct(
    ("prefix", Prefix(TRANSCEIVER_REGISTRATION_PREFIX)),
    ("chain", chain_item()),
    ("transceiver", UNIVERSAL_ADDRESS),
)


def ntt_manager_message_layout(payload: Optional[Node] = None) -> Struct:
    """Manager envelope; ``payload`` is the schema of the embedded message (raw bytes if None)."""
    return struct(
        ("id", FixedBytes(32)),
        ("sender", UNIVERSAL_ADDRESS),
        ("payload", Bytes(length_size=2, layout=payload)),
    )


def transceiver_message_layout(
    prefix: bytes,
    manager_payload: Optional[Node] = None,
    transceiver_payload: Optional[Node] = None,
) -> Struct:
    return struct(
        ("prefix", Prefix(prefix)),
        ("source_ntt_manager", UNIVERSAL_ADDRESS),
        ("recipient_ntt_manager", UNIVERSAL_ADDRESS),
        ("ntt_manager_payload", Bytes(length_size=2, layout=manager_payload)),
        ("transceiver_payload", Bytes(length_size=2, layout=transceiver_payload)),
    )


def wormhole_transceiver_message_layout(manager_payload: Optional[Node] = None) -> Struct:
    return transceiver_message_layout(WH_TRANSCEIVER_PREFIX, manager_payload)


def generic_message_layout(data: Optional[Node] = None) -> Struct:
    return struct(
        ("prefix", Prefix(GMP_PREFIX)),
        ("to_chain", chain_item()),
        ("callee", UNIVERSAL_ADDRESS),
        ("sender", UNIVERSAL_ADDRESS),
        ("data", Bytes(length_size=2, layout=data)),
    )


WORMHOLE_NTT_TRANSFER_LAYOUT = wormhole_transceiver_message_layout(
    ntt_manager_message_layout(NATIVE_TOKEN_TRANSFER_LAYOUT)
)

_PAYLOAD_KINDS = {
    WH_TRANSCEIVER_PREFIX: "WormholeTransfer",
    TRANSCEIVER_INFO_PREFIX: "TransceiverInfo",
    TRANSCEIVER_REGISTRATION_PREFIX: "TransceiverRegistration",
}


def classify_payload(payload: bytes) -> Optional[str]:
    """Name the NTT message kind from its 4-byte prefix, or None when unrecognised."""
    kind = _PAYLOAD_KINDS.get(bytes(payload[:4]))
    if kind is None:
        logger.debug("Unrecognised NTT payload prefix %s", bytes(payload[:4]).hex())
    return kind
