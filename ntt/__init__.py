from .amount import (
    TRIMMED_DECIMALS,
    TrimmedAmount,
    decode_trimmed_amount,
    encode_trimmed_amount,
    scale,
    trim,
    untrim,
)
from .chains import CHAINS, is_chain, to_chain_id, to_chain_name
from .fixtures import load_hex_fixture, parse_hex
from .layouts import (
    MULTI_TOKEN_TRANSFER_LAYOUT,
    NATIVE_TOKEN_TRANSFER_LAYOUT,
    TRANSCEIVER_INFO_LAYOUT,
    TRANSCEIVER_REGISTRATION_LAYOUT,
    WORMHOLE_NTT_TRANSFER_LAYOUT,
    Mode,
    chain_item,
    classify_payload,
    generic_message_layout,
    ntt_manager_message_layout,
    transceiver_message_layout,
    wormhole_transceiver_message_layout,
)

__all__ = [
    "TRIMMED_DECIMALS",
    "TrimmedAmount",
    "decode_trimmed_amount",
    "encode_trimmed_amount",
    "scale",
    "trim",
    "untrim",
    "CHAINS",
    "is_chain",
    "to_chain_id",
    "to_chain_name",
    "load_hex_fixture",
    "parse_hex",
    "MULTI_TOKEN_TRANSFER_LAYOUT",
    "NATIVE_TOKEN_TRANSFER_LAYOUT",
    "TRANSCEIVER_INFO_LAYOUT",
    "TRANSCEIVER_REGISTRATION_LAYOUT",
    "WORMHOLE_NTT_TRANSFER_LAYOUT",
    "Mode",
    "chain_item",
    "classify_payload",
    "generic_message_layout",
    "ntt_manager_message_layout",
    "transceiver_message_layout",
    "wormhole_transceiver_message_layout",
]
