"""Wormhole chain identifiers used in NTT messages."""
from __future__ import annotations

from typing import Dict

CHAINS: Dict[str, int] = {
    "Solana": 1,
    "Ethereum": 2,
    "Terra": 3,
    "Bsc": 4,
    "Polygon": 5,
    "Avalanche": 6,
    "Oasis": 7,
    "Algorand": 8,
    "Aurora": 9,
    "Fantom": 10,
    "Karura": 11,
    "Acala": 12,
    "Klaytn": 13,
    "Celo": 14,
    "Near": 15,
    "Moonbeam": 16,
    "Neon": 17,
    "Terra2": 18,
    "Injective": 19,
    "Osmosis": 20,
    "Sui": 21,
    "Aptos": 22,
    "Arbitrum": 23,
    "Optimism": 24,
    "Gnosis": 25,
    "Pythnet": 26,
    "Xpla": 28,
    "Btc": 29,
    "Base": 30,
    "Sei": 32,
    "Rootstock": 33,
    "Scroll": 34,
    "Mantle": 35,
    "Blast": 36,
    "Xlayer": 37,
    "Linea": 38,
    "Berachain": 39,
    "Seievm": 40,
    "Unichain": 44,
    "Worldchain": 45,
    "Ink": 46,
    "HyperEVM": 47,
    "Monad": 48,
    "Mezo": 50,
    "Sonic": 52,
    "Wormchain": 3104,
    "Cosmoshub": 4000,
    "Evmos": 4001,
    "Kujira": 4002,
    "Neutron": 4003,
    "Celestia": 4004,
    "Stargaze": 4005,
    "Seda": 4006,
    "Dymension": 4007,
    "Provenance": 4008,
    "Noble": 4009,
    "Sepolia": 10002,
    "ArbitrumSepolia": 10003,
    "BaseSepolia": 10004,
    "OptimismSepolia": 10005,
    "Holesky": 10006,
    "PolygonSepolia": 10007,
}

_CHAIN_NAMES: Dict[int, str] = {chain_id: name for name, chain_id in CHAINS.items()}


def to_chain_id(name: str) -> int:
    try:
        return CHAINS[name]
    except KeyError:
        raise ValueError(f"Unknown chain name: {name!r}") from None


def to_chain_name(chain_id: int) -> str:
    try:
        return _CHAIN_NAMES[chain_id]
    except KeyError:
        raise ValueError(f"Unknown chain id: {chain_id}") from None


def is_chain(name: str) -> bool:
    return name in CHAINS
