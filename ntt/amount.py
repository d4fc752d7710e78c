"""
ntt/amount.py

Trimmed amounts: token amounts carried across chains with at most
TRIMMED_DECIMALS decimals so they fit a u64 on every platform.
"""

from __future__ import annotations

from dataclasses import dataclass

from errors import ValueOutOfRange

TRIMMED_DECIMALS = 8
MAX_TRIMMED_AMOUNT = (1 << 64) - 1


@dataclass(frozen=True)
class TrimmedAmount:
    amount: int
    decimals: int

    def untrim(self, to_decimals: int) -> int:
        return untrim(self, to_decimals)


def encode_trimmed_amount(trimmed: TrimmedAmount) -> int:
    """Pack into the u72 form ``amount << 8 | decimals``."""
    if not 0 <= trimmed.decimals <= 255:
        raise ValueOutOfRange("decimals out of range")
    if not 0 <= trimmed.amount <= MAX_TRIMMED_AMOUNT:
        raise ValueOutOfRange("amount out of range")
    return (trimmed.amount << 8) | trimmed.decimals


def decode_trimmed_amount(encoded: int) -> TrimmedAmount:
    return TrimmedAmount(amount=encoded >> 8, decimals=encoded & 0xFF)


def scale(amount: int, from_decimals: int, to_decimals: int) -> int:
    if from_decimals == to_decimals:
        return amount
    if from_decimals > to_decimals:
        return amount // 10 ** (from_decimals - to_decimals)
    return amount * 10 ** (to_decimals - from_decimals)


def untrim(trimmed: TrimmedAmount, to_decimals: int) -> int:
    return scale(trimmed.amount, trimmed.decimals, to_decimals)


def trim(amount: int, from_decimals: int, to_decimals: int) -> TrimmedAmount:
    """Trim a native amount for transfer to a chain whose token has ``to_decimals``.

    Dust below the trimmed precision is dropped.
    """
    decimals = min(TRIMMED_DECIMALS, from_decimals, to_decimals)
    trimmed = scale(amount, from_decimals, decimals)
    if trimmed > MAX_TRIMMED_AMOUNT:
        raise ValueOutOfRange(f"trimmed amount {trimmed} exceeds u64")
    return TrimmedAmount(amount=trimmed, decimals=decimals)
