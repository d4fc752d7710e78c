"""Transfer receipts: immutable records of a cross-chain transfer's progress."""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple

from errors import RelayFailedError


class TransferState(IntEnum):
    FAILED = -1
    CREATED = 0
    SUBMITTED = 1
    SOURCE_FINALIZED = 2
    ATTESTED = 3
    DESTINATION_INITIATED = 4
    DESTINATION_QUEUED = 5
    COMPLETED = 6


@dataclass(frozen=True)
class TransactionId:
    chain: str
    txid: str


@dataclass(frozen=True)
class TransferReceipt:
    state: TransferState
    from_chain: str
    to_chain: str
    origin_txs: Tuple[TransactionId, ...]
    error: Optional[RelayFailedError] = None

    def __post_init__(self) -> None:
        if not isinstance(self.origin_txs, tuple):
            object.__setattr__(self, "origin_txs", tuple(self.origin_txs))
        if not self.origin_txs:
            raise ValueError("A transfer receipt needs at least one origin transaction")

    @property
    def latest_origin_tx(self) -> TransactionId:
        return self.origin_txs[-1]

    @property
    def is_attested(self) -> bool:
        return self.state == TransferState.ATTESTED

    @property
    def is_failed(self) -> bool:
        return self.state == TransferState.FAILED

    @property
    def is_completed(self) -> bool:
        return self.state == TransferState.COMPLETED
