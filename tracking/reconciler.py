"""
tracking/reconciler.py

Reconcile an attested (or previously failed) transfer receipt with the
relay network's view of it. The receipt is never mutated; a new one is
returned when the state changes.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from errors import RelayFailedError, StatusUnavailable

from .providers import AxelarStatusProvider, ExecutorStatusProvider, StatusProvider
from .receipt import TransferReceipt, TransferState

logger = logging.getLogger(__name__)

_RECONCILABLE_STATES = (TransferState.ATTESTED, TransferState.FAILED)


async def reconcile(network: str, receipt: TransferReceipt, provider: StatusProvider) -> TransferReceipt:
    """Apply the relay status of the receipt's latest origin transaction.

    Raises StatusUnavailable when the provider has nothing for the
    transaction. A relay failure is returned as a FAILED receipt carrying a
    RelayFailedError, not raised.
    """
    if receipt.state not in _RECONCILABLE_STATES:
        return receipt

    txid = receipt.latest_origin_tx.txid
    records = await provider.fetch_status(network, txid, receipt.from_chain)
    if not records:
        raise StatusUnavailable(f"No transaction status found for {txid}")

    record = records[0]
    if record.failed:
        error = RelayFailedError(
            record.message or f"Relay failed with status: {record.status}",
            status=record.status,
            url=record.url,
            explorer=record.explorer,
        )
        logger.info("Relay for %s failed: %s", txid, error.message)
        return replace(receipt, state=TransferState.FAILED, error=error)

    if receipt.state == TransferState.FAILED:
        logger.info("Relay for %s no longer failing (status=%s); back to attested", txid, record.status)
        return replace(receipt, state=TransferState.ATTESTED, error=None)

    return receipt


async def track_executor(
    network: str, receipt: TransferReceipt, provider: Optional[StatusProvider] = None
) -> TransferReceipt:
    return await reconcile(network, receipt, provider or ExecutorStatusProvider())


async def track_axelar(
    network: str, receipt: TransferReceipt, provider: Optional[StatusProvider] = None
) -> TransferReceipt:
    return await reconcile(network, receipt, provider or AxelarStatusProvider())
