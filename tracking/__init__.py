from .providers import (
    AxelarStatusProvider,
    ExecutorStatusProvider,
    GMPError,
    GMPStatus,
    RelayStatus,
    StatusProvider,
    StatusRecord,
    axelar_explorer_url,
    get_axelar_chain,
    is_relay_status_failed,
    parse_gmp_error,
    parse_gmp_status,
)
from .receipt import TransactionId, TransferReceipt, TransferState
from .reconciler import reconcile, track_axelar, track_executor

__all__ = [
    "AxelarStatusProvider",
    "ExecutorStatusProvider",
    "GMPError",
    "GMPStatus",
    "RelayStatus",
    "StatusProvider",
    "StatusRecord",
    "axelar_explorer_url",
    "get_axelar_chain",
    "is_relay_status_failed",
    "parse_gmp_error",
    "parse_gmp_status",
    "TransactionId",
    "TransferReceipt",
    "TransferState",
    "reconcile",
    "track_axelar",
    "track_executor",
]
