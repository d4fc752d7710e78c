"""
tracking/providers.py

Relay-status providers. Each backend talks to its own relay network and
normalizes the answer into StatusRecord values, so the reconciler never
needs to know which backend it was given.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

import httpx

import config
from errors import ConfigurationError, StatusUnavailable
from ntt.chains import to_chain_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusRecord:
    status: str
    failed: bool = False
    message: Optional[str] = None
    url: Optional[str] = None
    explorer: Optional[str] = None


class StatusProvider(Protocol):
    async def fetch_status(
        self, network: str, tx_id: str, origin_chain: str
    ) -> Sequence[StatusRecord]:
        ...


class _HttpProvider:
    """Shared POST plumbing for the JSON relay APIs."""

    def __init__(
        self,
        *,
        base_urls: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._base_urls = dict(base_urls) if base_urls is not None else None
        self._timeout = timeout
        self._client = client

    def _default_base_urls(self) -> Mapping[str, str]:
        raise NotImplementedError

    def base_url(self, network: str) -> str:
        table = self._base_urls if self._base_urls is not None else self._default_base_urls()
        url = table.get(network)
        if not url:
            raise ConfigurationError(f"No {type(self).__name__} endpoint configured for network {network}")
        return url.rstrip("/")

    async def _post_json(self, url: str, payload: Dict[str, Any], tx_id: str) -> Any:
        timeout = self._timeout if self._timeout is not None else config.settings.relay.request_timeout
        try:
            if self._client is not None:
                response = await self._client.post(url, json=payload, timeout=timeout)
            else:
                async with httpx.AsyncClient(timeout=timeout) as client:
                    response = await client.post(url, json=payload)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Status request to %s failed for %s: %s", url, tx_id, exc)
            raise StatusUnavailable(f"Failed to fetch status for txHash: {tx_id}.") from exc


class RelayStatus(str, Enum):
    PENDING = "pending"
    FAILED = "failed"
    UNSUPPORTED = "unsupported"
    SUBMITTED = "submitted"
    UNDERPAID = "underpaid"
    ABORTED = "aborted"


_FAILED_RELAY_STATUSES = frozenset(
    {
        RelayStatus.FAILED.value,  # simulation failed
        RelayStatus.UNDERPAID.value,  # paid less than the cost estimate
        RelayStatus.UNSUPPORTED.value,  # capabilities check did not pass
        RelayStatus.ABORTED.value,
    }
)


def is_relay_status_failed(status: str) -> bool:
    return status in _FAILED_RELAY_STATUSES


class ExecutorStatusProvider(_HttpProvider):
    """Executor relay network: ``POST /v0/status/tx``."""

    def _default_base_urls(self) -> Mapping[str, str]:
        return config.settings.relay.executor_api

    async def fetch_status(
        self, network: str, tx_id: str, origin_chain: str
    ) -> List[StatusRecord]:
        url = f"{self.base_url(network)}/v0/status/tx"
        try:
            chain_id = to_chain_id(origin_chain)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        data = await self._post_json(url, {"txHash": tx_id, "chainId": chain_id}, tx_id)
        if not isinstance(data, list):
            logger.warning("Executor returned %s instead of a status list for %s", type(data).__name__, tx_id)
            raise StatusUnavailable(f"Unexpected executor response for txHash: {tx_id}.")
        records = []
        for item in data:
            status = item.get("status") if isinstance(item, dict) else None
            if not isinstance(status, str):
                raise StatusUnavailable(f"Executor response for txHash {tx_id} has no status: {item!r}")
            failed = is_relay_status_failed(status)
            records.append(
                StatusRecord(
                    status=status,
                    failed=failed,
                    message=f"Relay failed with status: {status}" if failed else None,
                )
            )
        logger.debug("Executor status for %s: %s", tx_id, [r.status for r in records])
        return records


class GMPStatus(str, Enum):
    SRC_GATEWAY_CALLED = "source_gateway_called"
    DEST_GATEWAY_APPROVED = "destination_gateway_approved"
    DEST_EXECUTED = "destination_executed"
    EXPRESS_EXECUTED = "express_executed"
    DEST_EXECUTE_ERROR = "error"
    DEST_EXECUTING = "executing"
    APPROVING = "approving"
    FORECALLED = "forecalled"
    FORECALLED_WITHOUT_GAS_PAID = "forecalled_without_gas_paid"
    NOT_EXECUTED = "not_executed"
    NOT_EXECUTED_WITHOUT_GAS_PAID = "not_executed_without_gas_paid"
    INSUFFICIENT_FEE = "insufficient_fee"
    UNKNOWN_ERROR = "unknown_error"
    CANNOT_FETCH_STATUS = "cannot_fetch_status"
    SRC_GATEWAY_CONFIRMED = "confirmed"


@dataclass(frozen=True)
class GMPError:
    message: str
    tx_hash: Optional[str] = None
    chain: Optional[str] = None


AXELAR_CHAINS: Dict[str, str] = {
    "Ethereum": "ethereum",
    "Monad": "monad",
    "Sepolia": "ethereum-sepolia",
}

AXELAR_EXPLORER_NAME = "Axelarscan"


def get_axelar_chain(chain: str) -> str:
    axelar_chain = AXELAR_CHAINS.get(chain)
    if not axelar_chain:
        raise ConfigurationError(f"Unsupported axelar chain: {chain}")
    return axelar_chain


def axelar_explorer_url(network: str, tx_hash: str) -> str:
    explorers = config.settings.relay.axelar_explorer
    base = explorers.get(network) or explorers["Testnet"]
    return f"{base.rstrip('/')}/gmp/{tx_hash}"


def parse_gmp_status(details: Mapping[str, Any]) -> str:
    status = details.get("status")
    if status == "error" and details.get("error"):
        return GMPStatus.DEST_EXECUTE_ERROR.value
    if status == "executed":
        return GMPStatus.DEST_EXECUTED.value
    if status == "approved":
        return GMPStatus.DEST_GATEWAY_APPROVED.value
    if status == "called":
        return GMPStatus.SRC_GATEWAY_CALLED.value
    if status == "executing":
        return GMPStatus.DEST_EXECUTING.value
    return str(status or "")


def _gmp_error_message(error: Any) -> str:
    # Axelarscan reports either a bare string or a nested {"error": {"message": ...}}
    if isinstance(error, str):
        return error
    if isinstance(error, Mapping):
        inner = error.get("error")
        if isinstance(inner, str) and inner:
            return inner
        if isinstance(inner, Mapping) and inner.get("message"):
            return str(inner["message"])
        if error.get("message"):
            return str(error["message"])
    return "unknown error"


def parse_gmp_error(details: Mapping[str, Any]) -> Optional[GMPError]:
    error = details.get("error")
    if error:
        context = error if isinstance(error, Mapping) else {}
        return GMPError(
            message=_gmp_error_message(error),
            tx_hash=context.get("sourceTransactionHash"),
            chain=context.get("chain"),
        )
    if details.get("is_insufficient_fee"):
        call = details.get("call")
        call = call if isinstance(call, Mapping) else {}
        transaction = call.get("transaction")
        return GMPError(
            message="Insufficient gas",
            tx_hash=transaction.get("hash") if isinstance(transaction, Mapping) else None,
            chain=call.get("chain"),
        )
    return None


class AxelarStatusProvider(_HttpProvider):
    """Axelar GMP relay: ``POST /gmp/searchGMP``."""

    def _default_base_urls(self) -> Mapping[str, str]:
        return config.settings.relay.axelar_api

    async def fetch_status(
        self, network: str, tx_id: str, origin_chain: str
    ) -> List[StatusRecord]:
        url = f"{self.base_url(network)}/gmp/searchGMP"
        result = await self._post_json(
            url, {"sourceChain": get_axelar_chain(origin_chain), "txHash": tx_id}, tx_id
        )
        if not isinstance(result, dict):
            raise StatusUnavailable(f"Unexpected Axelar response for txHash: {tx_id}.")
        data = result.get("data")
        if not data:
            logger.debug("Axelar has no transaction details for %s", tx_id)
            return []
        if not isinstance(data, list) or not isinstance(data[0], dict):
            logger.warning("Axelar returned malformed transaction details for %s: %r", tx_id, data)
            raise StatusUnavailable(f"Unexpected Axelar response for txHash: {tx_id}.")
        details = data[0]
        status = parse_gmp_status(details)
        error = parse_gmp_error(details)
        if error is None:
            return [StatusRecord(status=status)]
        return [
            StatusRecord(
                status=status,
                failed=True,
                message=f"Axelar error: {error.message}",
                url=axelar_explorer_url(network, tx_id),
                explorer=AXELAR_EXPLORER_NAME,
            )
        ]
