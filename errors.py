"""Central exception hierarchy for the NTT protocol core."""
from __future__ import annotations

from typing import Optional


class NttError(Exception):
    """Base exception for all custom errors raised by the NTT protocol core."""


class ConfigurationError(NttError):
    """Raised when configuration loading or validation fails."""


class SchemaViolation(NttError):
    """Raised when bytes or a value cannot be represented by a layout."""


class ValueOutOfRange(NttError):
    """Raised at encode time when a value does not fit its declared width."""


class MalformedAttestation(NttError):
    """Raised when VAA bytes are truncated or carry no signatures."""


class StatusUnavailable(NttError):
    """Raised when a relay-status provider has no status for a transaction."""


class RelayFailedError(NttError):
    """Relay failure reported by a status provider.

    Stored on a transfer receipt rather than raised, so callers can persist
    and display it.
    """

    def __init__(
        self,
        message: str,
        *,
        status: Optional[str] = None,
        url: Optional[str] = None,
        explorer: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.url = url
        self.explorer = explorer

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RelayFailedError):
            return NotImplemented
        return (self.message, self.status, self.url, self.explorer) == (
            other.message,
            other.status,
            other.url,
            other.explorer,
        )

    def __hash__(self) -> int:
        return hash((self.message, self.status, self.url, self.explorer))

    def __repr__(self) -> str:
        return f"RelayFailedError({self.message!r}, status={self.status!r}, url={self.url!r})"
