"""Logging setup for the NTT protocol core.

Only the project's own loggers follow the configured level; HTTP and async
runtime libraries are held at WARNING so a DEBUG run shows codec, VAA and
reconciler decisions without transport noise.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Optional, Tuple

_DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

PROJECT_LOGGERS = ("layout", "ntt", "vaa", "tracking", "config")

THIRD_PARTY_LOGGERS = ("httpx", "httpcore", "hpack", "trio", "asyncio")

_configured = False


def _coerce_level(level: Optional[Any]) -> int:
    """Translate a human readable level into the logging module's numeric level."""
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        numeric = logging.getLevelName(level.strip().upper())
        if isinstance(numeric, int):
            return numeric
    fallback = logging.getLevelName(os.environ.get("NTT_LOG_LEVEL", "INFO").strip().upper())
    return fallback if isinstance(fallback, int) else logging.INFO


def _read_settings(logging_settings: Optional[Any]) -> Tuple[Any, Any, Any]:
    # Accepts config.LoggingSettings or a plain mapping
    if logging_settings is None:
        return None, None, None
    if isinstance(logging_settings, dict):
        get = logging_settings.get
    else:
        def get(name: str) -> Any:
            return getattr(logging_settings, name, None)
    return get("level"), get("format"), get("datefmt")


def configure(logging_settings: Optional[Any] = None, *, force: bool = True) -> None:
    """Install one console handler on the root logger and set project levels."""
    global _configured
    if _configured and not force:
        return

    raw_level, fmt, datefmt = _read_settings(logging_settings)
    level = _coerce_level(raw_level)
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt or os.environ.get("NTT_LOG_FORMAT", _DEFAULT_FORMAT),
            datefmt or os.environ.get("NTT_LOG_DATEFMT", _DEFAULT_DATEFMT),
        )
    )

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(max(logging.WARNING, level))

    for name in PROJECT_LOGGERS:
        logging.getLogger(name).setLevel(level)
    quiet = max(logging.WARNING, level)
    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(quiet)

    logging.captureWarnings(True)
    _configured = True
    logging.getLogger("config").debug("Logging configured at %s", logging.getLevelName(level))


def is_configured() -> bool:
    return _configured
