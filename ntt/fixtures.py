"""Helpers for hex-encoded binary fixtures (one encoded message per file)."""
from __future__ import annotations

import os
from typing import Union

from errors import SchemaViolation


def parse_hex(text: str) -> bytes:
    cleaned = "".join(text.split())
    if cleaned[:2].lower() == "0x":
        cleaned = cleaned[2:]
    try:
        return bytes.fromhex(cleaned)
    except ValueError as exc:
        raise SchemaViolation(f"Invalid hex fixture: {exc}") from exc


def load_hex_fixture(path: Union[str, "os.PathLike[str]"]) -> bytes:
    with open(path, "r", encoding="utf-8") as handle:
        return parse_hex(handle.read())
