"""Shared pytest fixtures for the NTT protocol core test-suite."""
from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import bridge_logging
import config

PAYLOADS_DIR = Path(__file__).resolve().parent / "payloads"


@pytest.fixture(scope="session", autouse=True)
def test_environment() -> Iterator[None]:
    """Ensure tests run with the dedicated 'test' configuration and logging."""
    original_env = os.environ.get("NTT_ENV")
    os.environ["NTT_ENV"] = "test"

    config.reload_settings(env="test")
    bridge_logging.configure(config.LOGGING, force=True)

    yield

    if original_env is None:
        os.environ.pop("NTT_ENV", None)
        config.reload_settings(env="development")
    else:
        os.environ["NTT_ENV"] = original_env
        config.reload_settings(env=original_env)


@pytest.fixture()
def payloads_dir() -> Path:
    return PAYLOADS_DIR
