"""Environment-aware configuration for the NTT protocol core."""
from __future__ import annotations

import copy
import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from errors import ConfigurationError


NETWORKS = ("Mainnet", "Testnet", "Devnet")


@dataclass
class RelaySettings:
    executor_api: Dict[str, str] = field(
        default_factory=lambda: {
            "Mainnet": "https://executor.labsapis.com",
            "Testnet": "https://executor-testnet.labsapis.com",
        }
    )
    axelar_api: Dict[str, str] = field(
        default_factory=lambda: {
            "Mainnet": "https://api.axelarscan.io",
            "Testnet": "https://testnet.api.axelarscan.io",
        }
    )
    axelar_explorer: Dict[str, str] = field(
        default_factory=lambda: {
            "Mainnet": "https://axelarscan.io",
            "Testnet": "https://testnet.axelarscan.io",
        }
    )
    request_timeout: float = 10.0

    def validate(self) -> None:
        for name in ("executor_api", "axelar_api", "axelar_explorer"):
            table = getattr(self, name)
            if not isinstance(table, dict):
                raise ConfigurationError(f"Relay '{name}' must be a mapping of network to URL.")
            for network, url in table.items():
                if network not in NETWORKS:
                    raise ConfigurationError(f"Relay '{name}' has unknown network {network!r}.")
                if not isinstance(url, str) or not url.startswith(("http://", "https://")):
                    raise ConfigurationError(f"Relay '{name}' URL for {network} is invalid: {url!r}")
        if self.request_timeout <= 0:
            raise ConfigurationError(
                f"Relay request_timeout must be greater than zero (got {self.request_timeout})."
            )


@dataclass
class LoggingSettings:
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    def validate(self) -> None:
        if not self.level:
            raise ConfigurationError("Logging level must be provided.")
        if not self.format:
            raise ConfigurationError("Logging format must be provided.")


@dataclass
class Settings:
    env: str
    network: str
    relay: RelaySettings
    logging: LoggingSettings

    def validate(self) -> None:
        if self.network not in NETWORKS:
            raise ConfigurationError(f"Unknown network {self.network!r}; expected one of {NETWORKS}.")
        self.relay.validate()
        self.logging.validate()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "env": self.env,
            "network": self.network,
            "relay": asdict(self.relay),
            "logging": asdict(self.logging),
        }


BASE_DEFAULTS: Dict[str, Any] = {
    "network": "Testnet",
    "relay": asdict(RelaySettings()),
    "logging": asdict(LoggingSettings()),
}

ENVIRONMENT_OVERRIDES: Dict[str, Dict[str, Any]] = {
    "development": {},
    "test": {
        "network": "Devnet",
        "logging": {"level": "DEBUG"},
        "relay": {"request_timeout": 2.0},
    },
    "production": {
        "network": "Mainnet",
        "logging": {"level": "WARNING"},
        "relay": {"request_timeout": 15.0},
    },
}

_ENV_VALUE_CASTERS: Dict[str, Any] = {
    "NTT_NETWORK": (None, "network", str),
    "NTT_EXECUTOR_MAINNET_URL": ("relay", ("executor_api", "Mainnet"), str),
    "NTT_EXECUTOR_TESTNET_URL": ("relay", ("executor_api", "Testnet"), str),
    "NTT_AXELAR_MAINNET_URL": ("relay", ("axelar_api", "Mainnet"), str),
    "NTT_AXELAR_TESTNET_URL": ("relay", ("axelar_api", "Testnet"), str),
    "NTT_RELAY_TIMEOUT": ("relay", "request_timeout", float),
    "NTT_LOG_LEVEL": ("logging", "level", str),
    "NTT_LOG_FORMAT": ("logging", "format", str),
    "NTT_LOG_DATEFMT": ("logging", "datefmt", str),
}


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _overrides_from_env() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for env_key, (section, key, caster) in _ENV_VALUE_CASTERS.items():
        raw = os.environ.get(env_key)
        if raw is None:
            continue
        try:
            parsed = caster(raw)
        except Exception as exc:  # pragma: no cover - configuration error path
            raise ConfigurationError(f"Failed to coerce environment variable {env_key}: {exc}") from exc
        target = overrides if section is None else overrides.setdefault(section, {})
        if isinstance(key, tuple):
            table, network = key
            target.setdefault(table, {})[network] = parsed
        else:
            target[key] = parsed
    return overrides


def _settings_from_dict(env: str, payload: Dict[str, Any]) -> Settings:
    return Settings(
        env=env,
        network=payload["network"],
        relay=RelaySettings(**payload["relay"]),
        logging=LoggingSettings(**payload["logging"]),
    )


def load_settings(env: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> Settings:
    env_name = (env or os.environ.get("NTT_ENV", "development")).lower()
    base = copy.deepcopy(BASE_DEFAULTS)
    env_specific = ENVIRONMENT_OVERRIDES.get(env_name, {})
    base = _deep_merge(base, copy.deepcopy(env_specific))
    base = _deep_merge(base, _overrides_from_env())
    if overrides:
        base = _deep_merge(base, overrides)
    settings_obj = _settings_from_dict(env_name, base)
    settings_obj.validate()
    return settings_obj


def _sync_legacy_exports(current: Settings) -> None:
    global NETWORK, RELAY_TIMEOUT, LOGGING

    NETWORK = current.network
    RELAY_TIMEOUT = current.relay.request_timeout

    LOGGING = current.logging


def reload_settings(env: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> Settings:
    global settings
    settings = load_settings(env=env or settings.env, overrides=overrides)
    _sync_legacy_exports(settings)
    return settings


settings: Settings = load_settings()
_sync_legacy_exports(settings)

__all__ = [
    "settings",
    "reload_settings",
    "load_settings",
    "Settings",
    "RelaySettings",
    "LoggingSettings",
    "NETWORKS",
    "NETWORK",
    "RELAY_TIMEOUT",
    "LOGGING",
]
