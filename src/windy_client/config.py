"""Configuration loading utilities for windy_client."""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from .cache import DEFAULT_TTL_SECONDS
from .pipeline import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_MS
from .quota import DEFAULT_WINDOW_SECONDS

DEFAULT_CONFIG_PATH = Path("configs/default.yaml")
ENV_PREFIX = "WINDY__"
DEFAULT_RATE_LIMIT_PER_DAY = 1000


class ConfigError(RuntimeError):
    """Raised when configuration loading or validation fails."""


@dataclass(frozen=True)
class ClientConfig:
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    default_cache_ttl: float = DEFAULT_TTL_SECONDS
    rate_limit_per_day: int = DEFAULT_RATE_LIMIT_PER_DAY
    timeout_ms: float = DEFAULT_TIMEOUT_MS
    quota_window_seconds: float = DEFAULT_WINDOW_SECONDS
    redis_url: str | None = None

    def as_dict(self) -> Mapping[str, Any]:
        """Return the configuration as a dictionary for downstream use."""
        return dataclasses.asdict(self)


def load_config(path: str | os.PathLike[str] | None = None) -> ClientConfig:
    """Load configuration from YAML and apply environment overrides.

    An explicit ``path`` must exist. When ``path`` is omitted and the default
    file is absent, built-in defaults plus environment overrides are used.
    """
    if path is not None:
        raw_config = _load_yaml(Path(path))
    elif DEFAULT_CONFIG_PATH.exists():
        raw_config = _load_yaml(DEFAULT_CONFIG_PATH)
    else:
        raw_config = {}

    merged_config = _apply_env_overrides(raw_config)
    return _build_config(merged_config)


def dump_config(config: ClientConfig) -> str:
    """Return a YAML string of the effective configuration with the key masked."""
    data = dict(config.as_dict())
    if data.get("api_key"):
        data["api_key"] = "***"
    return yaml.safe_dump(data, sort_keys=False)


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Configuration file '{path}' does not exist.")

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in config file '{path}': {exc}") from exc

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file '{path}' must contain a mapping at the root.")

    # Accept both a flat file and one nested under a ``windy`` section.
    section = data.get("windy", data)
    if not isinstance(section, dict):
        raise ConfigError(f"Configuration section 'windy' in '{path}' must be a mapping.")
    return dict(section)


def _apply_env_overrides(raw_config: dict[str, Any]) -> dict[str, Any]:
    config = dict(raw_config)

    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue

        field_name = key[len(ENV_PREFIX) :].lower()
        if not field_name:
            continue

        # String fields such as the API key are taken verbatim.
        config[field_name] = _parse_env_value(value) if field_name in _NUMERIC_FIELDS else value

    return config


def _parse_env_value(value: str) -> Any:
    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError:
        return value
    return parsed


_NUMERIC_FIELDS = {
    "default_cache_ttl": float,
    "rate_limit_per_day": int,
    "timeout_ms": float,
    "quota_window_seconds": float,
}


def _build_config(data: Mapping[str, Any]) -> ClientConfig:
    known = {field.name for field in dataclasses.fields(ClientConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    values: dict[str, Any] = {}
    for name, raw in data.items():
        if raw is None:
            continue
        caster = _NUMERIC_FIELDS.get(name)
        if caster is not None:
            try:
                values[name] = caster(raw)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"Configuration value '{name}' must be numeric, got {raw!r}.") from exc
        else:
            values[name] = str(raw)

    return ClientConfig(**values)


__all__ = [
    "ClientConfig",
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "dump_config",
    "load_config",
]
