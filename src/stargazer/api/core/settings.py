"""
SIQS Engine Settings

Tunable parameters for caching, the nighttime window and the forecast client.

Values are layered: built-in defaults, then the JSON file at
``~/.config/stargazer/settings.json``, then ``STARGAZER_*`` environment
variables (e.g. ``STARGAZER_CACHE_TTL_SECONDS=600``).
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from stargazer.api.core.constants import VIABLE_THRESHOLD
from stargazer.api.core.exceptions import InvalidConfigurationError


logger = logging.getLogger(__name__)


__all__ = [
    "ENV_PREFIX",
    "SiqsSettings",
    "get_settings_path",
    "load_settings",
]


ENV_PREFIX = "STARGAZER_"


@dataclass(frozen=True)
class SiqsSettings:
    """Runtime configuration for the SIQS engine."""

    cache_ttl_seconds: float = 300.0  # 5 minutes
    cache_max_entries: int = 100
    cache_precision: int = 4  # Decimal places of lat/lng in cache keys
    night_start_hour: int = 18
    night_end_hour: int = 7
    prime_start_hour: int = 22
    prime_end_hour: int = 4
    prime_hour_weight: float = 2.0
    viable_threshold: float = VIABLE_THRESHOLD
    forecast_days: int = 2
    request_timeout_seconds: float = 30.0
    api_url: str = "https://api.open-meteo.com/v1/forecast"

    def __post_init__(self) -> None:
        for name in ("night_start_hour", "night_end_hour", "prime_start_hour", "prime_end_hour"):
            hour = getattr(self, name)
            if not 0 <= hour <= 23:
                raise InvalidConfigurationError(f"{name} must be 0-23, got {hour}")
        if self.cache_ttl_seconds <= 0:
            raise InvalidConfigurationError("cache_ttl_seconds must be positive")
        if self.cache_max_entries < 1:
            raise InvalidConfigurationError("cache_max_entries must be at least 1")
        if not 1 <= self.forecast_days <= 16:
            raise InvalidConfigurationError("forecast_days must be 1-16 (Open-Meteo limit)")
        if self.prime_hour_weight <= 0:
            raise InvalidConfigurationError("prime_hour_weight must be positive")


def get_settings_path() -> Path:
    """Get path to the settings file."""
    return Path.home() / ".config" / "stargazer" / "settings.json"


def _coerce(name: str, raw: Any, target: type) -> Any:
    """Convert a raw JSON/env value to the field's type."""
    try:
        if target is int:
            return int(raw)
        if target is float:
            return float(raw)
        return str(raw)
    except (TypeError, ValueError) as e:
        raise InvalidConfigurationError(f"Invalid value for {name}: {raw!r}") from e


def _field_types() -> dict[str, type]:
    # Annotations are strings under postponed evaluation
    lookup = {"int": int, "float": float, "str": str}
    return {f.name: lookup[str(f.type)] for f in fields(SiqsSettings)}


def _load_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        logger.debug(f"No settings file at {path}")
        return {}
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise InvalidConfigurationError(f"Could not read settings file {path}: {e}") from e
    if not isinstance(data, dict):
        raise InvalidConfigurationError(f"Settings file {path} must contain a JSON object")
    return data


def load_settings(path: Path | None = None, environ: dict[str, str] | None = None) -> SiqsSettings:
    """
    Load settings from file and environment.

    Args:
        path: Settings file (default: ~/.config/stargazer/settings.json)
        environ: Environment mapping (default: os.environ)

    Returns:
        Resolved SiqsSettings

    Raises:
        InvalidConfigurationError: If a value cannot be parsed or fails validation
    """
    types = _field_types()
    settings_path = path if path is not None else get_settings_path()
    env = os.environ if environ is None else environ

    overrides: dict[str, Any] = {}
    for key, value in _load_file(settings_path).items():
        if key not in types:
            logger.warning(f"Ignoring unknown setting '{key}' in {settings_path}")
            continue
        overrides[key] = _coerce(key, value, types[key])

    for name, target in types.items():
        env_name = f"{ENV_PREFIX}{name.upper()}"
        if env_name in env:
            overrides[name] = _coerce(env_name, env[env_name], target)

    if overrides:
        logger.debug(f"Settings overrides: {sorted(overrides)}")
    return replace(SiqsSettings(), **overrides)
