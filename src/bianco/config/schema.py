"""Config schema and accessor."""

from __future__ import annotations

import os
from typing import Any

from loguru import logger

from bianco.core.errors import BiancoConfigurationError

# Env keys that override config (loaded once per reload)
_ENV_OVERRIDE_KEYS = (
    "BIANCO_DEBUG",
    "LOG_LEVEL",
)

# Settings read from the "bianco" section of a config file
SETTINGS_KEYS = ("debug", "debug_stack_limit", "log_level")

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _load_env_overrides() -> dict[str, str]:
    """Load env overrides once per reload."""
    return {k: os.environ.get(k, "") for k in _ENV_OVERRIDE_KEYS}


def _parse_bool_env(val: str) -> bool | None:
    """Parse env string to bool; None if not a recognized bool."""
    v = val.lower()
    if v in ("1", "true", "yes"):
        return True
    if v in ("0", "false", "no"):
        return False
    return None


class Config:
    """Config accessor with attribute-style access for nested keys."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = data or {}
        self._env: dict[str, str] = _load_env_overrides()

    def reload(self, data: dict[str, Any], *, validate: bool = True) -> None:
        """Replace config data and re-read env overrides."""
        self._data = data or {}
        self._env = _load_env_overrides()
        if validate:
            self._validate()
        logger.debug("Config reloaded: debug={} log_level={}", self.debug, self.log_level)

    def _validate(self) -> None:
        """Validate config structure; raise BiancoConfigurationError on failure."""
        debug = self._data.get("debug")
        if debug is not None and not isinstance(debug, bool):
            raise BiancoConfigurationError(
                "debug must be a bool",
                code="invalid_debug",
                details={"type": type(debug).__name__},
            )
        limit = self._data.get("debug_stack_limit")
        if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 1):
            raise BiancoConfigurationError(
                "debug_stack_limit must be a positive int",
                code="invalid_stack_limit",
                details={"value": limit},
            )
        level = self._data.get("log_level")
        if level is not None and str(level).upper() not in _LOG_LEVELS:
            raise BiancoConfigurationError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}",
                code="invalid_log_level",
                details={"value": level},
            )

    @property
    def raw(self) -> dict[str, Any]:
        """Raw config dict."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Get value by dot-separated path."""
        parts = key.split(".")
        obj: Any = self._data
        for part in parts:
            if isinstance(obj, dict) and part in obj:
                obj = obj[part]
            else:
                return default
        return obj

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        return key in self._data

    @property
    def debug(self) -> bool:
        """Default debug tracing for observables created without an explicit ``debug`` option."""
        parsed = _parse_bool_env(self._env.get("BIANCO_DEBUG", ""))
        if parsed is not None:
            return parsed
        return bool(self._data.get("debug", False))

    @property
    def debug_stack_limit(self) -> int:
        return int(self._data.get("debug_stack_limit", 25))

    @property
    def log_level(self) -> str:
        env_level = self._env.get("LOG_LEVEL", "").upper()
        if env_level in _LOG_LEVELS:
            return env_level
        return str(self._data.get("log_level", "INFO")).upper()


cfg: Config = Config({})
