"""Config loading: the ``bianco`` section of a YAML file, with optional .env overlay.

Example file::

    bianco:
      debug: true
      debug_stack_limit: 10
      log_level: DEBUG

Other top-level sections belong to the host application and are ignored.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from bianco.config.schema import SETTINGS_KEYS, Config, cfg
from bianco.core.errors import BiancoConfigurationError

SECTION = "bianco"


def _deep_update(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_update(result[key], value)
        else:
            result[key] = value
    return result


def _read_yaml(path: Path) -> Any:
    try:
        with open(path) as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as exc:
        logger.error("Failed to parse config {}: {}", path, exc)
        raise BiancoConfigurationError(
            f"cannot parse config file {path}",
            code="invalid_yaml",
            details={"path": str(path)},
            original_error=exc,
        ) from exc


def load_config(path: str | Path, section: str = SECTION) -> dict[str, Any]:
    """Load bus settings from the ``section`` mapping of a YAML file.

    A missing file, an empty file or a file without the section gives ``{}``.
    Unknown keys inside the section are dropped with a warning.
    """
    path = Path(path)
    if not path.exists():
        logger.warning("Config file not found: {}", path)
        return {}

    data = _read_yaml(path)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BiancoConfigurationError(
            f"config file {path} must contain a mapping",
            code="invalid_structure",
            details={"path": str(path), "type": type(data).__name__},
        )

    settings = data.get(section)
    if settings is None:
        logger.debug("No {} section in {}", section, path)
        return {}
    if not isinstance(settings, dict):
        raise BiancoConfigurationError(
            f"{section} section of {path} must be a mapping",
            code="invalid_section",
            details={"path": str(path), "section": section},
        )

    unknown = [str(key) for key in settings if key not in SETTINGS_KEYS]
    if unknown:
        logger.warning("Ignoring unknown {} settings in {}: {}", section, path, ", ".join(unknown))
    return {key: value for key, value in settings.items() if key in SETTINGS_KEYS}


def load_config_with_env(path: str | Path, section: str = SECTION) -> dict[str, Any]:
    """Load bus settings after loading .env into the process environment."""
    from dotenv import load_dotenv

    load_dotenv()
    return load_config(path, section)


def reload_config(path: str | Path, overrides: dict[str, Any] | None = None, section: str = SECTION) -> Config:
    """Validate the settings from ``path`` (plus ``overrides``) and apply them to the global cfg.

    On a validation error the global cfg keeps its previous settings.
    """
    data = load_config_with_env(path, section)
    if overrides:
        data = _deep_update(data, overrides)

    Config(data)._validate()
    cfg.reload(data)
    logger.info("Loaded {} settings from {}", section, path)
    return cfg
