"""Configuration: the ``bianco`` section of a YAML file plus env overrides."""

from bianco.config.loader import SECTION, load_config, load_config_with_env, reload_config
from bianco.config.schema import SETTINGS_KEYS, Config, cfg

__all__ = ["SECTION", "SETTINGS_KEYS", "Config", "cfg", "load_config", "load_config_with_env", "reload_config"]
