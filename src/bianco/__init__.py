"""Bianco: in-process event bus with pattern subscriptions, child emitters and spies."""

from bianco.config import Config, cfg, load_config, load_config_with_env, reload_config
from bianco.core.constants import ALL_CALLBACKS
from bianco.core.errors import (
    BiancoConfigurationError,
    BiancoError,
    ObservableTargetError,
    OptionsValidatorError,
)
from bianco.events import (
    ChildBinding,
    Cleanup,
    ListenerRegistry,
    Observable,
    SpyEvent,
    SpyTrace,
    debug_spy,
    make_observable,
)
from bianco.log import setup_logging
from bianco.meta import (
    make_on_before_mount,
    make_on_before_unmount,
    make_on_before_update,
    make_on_mounted,
    make_on_unmounted,
    make_on_updated,
    merge_state,
    mk_hook,
)
from bianco.validator import OptionsValidator

__version__ = "0.4.0"

__all__ = [
    "ALL_CALLBACKS",
    "BiancoConfigurationError",
    "BiancoError",
    "ChildBinding",
    "Cleanup",
    "Config",
    "ListenerRegistry",
    "Observable",
    "ObservableTargetError",
    "OptionsValidator",
    "OptionsValidatorError",
    "SpyEvent",
    "SpyTrace",
    "__version__",
    "cfg",
    "debug_spy",
    "load_config",
    "load_config_with_env",
    "make_observable",
    "make_on_before_mount",
    "make_on_before_unmount",
    "make_on_before_update",
    "make_on_mounted",
    "make_on_unmounted",
    "make_on_updated",
    "merge_state",
    "mk_hook",
    "reload_config",
    "setup_logging",
]
