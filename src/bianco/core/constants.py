"""Event bus constants."""

from __future__ import annotations

from typing import Literal

ALL_CALLBACKS = "*"

SpyOperation = Literal["on", "one", "off", "trigger"]
SPY_OPERATIONS: tuple[SpyOperation, ...] = ("on", "one", "off", "trigger")

LifecycleHook = Literal[
    "on_before_mount",
    "on_mounted",
    "on_before_update",
    "on_updated",
    "on_before_unmount",
    "on_unmounted",
]
