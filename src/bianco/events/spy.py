"""Spy channel: structured records of every bus operation, plus debug tracing."""

from __future__ import annotations

import traceback
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

from bianco.config import cfg
from bianco.core.constants import SpyOperation

if TYPE_CHECKING:
    from bianco.events.observable import Observable
    from bianco.events.registry import EventKey, Listener

# Frames from files under this directory are bus internals
_PACKAGE_ROOT = Path(__file__).resolve().parent.parent


@dataclass(frozen=True)
class SpyTrace:
    """Call site of a bus operation, captured in debug mode."""

    label: str
    stack: list[str] = field(default_factory=list)

    def format(self) -> str:
        return "\n".join([self.label, *self.stack])


@dataclass(frozen=True)
class SpyEvent:
    """One bus operation as seen by a spy."""

    operation: SpyOperation
    event: EventKey
    context: Observable
    listener: Listener | None = None
    data: tuple[Any, ...] | None = None
    trace: SpyTrace | None = None


Spy = Callable[[SpyEvent], Any]


def send_to_spy(
    operation: SpyOperation,
    context: Observable,
    event: EventKey,
    *,
    listener: Listener | None = None,
    data: tuple[Any, ...] | None = None,
) -> None:
    """Hand a record to the observable's spy, if it has one."""
    spy = context.spy
    if spy is None:
        return
    spy(SpyEvent(operation=operation, event=event, context=context, listener=listener, data=data))


def _is_internal(frame: traceback.FrameSummary) -> bool:
    try:
        return Path(frame.filename).resolve().is_relative_to(_PACKAGE_ROOT)
    except (OSError, ValueError):
        return False


def capture_stack(limit: int | None = None) -> list[str]:
    """Formatted call stack, innermost last, without bus-internal frames."""
    frames = [f for f in traceback.extract_stack() if not _is_internal(f)]
    if limit is not None:
        frames = frames[-limit:]
    return [line.rstrip("\n") for line in traceback.format_list(frames)]


def _event_label(event: EventKey) -> str:
    return event if isinstance(event, str) else f"/{event.pattern}/"


def debug_spy(spy: Spy | None = None) -> Spy:
    """Wrap ``spy`` so every record carries a SpyTrace and is logged.

    The wrapper logs ``"<operation> <event>"`` with the filtered call stack at
    DEBUG, then forwards the record (with ``trace`` set) to ``spy`` if given.
    Dispatch is not affected.
    """

    def trace_spy(record: SpyEvent) -> None:
        label = f"{record.operation} {_event_label(record.event)}"
        trace = SpyTrace(label=label, stack=capture_stack(cfg.debug_stack_limit))
        ref = record.context.ref or "observable"
        logger.debug("[{}] {}\n{}", ref, label, "\n".join(trace.stack))

        if spy is not None:
            spy(replace(record, trace=trace))

    return trace_spy
