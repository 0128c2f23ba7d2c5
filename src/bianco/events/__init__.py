"""Event bus: registry, observable, child bindings and spy tracing."""

from bianco.events.child import ChildBinding
from bianco.events.observable import Cleanup, Observable, make_observable
from bianco.events.registry import ListenerRegistry, pattern_key
from bianco.events.spy import SpyEvent, SpyTrace, capture_stack, debug_spy

__all__ = [
    "ChildBinding",
    "Cleanup",
    "ListenerRegistry",
    "Observable",
    "SpyEvent",
    "SpyTrace",
    "capture_stack",
    "debug_spy",
    "make_observable",
    "pattern_key",
]
