"""Child bindings: scoped, optionally prefixed emitters mirrored into a parent."""

from __future__ import annotations

import re
from typing import Any

from loguru import logger

from bianco.core.constants import ALL_CALLBACKS
from bianco.events.observable import Cleanup, Observable, inject_members
from bianco.events.registry import EventKey, Listener, is_pattern

TrackedPair = tuple[EventKey, Listener]

# One or more leading global flag groups, e.g. "(?i)" or "(?im)"
_INLINE_FLAGS = re.compile(r"(?:\(\?[aiLmsux]+\))+")


def _reaches(key: EventKey, event: EventKey) -> bool:
    """True if a subscription under ``key`` receives a trigger of ``event``."""
    if is_pattern(event):
        return not is_pattern(key) and key != ALL_CALLBACKS and bool(event.search(key))  # type: ignore[union-attr, arg-type]
    if is_pattern(key):
        return bool(key.search(event))  # type: ignore[union-attr, arg-type]
    return key == event


def _unwrapped(listener: Listener) -> Listener | None:
    """Function behind a once-wrapper, or None for a plain listener."""
    return getattr(listener, "__wrapped__", None)


class ChildBinding:
    """Augments ``component`` with its own ``on/one/off/trigger/cleanup``.

    Every listener goes on a private Observable and, under
    ``prefixed(event)``, on the parent. Pairs this binding added to the
    parent are tracked so that ``cleanup()`` strips exactly those and leaves
    the parent's other subscriptions alone.
    """

    def __init__(self, parent: Observable, component: Any, prefix: str | None = None) -> None:
        self.parent = parent
        self.component = component
        self.prefix = prefix or None
        self.observer = Observable(
            ref=f"{parent.ref or 'parent'}-{prefix or 'child'}",
            spy=parent._spy_option,
            debug=parent.debug,
        )
        # (parent event, registered listener) -> function the caller passed in
        self.tracked_pairs: dict[TrackedPair, Listener] = {}

        inject_members(
            component,
            {
                "on": self.on,
                "one": self.one,
                "off": self.off,
                "trigger": self.trigger,
                "cleanup": self.cleanup,
                "_binding": self,
            },
        )
        logger.debug("Observing {} as {}", type(component).__name__, self.observer.ref)

    def prefixed(self, event: EventKey) -> EventKey:
        """Name of ``event`` on the parent."""
        if not self.prefix:
            return event
        if is_pattern(event):
            return self._prefixed_pattern(event)  # type: ignore[arg-type]
        return f"{self.prefix}-{event}"

    def _prefixed_pattern(self, pattern: re.Pattern[str]) -> re.Pattern[str]:
        # Match "<prefix>-" and then apply the original pattern to the remainder.
        # Inline flags are already in pattern.flags and may only lead the expression.
        head = re.escape(f"{self.prefix}-")
        source = pattern.pattern
        leading = _INLINE_FLAGS.match(source)
        if leading:
            source = source[leading.end() :]
        if source.startswith("^"):
            return re.compile(f"^{head}(?:{source[1:]})", pattern.flags)
        return re.compile(f"^{head}.*?(?:{source})", pattern.flags)

    def _track(self, event: EventKey, listener: Listener, fn: Listener) -> None:
        self.tracked_pairs[(event, listener)] = fn

    def _untrack(self, event: EventKey, listener: Listener) -> None:
        self.tracked_pairs.pop((event, listener), None)

    def on(self, event: EventKey, fn: Listener) -> Cleanup:
        child = self.observer.on(event, fn)
        if event == ALL_CALLBACKS:
            return child

        parent_event = self.prefixed(event)
        if not self.parent.has(parent_event, fn):
            self.parent.on(parent_event, fn)
            self._track(parent_event, fn, fn)

        def undo() -> None:
            child.cleanup()
            self._remove_tracked(parent_event, fn)

        return Cleanup(event, fn, undo)

    def one(self, event: EventKey, fn: Listener) -> Cleanup:
        child = self.observer.one(event, fn)
        if event == ALL_CALLBACKS:
            return child

        parent_event = self.prefixed(event)

        def forward(*args: Any) -> Any:
            self._untrack(parent_event, forward)
            self.parent.off(parent_event, forward)
            return fn(*args)

        forward.__wrapped__ = fn  # type: ignore[attr-defined]
        self.parent.on(parent_event, forward)
        self._track(parent_event, forward, fn)

        def undo() -> None:
            child.cleanup()
            self._remove_tracked(parent_event, forward)

        return Cleanup(event, child.listener, undo)

    def _remove_tracked(self, event: EventKey, listener: Listener) -> None:
        if (event, listener) in self.tracked_pairs:
            self.parent.off(event, listener)
            self._untrack(event, listener)

    def off(self, event: EventKey = ALL_CALLBACKS, fn: Listener | None = None) -> None:
        """Remove listeners this binding registered.

        ``off("*")`` strips every tracked pair from the parent and resets the
        child. ``off(event, fn)`` removes that pair on both sides, including
        pending ``one(event, fn)`` registrations. ``off(event)`` removes every
        listener this binding holds for ``event``.
        """
        if event == ALL_CALLBACKS and fn is None:
            count = len(self.tracked_pairs)
            for parent_event, listener in list(self.tracked_pairs):
                self.parent.off(parent_event, listener)
            self.tracked_pairs.clear()
            self.observer.off(ALL_CALLBACKS)
            if count:
                logger.debug("[{}] Removed {} listeners from parent", self.observer.ref, count)
            return

        if event != ALL_CALLBACKS:
            parent_event = self.prefixed(event)
            for (tracked_event, listener), source in list(self.tracked_pairs.items()):
                if tracked_event == parent_event and (fn is None or fn in (listener, source)):
                    self._remove_tracked(tracked_event, listener)

        if fn is not None:
            wrappers = [w for key, w in self.observer.registry if key == event and _unwrapped(w) == fn]
            for wrapper in wrappers:
                self.observer.off(event, wrapper)

        self.observer.off(event, fn)

    def trigger(self, event: EventKey, *args: Any) -> None:
        """Emit on the child, then ``prefixed(event)`` on the parent.

        Listeners that ran on the child side, and the parent copies this
        binding forwarded, are skipped by the parent's exact and pattern
        listeners. Parent wildcards still run.
        """
        ran = self.observer.registry.match(event)
        self.observer.trigger(event, *args)
        if event == ALL_CALLBACKS:
            return

        parent_event = self.prefixed(event)
        skip = set(ran)
        skip.update(wrapped for wrapped in map(_unwrapped, ran) if wrapped is not None)
        skip.update(listener for key, listener in self.tracked_pairs if _reaches(key, parent_event))
        self.parent._emit(parent_event, args, skip=skip)

    def cleanup(self) -> None:
        self.off(ALL_CALLBACKS)
