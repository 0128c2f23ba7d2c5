"""Listener registry: exact-name and pattern subscriptions."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from typing import Any, Union

from bianco.core.constants import ALL_CALLBACKS

Listener = Callable[..., Any]
EventKey = Union[str, re.Pattern[str]]

# Insertion-ordered set of listeners
ListenerSet = dict[Listener, None]


def pattern_key(pattern: re.Pattern[str]) -> str:
    """Serialize a compiled pattern so equal source/flags share one entry."""
    return f"{pattern.pattern}/{pattern.flags}"


def is_pattern(event: object) -> bool:
    return isinstance(event, re.Pattern)


class ListenerRegistry:
    """Two maps of listener sets, keyed by event name and by pattern.

    Empty sets are never kept: removing the last listener of a key drops the
    key (and, for patterns, the compiled pattern from the side table).
    """

    def __init__(self) -> None:
        self.by_name: dict[str, ListenerSet] = {}
        self.by_pattern: dict[str, ListenerSet] = {}
        self.patterns: dict[str, re.Pattern[str]] = {}

    def _bucket(self, event: EventKey) -> tuple[dict[str, ListenerSet], str]:
        if is_pattern(event):
            key = pattern_key(event)  # type: ignore[arg-type]
            return self.by_pattern, key
        return self.by_name, str(event)

    def add(self, event: EventKey, listener: Listener) -> bool:
        """Add ``listener`` under ``event``. Return False if it was already there."""
        bucket, key = self._bucket(event)
        listeners = bucket.get(key)
        if listeners is None:
            bucket[key] = {listener: None}
            if is_pattern(event):
                self.patterns[key] = event  # type: ignore[assignment]
            return True
        if listener in listeners:
            return False
        listeners[listener] = None
        return True

    def remove(self, event: EventKey, listener: Listener | None = None) -> int:
        """Remove one listener, or the whole key when ``listener`` is None.

        ``remove("*")`` without a listener resets both maps. Returns the number
        of listeners removed; unknown keys and listeners remove nothing.
        """
        if event == ALL_CALLBACKS and listener is None:
            count = len(self)
            self.clear()
            return count

        bucket, key = self._bucket(event)
        listeners = bucket.get(key)
        if listeners is None:
            return 0

        if listener is None:
            removed = len(listeners)
            self._drop(bucket, key)
            return removed

        if listener not in listeners:
            return 0
        del listeners[listener]
        if not listeners:
            self._drop(bucket, key)
        return 1

    def _drop(self, bucket: dict[str, ListenerSet], key: str) -> None:
        del bucket[key]
        if bucket is self.by_pattern:
            self.patterns.pop(key, None)

    def clear(self) -> None:
        self.by_name.clear()
        self.by_pattern.clear()
        self.patterns.clear()

    def has(self, event: EventKey, listener: Listener | None = None) -> bool:
        """True if ``event`` has any listener (or ``listener`` specifically)."""
        bucket, key = self._bucket(event)
        listeners = bucket.get(key)
        if listeners is None:
            return False
        return listener is None or listener in listeners

    def match(self, event: EventKey) -> tuple[Listener, ...]:
        """Listeners that should receive ``event``, in dispatch order.

        For a name: exact subscribers, then pattern subscribers whose pattern
        matches it. ``"*"`` resolves to the wildcard bucket only. For a
        pattern: subscribers of every exact name the pattern matches.
        A listener found in more than one bucket is returned once.
        """
        found: ListenerSet = {}

        if is_pattern(event):
            for name, listeners in self.by_name.items():
                if name != ALL_CALLBACKS and event.search(name):  # type: ignore[union-attr]
                    found.update(listeners)
            return tuple(found)

        found.update(self.by_name.get(event, {}))  # type: ignore[arg-type]
        if event == ALL_CALLBACKS:
            return tuple(found)

        for key, listeners in self.by_pattern.items():
            if self.patterns[key].search(event):  # type: ignore[arg-type]
                found.update(listeners)
        return tuple(found)

    def wildcard(self) -> tuple[Listener, ...]:
        return tuple(self.by_name.get(ALL_CALLBACKS, ()))

    def events(self) -> list[EventKey]:
        """Registered keys: event names first, then compiled patterns."""
        return [*self.by_name, *(self.patterns[key] for key in self.by_pattern)]

    def __len__(self) -> int:
        return sum(len(s) for s in self.by_name.values()) + sum(len(s) for s in self.by_pattern.values())

    def __bool__(self) -> bool:
        return bool(self.by_name or self.by_pattern)

    def __iter__(self) -> Iterator[tuple[EventKey, Listener]]:
        """Iterate ``(event, listener)`` pairs, names before patterns."""
        for name, listeners in self.by_name.items():
            for listener in listeners:
                yield name, listener
        for key, listeners in self.by_pattern.items():
            for listener in listeners:
                yield self.patterns[key], listener
