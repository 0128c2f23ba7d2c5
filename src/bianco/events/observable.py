"""Observable: in-process publish/subscribe with pattern subscriptions.

Example::

    bus = Observable(ref="app")
    handle = bus.on("ping", lambda n: print("ping", n))
    bus.on(re.compile(r"^item-"), on_item)
    bus.trigger("ping", 5)
    handle.cleanup()

    modal = Modal()
    bus.observe(modal, "modal")
    modal.on("open", show)
    bus.trigger("modal-open")  # reaches ``show``
    modal.cleanup()            # removes only what ``modal`` registered
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from functools import partial
from typing import Any, TypeVar

from loguru import logger

from bianco.config import cfg
from bianco.core.constants import ALL_CALLBACKS
from bianco.core.errors import ObservableTargetError
from bianco.events.registry import EventKey, Listener, ListenerRegistry
from bianco.events.spy import Spy, debug_spy, send_to_spy
from bianco.meta import make_on_before_unmount
from bianco.validator import OptionsValidator

C = TypeVar("C")

_validator = OptionsValidator(
    {
        "ref": (False, str),
        "spy": (False, Callable),
        "debug": (False, bool),
    },
    "Observable",
)


@dataclass(frozen=True)
class Cleanup:
    """Handle for one registration; ``cleanup()`` undoes exactly that registration."""

    event: EventKey
    listener: Listener
    _undo: Callable[[], None] = field(repr=False, compare=False)

    def cleanup(self) -> None:
        self._undo()


def inject_members(target: Any, members: Mapping[str, Any]) -> None:
    """Set ``members`` as attributes on ``target``."""
    for name, value in members.items():
        try:
            setattr(target, name, value)
        except (AttributeError, TypeError) as exc:
            raise ObservableTargetError(
                f"cannot install {name!r} on {type(target).__name__}",
                code="target_not_writable",
                details={"member": name, "type": type(target).__name__},
                original_error=exc,
            ) from exc


class Observable:
    """Event emitter owning one ListenerRegistry.

    Options (all optional, validated at construction):

    - ``ref``: label used in child refs and debug traces
    - ``spy``: callable receiving a SpyEvent for every on/one/off/trigger
    - ``debug``: wrap the spy with call-stack tracing (defaults to ``cfg.debug``)

    When ``target`` is given, ``on``, ``one``, ``off``, ``trigger``, ``observe``
    and ``install`` are installed on it, plus ``_observer`` pointing back here.
    """

    def __init__(self, target: Any = None, **options: Any) -> None:
        _validator.validate(options)

        self._registry = ListenerRegistry()
        self._ref: str | None = options.get("ref")
        debug = options.get("debug")
        self._debug: bool = cfg.debug if debug is None else debug
        self._spy_option: Spy | None = options.get("spy")
        self._spy: Spy | None = debug_spy(self._spy_option) if self._debug else self._spy_option
        self._target: Any = self if target is None else target

        if target is not None:
            inject_members(
                target,
                {
                    "on": self.on,
                    "one": self.one,
                    "off": self.off,
                    "trigger": self.trigger,
                    "observe": self.observe,
                    "install": self.install,
                    "_observer": self,
                },
            )

    def __repr__(self) -> str:
        return f"<Observable ref={self._ref!r} listeners={len(self._registry)}>"

    @property
    def ref(self) -> str | None:
        return self._ref

    @property
    def spy(self) -> Spy | None:
        """Effective spy (debug-wrapped when debug is on)."""
        return self._spy

    @property
    def debug(self) -> bool:
        return self._debug

    @property
    def target(self) -> Any:
        """Decorated object, or this observable when there is none."""
        return self._target

    @property
    def registry(self) -> ListenerRegistry:
        return self._registry

    def has(self, event: EventKey, listener: Listener | None = None) -> bool:
        return self._registry.has(event, listener)

    def events(self) -> list[EventKey]:
        return self._registry.events()

    def on(self, event: EventKey, listener: Listener) -> Cleanup:
        """Listen for an event (name, ``"*"`` or compiled pattern).

        Registering the same listener twice for one event is a no-op.
        """
        send_to_spy("on", self, event, listener=listener)
        self._registry.add(event, listener)
        return Cleanup(event, listener, partial(self.off, event, listener))

    def one(self, event: EventKey, listener: Listener) -> Cleanup:
        """Listen for an event once.

        The registered listener is a wrapper, independent of any ``on``
        registration of the same function.
        """
        send_to_spy("one", self, event, listener=listener)

        def once(*args: Any) -> Any:
            self.off(event, once)
            return listener(*args)

        once.__wrapped__ = listener  # type: ignore[attr-defined]
        self._registry.add(event, once)
        return Cleanup(event, once, partial(self.off, event, once))

    def off(self, event: EventKey, listener: Listener | None = None) -> None:
        """Stop listening. ``off("*")`` removes every subscription."""
        send_to_spy("off", self, event, listener=listener)
        removed = self._registry.remove(event, listener)
        if event == ALL_CALLBACKS and listener is None and removed:
            logger.debug("[{}] Cleared {} listeners", self._ref or "observable", removed)

    def trigger(self, event: EventKey, *args: Any) -> None:
        """Emit an event.

        Exact listeners run first, then pattern listeners, each with ``*args``.
        Wildcard listeners run last with ``(event, *args)``, unless ``event``
        is ``"*"`` itself. Listener exceptions propagate and end the pass.
        """
        self._emit(event, args)

    def _emit(self, event: EventKey, args: tuple[Any, ...], skip: Iterable[Listener] = ()) -> None:
        """Dispatch ``args``; exact and pattern listeners in ``skip`` are left out."""
        send_to_spy("trigger", self, event, data=args)
        # Snapshot before running anything so listeners may subscribe/unsubscribe freely
        listeners = self._registry.match(event)
        wildcard = () if event == ALL_CALLBACKS else self._registry.wildcard()
        skip = frozenset(skip)

        for listener in listeners:
            if listener not in skip:
                listener(*args)

        for listener in wildcard:
            listener(event, *args)

    def observe(self, component: C, prefix: str | None = None) -> C:
        """Turn ``component`` into a child emitter of this observable.

        The component gets ``on``, ``one``, ``off``, ``trigger`` and
        ``cleanup``. Its listeners also answer ``"{prefix}-{event}"`` on this
        observable, and ``cleanup()`` removes only what it registered here.
        """
        from bianco.events.child import ChildBinding

        ChildBinding(self, component, prefix)
        return component

    def install(self, component: C, prefix: str | None = None) -> C:
        """Observe ``component`` and clean it up when its ``on_before_unmount`` hook runs."""
        self.observe(component, prefix)
        binding = component._binding  # type: ignore[attr-defined]
        make_on_before_unmount(component, lambda *_args, **_kwargs: binding.cleanup())
        return component


def make_observable(target: C, **options: Any) -> C:
    """Decorate ``target`` with an emitter API and return it."""
    Observable(target, **options)
    return target
