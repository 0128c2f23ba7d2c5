"""Component lifecycle helpers: stackable hooks and state merging."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from bianco.core.constants import LifecycleHook
from bianco.core.errors import ObservableTargetError


class MakeHook(Protocol):
    """Installs ``fn`` onto a component's lifecycle hook."""

    def __call__(self, component: Any, fn: Callable[..., Any], run_after: bool = False) -> None: ...


def mk_hook(hook: LifecycleHook) -> MakeHook:
    """Closure to implement stackable hooks.

    The returned function wraps ``component.<hook>`` so that ``fn`` runs
    alongside any existing hook. By default the original hook runs first and
    ``fn`` second; ``run_after=True`` runs the original after ``fn``.
    Hooks can be stacked any number of times.
    """

    def install_hook(component: Any, fn: Callable[..., Any], run_after: bool = False) -> None:
        original = getattr(component, hook, None)

        def wrapped(*args: Any, **kwargs: Any) -> None:
            if not run_after and original:
                original(*args, **kwargs)

            fn(*args, **kwargs)

            if run_after and original:
                original(*args, **kwargs)

        try:
            setattr(component, hook, wrapped)
        except (AttributeError, TypeError) as exc:
            raise ObservableTargetError(
                f"cannot install {hook} on {type(component).__name__}",
                code="target_not_writable",
                details={"hook": hook},
                original_error=exc,
            ) from exc

    return install_hook


make_on_before_mount = mk_hook("on_before_mount")
make_on_mounted = mk_hook("on_mounted")
make_on_before_update = mk_hook("on_before_update")
make_on_updated = mk_hook("on_updated")
make_on_before_unmount = mk_hook("on_before_unmount")
make_on_unmounted = mk_hook("on_unmounted")


def merge_state(component: Any, state: dict[str, Any]) -> None:
    """Shallow-merge ``state`` into ``component.state``."""
    component.state = {**(getattr(component, "state", None) or {}), **state}
