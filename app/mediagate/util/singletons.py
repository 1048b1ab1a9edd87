"""Reset hooks for process-wide objects, used to isolate tests."""

from __future__ import annotations

from collections.abc import Callable

_reset_fns: list[Callable[[], None]] = []


def register_singleton(reset_fn: Callable[[], None]) -> None:
    """Register *reset_fn* once; repeated registration is a no-op."""
    if reset_fn not in _reset_fns:
        _reset_fns.append(reset_fn)


def reset_all_singletons() -> None:
    for fn in _reset_fns:
        fn()
