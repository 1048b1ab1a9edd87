"""Async helpers for running blocking or slow code from an async context."""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Awaitable, Callable
from typing import TypeVar

T = TypeVar("T")


async def run_sync(fn: Callable[..., T], *args: object, **kwargs: object) -> T:
    """Run a blocking *fn* in the default executor without stalling the loop."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(fn, *args, **kwargs))


async def run_bounded(aw: Awaitable[T], timeout: float, default: T) -> tuple[T, bool]:
    """Await *aw* for at most *timeout* seconds.

    Returns ``(value, True)`` on completion and ``(default, False)`` when the
    deadline passes.  Exceptions raised by *aw* propagate.
    """
    try:
        return await asyncio.wait_for(aw, timeout), True
    except asyncio.TimeoutError:
        return default, False
