"""Delivery contexts.

A delivery context decides *where* a terminal callback runs. The presenter
owns one bound to the loop that drives the view; runners only call `submit`.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable


class LoopContext:
    """Runs callbacks on a specific asyncio loop, from any thread."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    @classmethod
    def current(cls) -> "LoopContext":
        """Bind to the running loop (must be called from inside it)."""

        return cls(asyncio.get_running_loop())

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def submit(self, fn: Callable[..., Any], *args: Any) -> None:
        self._loop.call_soon_threadsafe(fn, *args)


class InlineContext:
    """Runs callbacks immediately on the calling thread."""

    def submit(self, fn: Callable[..., Any], *args: Any) -> None:
        fn(*args)
