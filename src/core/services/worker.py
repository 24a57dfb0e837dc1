"""Background worker: a dedicated event loop on a daemon thread.

Chain runs submitted here never block the loop that owns the view; results
travel back through a delivery context.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import threading
from typing import Any, Coroutine, TypeVar

from core.log import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


class BackgroundWorker:
    """Owns one event loop running in a background thread.

    Usable as a context manager; `stop()` cancels pending tasks, stops the
    loop and joins the thread.
    """

    def __init__(self, name: str = "fetch-chain-worker") -> None:
        self._name = name
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._ready = threading.Event()

    @property
    def is_running(self) -> bool:
        """Whether the worker thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            raise RuntimeError("BackgroundWorker is not started")
        return self._loop

    def start(self) -> "BackgroundWorker":
        if self.is_running:
            return self

        self._ready.clear()
        self._thread = threading.Thread(target=self._run_loop, name=self._name, daemon=True)
        self._thread.start()
        self._ready.wait()
        logger.debug("worker_started", name=self._name)
        return self

    def submit(self, coro: Coroutine[Any, Any, T]) -> concurrent.futures.Future[T]:
        """Schedule `coro` on the worker loop.

        Cancelling the returned future cancels the underlying task.
        """

        if not self.is_running:
            coro.close()
            raise RuntimeError("BackgroundWorker is not running")
        return asyncio.run_coroutine_threadsafe(coro, self.loop)

    def stop(self, timeout: float = 5.0) -> None:
        """Cancel pending work, stop the loop and join the thread."""
        if self._loop is None or self._thread is None:
            return

        loop = self._loop
        if self.is_running:
            loop.call_soon_threadsafe(self._cancel_all)
            loop.call_soon_threadsafe(loop.stop)
        self._thread.join(timeout=timeout)
        self._thread = None
        logger.debug("worker_stopped", name=self._name)

    def __enter__(self) -> "BackgroundWorker":
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _cancel_all(self) -> None:
        for task in asyncio.all_tasks(self.loop):
            task.cancel()

    def _run_loop(self) -> None:
        """Background thread: create the loop and run it until stopped."""
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        self._ready.set()
        try:
            loop.run_forever()
            # Let cancelled tasks unwind before closing.
            pending = asyncio.all_tasks(loop)
            if pending:
                loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
        finally:
            loop.close()
            self._loop = None
