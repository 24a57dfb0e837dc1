"""Tests for core.services.worker and core.services.delivery."""

from __future__ import annotations

import asyncio
import concurrent.futures
import threading

import pytest

from core.services.delivery import InlineContext, LoopContext
from core.services.worker import BackgroundWorker


async def _thread_id() -> int:
    await asyncio.sleep(0)
    return threading.get_ident()


class TestBackgroundWorker:
    def test_runs_coroutines_on_its_own_thread(self) -> None:
        with BackgroundWorker() as worker:
            assert worker.is_running
            ident = worker.submit(_thread_id()).result(timeout=2)

        assert ident != threading.get_ident()
        assert not worker.is_running

    def test_start_is_idempotent(self) -> None:
        worker = BackgroundWorker()
        try:
            worker.start()
            loop = worker.loop
            worker.start()
            assert worker.loop is loop
        finally:
            worker.stop()

    def test_submit_requires_running_worker(self) -> None:
        worker = BackgroundWorker()

        with pytest.raises(RuntimeError):
            worker.submit(_thread_id())

    def test_stop_cancels_pending_work(self) -> None:
        with BackgroundWorker() as worker:
            future = worker.submit(asyncio.sleep(10))

        with pytest.raises(concurrent.futures.CancelledError):
            future.result(timeout=2)

    def test_stop_without_start_is_noop(self) -> None:
        BackgroundWorker().stop()


class TestDeliveryContexts:
    def test_inline_runs_immediately(self) -> None:
        seen: list[int] = []
        InlineContext().submit(seen.append, 1)
        assert seen == [1]

    @pytest.mark.asyncio
    async def test_loop_context_marshals_from_other_thread(self) -> None:
        context = LoopContext.current()
        done = asyncio.Event()
        seen: list[int] = []

        def deliver() -> None:
            seen.append(threading.get_ident())
            done.set()

        thread = threading.Thread(target=context.submit, args=(deliver,))
        thread.start()
        thread.join()
        await asyncio.wait_for(done.wait(), 2)

        assert seen == [threading.get_ident()]
        assert context.loop is asyncio.get_running_loop()
