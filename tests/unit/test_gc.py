# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for the background garbage collector."""

from __future__ import annotations

import asyncio

import pytest

from tests.helpers import FakeClock, make_executor
from ttlstore.core.exceptions import BackendError
from ttlstore.gc import GarbageCollector
from ttlstore.store import KVStore

STATEMENT = 'DELETE FROM "t" WHERE e != 0 AND e <= :expiry'


def _collector(executor, *, interval: float = 0.01, clock=None) -> GarbageCollector:
    return GarbageCollector(
        executor,
        STATEMENT,
        interval=interval,
        timeout=1.0,
        clock=clock or FakeClock(),
    )


class TestSweep:
    async def test_passes_whole_second_now(self) -> None:
        executor = make_executor()
        executor.execute.return_value = 3
        gc = _collector(executor, clock=FakeClock(1_000.7))
        assert await gc.sweep() == 3
        executor.execute.assert_awaited_once_with(STATEMENT, {"expiry": 1_000})

    async def test_unknown_row_count(self) -> None:
        executor = make_executor()
        executor.execute.return_value = []
        assert await _collector(executor).sweep() == -1

    async def test_errors_propagate_from_direct_sweep(self) -> None:
        executor = make_executor()
        executor.execute.side_effect = BackendError("boom")
        with pytest.raises(BackendError):
            await _collector(executor).sweep()

    async def test_real_backend(self, store: KVStore, clock: FakeClock) -> None:
        await store.set("expired", b"1", ttl=1)
        await store.set("boundary", b"2", ttl=5)
        await store.set("live", b"3", ttl=60)
        await store.set("forever", b"4")
        clock.advance(5)
        assert await store.gc.sweep() == 2
        assert await store.count() == 2
        assert await store.get_all() == {"live": b"3", "forever": b"4"}


class TestLoop:
    async def test_start_and_stop(self) -> None:
        gc = _collector(make_executor(), interval=60)
        gc.start()
        assert gc.running is True
        await gc.stop()
        assert gc.running is False

    async def test_start_is_idempotent(self) -> None:
        executor = make_executor()
        gc = _collector(executor, interval=60)
        gc.start()
        task = gc._task
        gc.start()
        assert gc._task is task
        await gc.stop()

    async def test_stop_without_start(self) -> None:
        await _collector(make_executor()).stop()

    async def test_loop_sweeps_repeatedly(self) -> None:
        executor = make_executor()
        executor.execute.return_value = 0
        gc = _collector(executor)
        gc.start()
        await asyncio.sleep(0.1)
        await gc.stop()
        assert executor.execute.await_count >= 2

    async def test_failures_do_not_stop_loop(self, caplog: pytest.LogCaptureFixture) -> None:
        calls: list[object] = []

        async def _flaky(statement, params=None):
            calls.append(params)
            if len(calls) == 1:
                raise BackendError("connection reset")
            return 0

        executor = make_executor()
        executor.execute.side_effect = _flaky
        gc = _collector(executor)
        with caplog.at_level("ERROR", logger="ttlstore.gc"):
            gc.start()
            await asyncio.sleep(0.1)
            await gc.stop()
        assert len(calls) >= 2
        assert "Garbage collection sweep failed" in caplog.text

    async def test_no_sweep_after_stop(self) -> None:
        executor = make_executor()
        executor.execute.return_value = 0
        gc = _collector(executor)
        gc.start()
        await asyncio.sleep(0.05)
        await gc.stop()
        count = executor.execute.await_count
        await asyncio.sleep(0.05)
        assert executor.execute.await_count == count
