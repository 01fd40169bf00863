# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""GarbageCollector -- background sweep of expired rows.

Uses pure asyncio.  One collector task runs per store; every tick issues
a single bulk delete of rows whose expiry has passed.  Reads never depend
on the collector having run: expired rows are filtered at read time.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable

from ttlstore.storage.executor import QueryExecutor, run_statement

logger = logging.getLogger("ttlstore.gc")


class GarbageCollector:
    """Asyncio task that deletes expired rows on a fixed interval.

    Args:
        executor: Executor shared with the owning store.
        statement: Bulk delete taking an ``:expiry`` parameter.
        interval: Seconds between sweeps.
        timeout: Per-sweep backend timeout in seconds.
        clock: Returns the current Unix time.
    """

    def __init__(
        self,
        executor: QueryExecutor,
        statement: str,
        *,
        interval: float,
        timeout: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._executor = executor
        self._statement = statement
        self._interval = interval
        self._timeout = timeout
        self._clock = clock
        self._task: asyncio.Task[None] | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def interval(self) -> float:
        return self._interval

    def start(self) -> None:
        """Start the collector loop on the running event loop."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._loop(), name="ttlstore-gc")
        logger.info("Garbage collector started (interval=%ss)", self._interval)

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        self._running = False
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
            logger.info("Garbage collector stopped")

    async def _loop(self) -> None:
        while self._running:
            await asyncio.sleep(self._interval)
            try:
                await self.sweep()
            except Exception:
                logger.exception(
                    "Garbage collection sweep failed",
                    extra={"backend": self._executor.dialect},
                )

    async def sweep(self) -> int:
        """Delete every row whose expiry is non-zero and not in the future.

        Returns:
            Rows removed, or ``-1`` if the backend does not report it.
        """
        now = int(self._clock())
        result = await run_statement(
            self._executor, self._statement, {"expiry": now}, timeout=self._timeout
        )
        removed = result if isinstance(result, int) else -1
        if removed > 0:
            logger.debug(
                "Garbage collector removed %d expired rows",
                removed,
                extra={"backend": self._executor.dialect},
            )
        return removed
