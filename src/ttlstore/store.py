# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Expiring key-value store facade.

:class:`KVStore` is the primary public interface.  It wraps a
:class:`~ttlstore.storage.executor.QueryExecutor`, applies the expiry
policy from :mod:`ttlstore.expiry` on every read path, decodes raw
backend results through :mod:`ttlstore.decode`, and owns the background
:class:`~ttlstore.gc.GarbageCollector`.

Two behaviours callers should know about:

* :meth:`KVStore.count` reports physical rows.  Rows that have expired
  but have not been garbage-collected yet are still counted, whereas
  :meth:`KVStore.get_all` filters them out.
* :meth:`KVStore.set_ttl` checks the key is live and then updates its
  expiry in a second statement.  A concurrent writer may delete or
  overwrite the key in between; a delete is reported as
  :class:`KeyNotFoundError`, an overwrite gets the new expiry.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from types import TracebackType
from typing import Any

from ttlstore.core.config import Settings, get_settings
from ttlstore.core.exceptions import (
    BackendConnectionError,
    BackendError,
    DecodeError,
    KeyExpiredError,
    KeyNotFoundError,
    StoreTimeoutError,
    TTLStoreError,
)
from ttlstore.decode import decode_count, decode_entry, decode_expiry, encode_value, unwrap_rows
from ttlstore.expiry import TTL, Lifetime, remaining, to_absolute
from ttlstore.gc import GarbageCollector
from ttlstore.storage.executor import QueryExecutor, QueryResult, run_statement
from ttlstore.storage.factory import create_executor
from ttlstore.storage.statements import Statements

logger = logging.getLogger("ttlstore.store")


class KVStore:
    """Key-value store with per-key expiry on top of a query executor.

    Prefer :meth:`open`, which connects, prepares the table and starts
    the garbage collector.  Safe for concurrent use from many tasks;
    no mutable state is shared beyond the executor.

    Args:
        executor: The backend executor.
        settings: Store configuration; environment defaults when ``None``.
        clock: Returns the current Unix time in seconds.
    """

    def __init__(
        self,
        executor: QueryExecutor,
        settings: Settings | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._executor = executor
        self._settings = settings or get_settings()
        self._clock = clock
        self._statements = Statements.for_table(
            self._settings.table, executor.dialect, self._settings.namespace
        )
        self._gc = GarbageCollector(
            executor,
            self._statements.gc,
            interval=self._settings.gc_interval,
            timeout=self._settings.timeout,
            clock=clock,
        )
        self._closed = False

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    async def open(
        cls,
        settings: Settings | None = None,
        executor: QueryExecutor | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> KVStore:
        """Create a ready-to-use store.

        Connects the executor, creates the table if missing, resets it
        when ``settings.reset`` is set and starts the garbage collector
        when ``settings.gc_interval > 0``.

        Raises:
            BackendConnectionError: If the backend cannot be reached.
            TTLStoreError: If schema setup or the initial reset fails.
                The executor is closed before the error propagates.
        """
        settings = settings or get_settings()
        executor = executor or create_executor(settings)
        store = cls(executor, settings, clock=clock)
        try:
            await store._initialise()
        except BaseException:
            await store._close_quietly()
            raise
        return store

    async def _initialise(self) -> None:
        timeout = self._settings.timeout
        try:
            async with asyncio.timeout(timeout):
                await self._executor.connect()
        except TimeoutError as exc:
            msg = f"Timed out connecting to {self._executor.dialect} after {timeout}s"
            raise BackendConnectionError(msg) from exc

        try:
            async with asyncio.timeout(timeout):
                await self._executor.ensure_schema(self._statements.schema)
        except TimeoutError as exc:
            msg = f"Timed out preparing table {self._statements.table} after {timeout}s"
            raise StoreTimeoutError(msg) from exc

        if self._settings.reset:
            await self.reset()

        if self._settings.gc_interval > 0:
            self._gc.start()

    async def _close_quietly(self) -> None:
        self._closed = True
        try:
            await self._executor.close()
        except Exception:
            logger.warning("Failed to close executor after aborted open", exc_info=True)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def get(self, key: str) -> bytes:
        """Return the value stored under *key*.

        Raises:
            KeyNotFoundError: No row exists for *key*.
            KeyExpiredError: The row has expired; it is deleted best-effort.
            DecodeError: The backend returned a malformed row.
        """
        _check_key(key)
        rows = await self._fetch(self._statements.select, {"key": key})
        if not rows:
            raise KeyNotFoundError(key)
        entry = decode_entry(rows[0])
        if entry.key != key:
            raise DecodeError(f"lookup for {key!r} returned row for {entry.key!r}")
        now = self._clock()
        if not entry.is_live(now):
            await self._evict(key, now)
            raise KeyExpiredError(key)
        return entry.value

    async def set(self, key: str, value: bytes | str, ttl: TTL = None) -> None:
        """Store *value* under *key*, replacing any previous value and expiry.

        Args:
            key: Non-empty key.
            value: Bytes, or a string which is stored UTF-8 encoded.
            ttl: Seconds or a ``timedelta``.  ``None`` applies
                ``settings.default_expiration``; ``<= 0`` never expires.

        Raises:
            ValueError: *key* is empty, or *ttl* is not finite or too large
                to store.
        """
        _check_key(key)
        if isinstance(value, str):
            value = value.encode("utf-8")
        elif isinstance(value, (bytearray, memoryview)):
            value = bytes(value)
        elif not isinstance(value, bytes):
            raise TypeError(f"value must be bytes or str, got {type(value).__name__}")

        if ttl is None:
            ttl = self._settings.default_expiration
        expiry = to_absolute(ttl, self._clock())
        await self._run(
            self._statements.upsert,
            {"key": key, "value": encode_value(value), "expiry": expiry},
        )

    async def delete(self, key: str) -> None:
        """Delete *key*.  Deleting a missing key is not an error."""
        _check_key(key)
        await self._run(self._statements.delete, {"key": key})

    async def has(self, key: str) -> bool:
        """Return ``True`` if *key* exists and is live."""
        try:
            await self.get(key)
        except KeyNotFoundError:
            return False
        return True

    async def count(self) -> int:
        """Return the number of rows in the table.

        Expired rows not yet removed by the garbage collector are
        included; use ``len(await store.get_all())`` for live entries.
        """
        return decode_count(await self._run(self._statements.count))

    async def set_ttl(self, key: str, ttl: TTL) -> None:
        """Replace the expiry of a live *key*, keeping its value.

        *ttl* follows :meth:`set`: ``None`` applies
        ``settings.default_expiration`` and ``<= 0`` never expires.  Not
        atomic: the liveness check and the update are two statements.

        Raises:
            KeyNotFoundError: *key* is missing, or vanished before the update.
            KeyExpiredError: *key* has expired.
        """
        await self.get(key)
        if ttl is None:
            ttl = self._settings.default_expiration
        expiry = to_absolute(ttl, self._clock())
        updated = await self._run(
            self._statements.update_expiry, {"key": key, "expiry": expiry}
        )
        if updated == 0:
            raise KeyNotFoundError(key)

    async def get_ttl(self, key: str) -> float | Lifetime:
        """Return the seconds until *key* expires, or ``Lifetime.NEVER_EXPIRES``.

        Raises:
            KeyNotFoundError: No row exists for *key*.
            KeyExpiredError: The row's expiry has passed.
        """
        _check_key(key)
        rows = await self._fetch(self._statements.select_expiry, {"key": key})
        if not rows:
            raise KeyNotFoundError(key)
        left = remaining(decode_expiry(rows[0]), self._clock())
        if left is Lifetime.ALREADY_EXPIRED:
            raise KeyExpiredError(key)
        return left

    async def get_all(self) -> dict[str, bytes]:
        """Return every live entry.

        Expired rows and rows that fail to decode are skipped.
        """
        rows = await self._fetch(self._statements.scan)
        now = self._clock()
        data: dict[str, bytes] = {}
        for row in rows:
            try:
                entry = decode_entry(row)
            except DecodeError as exc:
                logger.debug("Skipping malformed row during scan: %s", exc)
                continue
            if entry.is_live(now):
                data[entry.key] = entry.value
        return data

    async def reset(self) -> None:
        """Irreversibly delete every entry in the table."""
        removed = await self._run(self._statements.reset)
        logger.info(
            "Store %s reset (%s rows removed)",
            self._statements.table,
            removed,
            extra={"table": self._statements.table},
        )

    async def sweep(self) -> int:
        """Run one garbage collection pass now; see :meth:`GarbageCollector.sweep`."""
        self._check_open()
        return await self._gc.sweep()

    async def close(self) -> None:
        """Stop the garbage collector and release the executor.  Idempotent."""
        if self._closed:
            return
        await self._gc.stop()
        await self._executor.close()
        self._closed = True

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def conn(self) -> QueryExecutor:
        """Return the underlying executor."""
        return self._executor

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def statements(self) -> Statements:
        return self._statements

    @property
    def gc(self) -> GarbageCollector:
        return self._gc

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> KVStore:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _check_open(self) -> None:
        if self._closed:
            raise BackendError("store is closed")

    async def _run(
        self, statement: str, params: Mapping[str, Any] | None = None
    ) -> QueryResult:
        self._check_open()
        return await run_statement(
            self._executor, statement, params, timeout=self._settings.timeout
        )

    async def _fetch(
        self, statement: str, params: Mapping[str, Any] | None = None
    ) -> list[Any]:
        return unwrap_rows(await self._run(statement, params))

    async def _evict(self, key: str, now: float) -> None:
        # Deletes the row only while it is still expired; a newer write is kept.
        try:
            await self._run(self._statements.evict, {"key": key, "expiry": int(now)})
        except TTLStoreError as exc:
            logger.warning(
                "Failed to delete expired key %r: %s", key, exc,
                extra={"table": self._statements.table, "key": key},
            )


def _check_key(key: str) -> None:
    if not isinstance(key, str) or not key:
        raise ValueError("key must be a non-empty string")
