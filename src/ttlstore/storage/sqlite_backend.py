# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""SQLite implementation of the abstract :class:`QueryExecutor`.

Wraps an :mod:`aiosqlite` connection.  SQLite binds ``:name`` parameters
natively, so statements are passed through unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import aiosqlite

from ttlstore.core.constants import SQLITE_SYNCHRONOUS, Consistency
from ttlstore.core.exceptions import BackendConnectionError, BackendError
from ttlstore.storage.executor import QueryExecutor, QueryResult

logger = logging.getLogger("ttlstore.storage.sqlite")


class SQLiteExecutor(QueryExecutor):
    """Async SQLite executor backed by an :class:`aiosqlite.Connection`.

    Args:
        db_path: Database file path, or ``":memory:"``.
        consistency: Mapped onto ``PRAGMA synchronous``.
    """

    def __init__(
        self,
        db_path: Path | str = "ttlstore.db",
        *,
        consistency: Consistency = Consistency.QUORUM,
        connection: aiosqlite.Connection | None = None,
    ) -> None:
        self._db_path = str(db_path)
        self._consistency = consistency
        self._conn = connection

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        if self._conn is not None:
            return
        try:
            conn = await aiosqlite.connect(self._db_path)
        except (aiosqlite.Error, OSError) as exc:
            msg = f"Failed to open SQLite database at {self._db_path}: {exc}"
            raise BackendConnectionError(msg) from exc

        conn.row_factory = aiosqlite.Row
        try:
            # WAL for concurrent readers alongside the GC's deletes
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute(f"PRAGMA synchronous={SQLITE_SYNCHRONOUS[self._consistency]}")
        except aiosqlite.Error as exc:
            await conn.close()
            msg = f"Failed to configure SQLite database at {self._db_path}: {exc}"
            raise BackendConnectionError(msg) from exc

        self._conn = conn
        logger.debug("Opened SQLite database %s", self._db_path, extra={"backend": "sqlite"})

    async def close(self) -> None:
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        await conn.close()

    # ------------------------------------------------------------------
    # Statement execution
    # ------------------------------------------------------------------

    async def execute(
        self, statement: str, params: Mapping[str, Any] | None = None
    ) -> QueryResult:
        conn = self._require_conn()
        try:
            cursor = await conn.execute(statement, dict(params or {}))
            try:
                if cursor.description is not None:
                    rows = await cursor.fetchall()
                    return [dict(r) for r in rows]
                await conn.commit()
                return cursor.rowcount
            finally:
                await cursor.close()
        except (aiosqlite.Error, OverflowError) as exc:
            raise BackendError(f"SQLite statement failed: {exc}") from exc

    async def ensure_schema(self, statements: list[str]) -> None:
        conn = self._require_conn()
        try:
            for statement in statements:
                await conn.execute(statement)
            await conn.commit()
        except aiosqlite.Error as exc:
            raise BackendError(f"SQLite schema setup failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    @property
    def dialect(self) -> str:
        return "sqlite"

    @property
    def raw_connection(self) -> aiosqlite.Connection | None:
        """Return the underlying :class:`aiosqlite.Connection`."""
        return self._conn

    def _require_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise BackendError("SQLite executor is not connected. Call connect() first.")
        return self._conn
