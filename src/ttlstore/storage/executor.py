# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Abstract query executor interface for pluggable storage engines.

Both the SQLite (aiosqlite) and PostgreSQL (asyncpg) executors implement
this interface so that :class:`~ttlstore.store.KVStore` can remain
backend-agnostic.  Statements use ``:name`` placeholders and parameters
are passed as a mapping.
"""

from __future__ import annotations

import abc
import asyncio
from collections.abc import Mapping
from typing import Any

from ttlstore.core.exceptions import StoreTimeoutError

# What ``execute`` returns: rows for statements that produce them,
# otherwise the affected row count (``-1`` when the driver cannot tell).
QueryResult = list[dict[str, Any]] | int


class QueryExecutor(abc.ABC):
    """Abstract base class for async query executors.

    Concrete implementations wrap a connection (SQLite) or connection pool
    (PostgreSQL).  Driver exceptions must be re-raised as
    :class:`~ttlstore.core.exceptions.BackendError` (or
    :class:`~ttlstore.core.exceptions.BackendConnectionError` from
    :meth:`connect`).
    """

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    @abc.abstractmethod
    async def connect(self) -> None:
        """Establish (and authenticate) the backend connection."""

    @abc.abstractmethod
    async def close(self) -> None:
        """Release the underlying connection or pool.  Safe to call twice."""

    # ------------------------------------------------------------------
    # Statement execution
    # ------------------------------------------------------------------

    @abc.abstractmethod
    async def execute(
        self, statement: str, params: Mapping[str, Any] | None = None
    ) -> QueryResult:
        """Execute a single backend-native statement.

        Args:
            statement: Statement text with ``:name`` placeholders.
            params: Mapping of placeholder names to values.

        Returns:
            A list of row dicts for statements returning rows, otherwise
            the number of affected rows.
        """

    @abc.abstractmethod
    async def ensure_schema(self, statements: list[str]) -> None:
        """Run the idempotent DDL needed for the storage table."""

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    @property
    @abc.abstractmethod
    def dialect(self) -> str:
        """Return ``'sqlite'`` or ``'postgres'``."""


async def run_statement(
    executor: QueryExecutor,
    statement: str,
    params: Mapping[str, Any] | None = None,
    *,
    timeout: float,
) -> QueryResult:
    """Execute *statement* on *executor*, failing after *timeout* seconds.

    Raises:
        StoreTimeoutError: If the backend call does not finish in time.
    """
    try:
        async with asyncio.timeout(timeout):
            return await executor.execute(statement, params)
    except TimeoutError as exc:
        if isinstance(exc, StoreTimeoutError):
            raise
        raise StoreTimeoutError(
            f"{executor.dialect} statement timed out after {timeout}s"
        ) from exc
