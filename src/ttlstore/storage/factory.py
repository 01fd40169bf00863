# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Executor construction from :class:`~ttlstore.core.config.Settings`.

Supports both SQLite (aiosqlite, default) and PostgreSQL (asyncpg).
The backend is selected by ``TTLSTORE_BACKEND``.
"""

from __future__ import annotations

from ttlstore.core.config import Settings
from ttlstore.core.constants import BackendKind
from ttlstore.core.exceptions import ConfigurationError
from ttlstore.storage.executor import QueryExecutor


def create_executor(settings: Settings) -> QueryExecutor:
    """Return an unconnected :class:`QueryExecutor` for *settings*.

    Raises:
        ConfigurationError: If the PostgreSQL backend has no hosts or URL.
    """
    if settings.backend is BackendKind.SQLITE:
        from ttlstore.storage.sqlite_backend import SQLiteExecutor

        return SQLiteExecutor(settings.db_path, consistency=settings.consistency)

    if settings.backend is BackendKind.POSTGRES:
        if not settings.postgres_url and not settings.hosts:
            msg = (
                "PostgreSQL backend selected but no hosts configured. "
                "Set TTLSTORE_HOSTS or TTLSTORE_POSTGRES_URL."
            )
            raise ConfigurationError(msg)

        from ttlstore.storage.postgres import PostgresExecutor

        return PostgresExecutor(
            settings.postgres_dsn(),
            min_size=settings.pool_min,
            max_size=settings.pool_max,
            consistency=settings.consistency,
        )

    msg = f"Unknown storage backend: {settings.backend!r}. Expected 'sqlite' or 'postgres'."
    raise ConfigurationError(msg)
