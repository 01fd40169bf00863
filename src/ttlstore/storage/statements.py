# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Prepared statement text for a storage table.

Statements are rendered once per store from the table name, namespace
and dialect.  Identifiers are validated by
:class:`~ttlstore.core.config.Settings` and quoted here; values always
travel as ``:name`` parameters.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ttlstore.core.constants import BackendKind

_EXPIRY_TYPE = {
    BackendKind.SQLITE: "INTEGER",
    BackendKind.POSTGRES: "BIGINT",
}


@dataclass(frozen=True)
class Statements:
    """All statements :class:`~ttlstore.store.KVStore` issues against one table."""

    table: str
    select: str
    select_expiry: str
    upsert: str
    delete: str
    evict: str
    update_expiry: str
    scan: str
    count: str
    gc: str
    reset: str
    schema: list[str] = field(default_factory=list)

    @classmethod
    def for_table(
        cls,
        table: str,
        dialect: str = BackendKind.SQLITE,
        namespace: str | None = None,
    ) -> Statements:
        kind = BackendKind(dialect)
        # SQLite has no schemas; the namespace only qualifies PostgreSQL tables
        if kind is BackendKind.POSTGRES and namespace:
            qualified = f'"{namespace}"."{table}"'
        else:
            qualified = f'"{table}"'

        schema: list[str] = []
        if kind is BackendKind.POSTGRES and namespace:
            schema.append(f'CREATE SCHEMA IF NOT EXISTS "{namespace}"')
        schema.append(
            f"CREATE TABLE IF NOT EXISTS {qualified} ("
            "k TEXT PRIMARY KEY, "
            "v TEXT NOT NULL, "
            f"e {_EXPIRY_TYPE[kind]} NOT NULL DEFAULT 0)"
        )
        schema.append(f'CREATE INDEX IF NOT EXISTS "{table}_e_idx" ON {qualified} (e)')

        return cls(
            table=qualified,
            select=f"SELECT k, v, e FROM {qualified} WHERE k = :key",
            select_expiry=f"SELECT e FROM {qualified} WHERE k = :key",
            upsert=(
                f"INSERT INTO {qualified} (k, v, e) VALUES (:key, :value, :expiry) "
                "ON CONFLICT (k) DO UPDATE SET v = excluded.v, e = excluded.e"
            ),
            delete=f"DELETE FROM {qualified} WHERE k = :key",
            evict=f"DELETE FROM {qualified} WHERE k = :key AND e != 0 AND e <= :expiry",
            update_expiry=f"UPDATE {qualified} SET e = :expiry WHERE k = :key",
            scan=f"SELECT k, v, e FROM {qualified}",
            count=f"SELECT COUNT(*) AS count FROM {qualified}",
            gc=f"DELETE FROM {qualified} WHERE e != 0 AND e <= :expiry",
            reset=f"DELETE FROM {qualified}",
            schema=schema,
        )
