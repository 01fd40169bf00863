# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Enumerations and default values shared across the package."""

from enum import StrEnum


class BackendKind(StrEnum):
    SQLITE = "sqlite"
    POSTGRES = "postgres"


class Consistency(StrEnum):
    """Durability level requested from the backend for writes."""

    ONE = "one"
    QUORUM = "quorum"
    ALL = "all"


# Consistency -> SQLite ``PRAGMA synchronous`` value
SQLITE_SYNCHRONOUS: dict[Consistency, str] = {
    Consistency.ONE: "NORMAL",
    Consistency.QUORUM: "FULL",
    Consistency.ALL: "EXTRA",
}

# Consistency -> PostgreSQL ``synchronous_commit`` value
POSTGRES_SYNCHRONOUS_COMMIT: dict[Consistency, str] = {
    Consistency.ONE: "local",
    Consistency.QUORUM: "on",
    Consistency.ALL: "remote_apply",
}

# Logical column names of the storage table
KEY_COLUMN = "k"
VALUE_COLUMN = "v"
EXPIRY_COLUMN = "e"

# Sentinel expiry meaning "never expires"
NO_EXPIRY = 0

# Largest expiry a BIGINT (and SQLite INTEGER) column can hold
MAX_EXPIRY = 2**63 - 1

DEFAULT_TABLE = "fiber_storage"
DEFAULT_NAMESPACE = "fiber"
DEFAULT_GC_INTERVAL = 10.0
DEFAULT_TIMEOUT = 5.0
