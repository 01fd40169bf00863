# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""ttlstore -- expiring key-value storage on pluggable database backends."""

__version__ = "0.1.0"

from ttlstore.core.config import Settings
from ttlstore.core.exceptions import (
    BackendConnectionError,
    BackendError,
    ConfigurationError,
    DecodeError,
    KeyExpiredError,
    KeyNotFoundError,
    StoreTimeoutError,
    TTLStoreError,
)
from ttlstore.expiry import ALREADY_EXPIRED, NEVER_EXPIRES, Lifetime
from ttlstore.models import Entry
from ttlstore.storage import QueryExecutor
from ttlstore.store import KVStore

__all__ = [
    "ALREADY_EXPIRED",
    "NEVER_EXPIRES",
    "BackendConnectionError",
    "BackendError",
    "ConfigurationError",
    "DecodeError",
    "Entry",
    "KVStore",
    "KeyExpiredError",
    "KeyNotFoundError",
    "Lifetime",
    "QueryExecutor",
    "Settings",
    "StoreTimeoutError",
    "TTLStoreError",
    "__version__",
]
