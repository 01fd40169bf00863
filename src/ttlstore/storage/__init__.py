# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Storage layer -- query executors and statement rendering."""

from ttlstore.storage.executor import QueryExecutor, QueryResult
from ttlstore.storage.factory import create_executor
from ttlstore.storage.query_adapter import adapt_named_to_positional
from ttlstore.storage.statements import Statements

__all__ = [
    "QueryExecutor",
    "QueryResult",
    "Statements",
    "adapt_named_to_positional",
    "create_executor",
]
