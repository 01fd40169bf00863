# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Test doubles shared across the unit tests."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

from ttlstore.core.config import Settings
from ttlstore.storage.executor import QueryExecutor

START_TIME = 1_700_000_000.0


class FakeClock:
    """Manually advanced Unix clock."""

    def __init__(self, now: float = START_TIME) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_settings(**overrides: object) -> Settings:
    """In-memory SQLite settings with the collector disabled."""
    values: dict[str, object] = {"db_path": ":memory:", "gc_interval": 0}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_executor(dialect: str = "sqlite") -> MagicMock:
    """A QueryExecutor double whose methods are AsyncMocks."""
    executor = MagicMock(spec=QueryExecutor)
    executor.dialect = dialect
    executor.connect = AsyncMock()
    executor.close = AsyncMock()
    executor.execute = AsyncMock(return_value=[])
    executor.ensure_schema = AsyncMock()
    return executor
