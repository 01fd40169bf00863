# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Shared test fixtures and configuration."""

from __future__ import annotations

import pytest

from tests.helpers import FakeClock, make_settings
from ttlstore.core.config import Settings
from ttlstore.store import KVStore


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
async def store(settings: Settings, clock: FakeClock):
    """A KVStore backed by a fresh in-memory SQLite database."""
    kv = await KVStore.open(settings, clock=clock)
    yield kv
    await kv.close()
