# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Expiry policy: converting TTLs to absolute timestamps and back.

Every read path in :class:`~ttlstore.store.KVStore` goes through these
functions so that single-key reads, bulk reads and TTL introspection
agree on whether an entry is live.  Timestamps are Unix seconds; an
expiry of ``0`` means the entry never expires.
"""

from __future__ import annotations

import math
from datetime import timedelta
from enum import StrEnum

from ttlstore.core.constants import MAX_EXPIRY, NO_EXPIRY

TTL = int | float | timedelta | None


class Lifetime(StrEnum):
    """Non-numeric outcomes of :func:`remaining`."""

    NEVER_EXPIRES = "never_expires"
    ALREADY_EXPIRED = "already_expired"


NEVER_EXPIRES = Lifetime.NEVER_EXPIRES
ALREADY_EXPIRED = Lifetime.ALREADY_EXPIRED


def ttl_seconds(ttl: TTL) -> float:
    """Normalise *ttl* to seconds; ``None`` becomes ``0``."""
    if ttl is None:
        return 0.0
    if isinstance(ttl, timedelta):
        return ttl.total_seconds()
    if isinstance(ttl, bool) or not isinstance(ttl, (int, float)):
        raise TypeError(f"ttl must be seconds or a timedelta, got {type(ttl).__name__}")
    return float(ttl)


def to_absolute(ttl: TTL, now: float) -> int:
    """Return the absolute expiry for *ttl* seconds from *now*.

    A non-positive or missing TTL yields ``0`` (never expires).

    Raises:
        ValueError: *ttl* is not finite, or the expiry does not fit in a
            64-bit column.
    """
    seconds = ttl_seconds(ttl)
    if not math.isfinite(seconds):
        raise ValueError(f"ttl must be finite, got {seconds}")
    if seconds <= 0:
        return NO_EXPIRY
    expires_at = int(now + seconds)
    if expires_at > MAX_EXPIRY:
        raise ValueError(f"ttl of {seconds:g}s exceeds the largest storable expiry")
    return expires_at


def is_live(expires_at: int, now: float) -> bool:
    return expires_at == NO_EXPIRY or expires_at > now


def remaining(expires_at: int, now: float) -> float | Lifetime:
    """Return the seconds left before *expires_at*, or a :class:`Lifetime` marker."""
    if expires_at == NO_EXPIRY:
        return Lifetime.NEVER_EXPIRES
    if expires_at <= now:
        return Lifetime.ALREADY_EXPIRED
    return expires_at - now
