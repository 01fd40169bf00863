# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Entry model -- a single key/value row with its absolute expiry."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ttlstore.core.constants import NO_EXPIRY
from ttlstore.expiry import is_live


class Entry(BaseModel):
    """A decoded storage row."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    value: bytes
    expires_at: int = Field(default=NO_EXPIRY, ge=0)

    def is_live(self, now: float) -> bool:
        return is_live(self.expires_at, now)
