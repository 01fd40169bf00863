# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Data models for ttlstore."""

from ttlstore.models.entry import Entry

__all__ = ["Entry"]
