# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Query parameter adapter for cross-database compatibility.

Statements are written once with ``:name`` placeholders.  SQLite binds
those natively from a dict while PostgreSQL (asyncpg) only understands
``$1, $2, ...`` positional parameters.  :func:`adapt_named_to_positional`
rewrites a statement into the target dialect.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from ttlstore.core.exceptions import BackendError

# ``:name`` not preceded by another colon, so ``::int`` casts are left alone
_NAMED_PARAM = re.compile(r"(?<!:):([A-Za-z_]\w*)")


def adapt_named_to_positional(
    query: str, params: Mapping[str, object], dialect: str
) -> tuple[str, tuple[object, ...]]:
    """Convert a ``:name`` style query + mapping params to positional ``?``/``$N``.

    A name used more than once is bound once per occurrence.

    Returns:
        A tuple of (rewritten_query, positional_params_tuple).

    Raises:
        ValueError: If *dialect* is not recognised.
        BackendError: If the query references a parameter missing from *params*.
    """
    if dialect not in ("sqlite", "postgres"):
        msg = f"Unknown SQL dialect: {dialect!r}. Expected 'sqlite' or 'postgres'."
        raise ValueError(msg)

    positional: list[object] = []

    def _replacer(match: re.Match[str]) -> str:
        name = match.group(1)
        try:
            positional.append(params[name])
        except KeyError:
            raise BackendError(f"missing value for parameter :{name}") from None
        if dialect == "postgres":
            return f"${len(positional)}"
        return "?"

    rewritten = _NAMED_PARAM.sub(_replacer, query)
    return rewritten, tuple(positional)
