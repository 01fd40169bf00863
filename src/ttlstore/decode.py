# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Defensive decoding of raw backend results.

Backends hand back loosely-typed structures: a flat list of row dicts
(SQL drivers) or a list of query envelopes such as
``[{"status": "OK", "time": "...", "result": [...]}]`` (document stores
speaking JSON-RPC).  Nothing here trusts that shape.  Each helper
validates field presence and type and raises :class:`DecodeError` with
a description of what was wrong.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

from ttlstore.core.exceptions import BackendError, DecodeError
from ttlstore.models.entry import Entry

_ENVELOPE_KEYS = {"status", "result"}


def _integral(v: object) -> int:
    # JSON transports deliver numbers as floats; bools are ints in Python
    if isinstance(v, bool):
        raise ValueError("expected an integer, got bool")
    if isinstance(v, int):
        return v
    if isinstance(v, float) and v.is_integer():
        return int(v)
    raise ValueError(f"expected an integer, got {type(v).__name__}")


class RawExpiry(BaseModel):
    """Expiry column of a raw row."""

    model_config = ConfigDict(extra="ignore")

    e: int = Field(ge=0)

    @field_validator("e", mode="before")
    @classmethod
    def _check_e(cls, v: object) -> int:
        return _integral(v)


class RawRow(RawExpiry):
    """A raw ``k``/``v``/``e`` row as returned by a backend."""

    k: StrictStr = Field(min_length=1)
    v: StrictStr


class RawCount(BaseModel):
    model_config = ConfigDict(extra="ignore")

    count: int = Field(ge=0)

    @field_validator("count", mode="before")
    @classmethod
    def _check_count(cls, v: object) -> int:
        return _integral(v)


# ---------------------------------------------------------------------------
# Value codec
# ---------------------------------------------------------------------------


def encode_value(value: bytes) -> str:
    """Encode an opaque byte value for the ``v`` text column."""
    return base64.b64encode(value).decode("ascii")


def decode_value(raw: str) -> bytes:
    try:
        return base64.b64decode(raw.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise DecodeError(f"value is not valid base64: {exc}") from exc


# ---------------------------------------------------------------------------
# Result shapes
# ---------------------------------------------------------------------------


def _is_envelope(item: object) -> bool:
    return isinstance(item, Mapping) and _ENVELOPE_KEYS.issubset(item.keys())


def unwrap_rows(result: Any) -> list[Any]:
    """Return the row list contained in a raw *result*.

    Accepts ``None`` (no rows), a plain row list, a single envelope or a
    list of envelopes (the first one is used).  Rows themselves are not
    validated here.

    Raises:
        BackendError: If the envelope reports a failed statement.
        DecodeError: If the result matches none of the accepted shapes.
    """
    if result is None:
        return []
    if _is_envelope(result):
        return _unwrap_envelope(result)
    if isinstance(result, (str, bytes)) or not isinstance(result, Sequence):
        raise DecodeError(f"unexpected result type: {type(result).__name__}")
    if result and _is_envelope(result[0]):
        return _unwrap_envelope(result[0])
    return list(result)


def _unwrap_envelope(envelope: Mapping[str, Any]) -> list[Any]:
    status = envelope.get("status")
    if isinstance(status, str) and status.upper() == "ERR":
        raise BackendError(f"statement failed: {envelope.get('result')}")
    inner = envelope.get("result")
    if inner is None:
        return []
    if isinstance(inner, (str, bytes)) or not isinstance(inner, Sequence):
        raise DecodeError(f"envelope result is not a list: {type(inner).__name__}")
    return list(inner)


def decode_entry(row: Any) -> Entry:
    """Validate a single raw row and return the typed :class:`Entry`."""
    if not isinstance(row, Mapping):
        raise DecodeError(f"row is not a mapping: {type(row).__name__}")
    try:
        raw = RawRow.model_validate(dict(row))
    except ValidationError as exc:
        raise DecodeError(f"malformed row: {_describe(exc)}") from exc
    return Entry(key=raw.k, value=decode_value(raw.v), expires_at=raw.e)


def decode_expiry(row: Any) -> int:
    """Return the ``e`` column of a raw row."""
    if not isinstance(row, Mapping):
        raise DecodeError(f"row is not a mapping: {type(row).__name__}")
    try:
        return RawExpiry.model_validate(dict(row)).e
    except ValidationError as exc:
        raise DecodeError(f"malformed expiry: {_describe(exc)}") from exc


def decode_count(result: Any) -> int:
    """Return the row count from a ``count`` query result."""
    rows = unwrap_rows(result)
    if not rows:
        return 0
    row = rows[0]
    if not isinstance(row, Mapping):
        raise DecodeError(f"count row is not a mapping: {type(row).__name__}")
    try:
        return RawCount.model_validate(dict(row)).count
    except ValidationError as exc:
        raise DecodeError(f"malformed count: {_describe(exc)}") from exc


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "row"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)
