# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Store configuration via environment variables and .env files."""

import re
from pathlib import Path
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from ttlstore.core.constants import (
    DEFAULT_GC_INTERVAL,
    DEFAULT_NAMESPACE,
    DEFAULT_TABLE,
    DEFAULT_TIMEOUT,
    BackendKind,
    Consistency,
)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TTLSTORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        frozen=True,
    )

    # Backend
    backend: BackendKind = BackendKind.SQLITE
    hosts: Annotated[list[str], NoDecode] = ["localhost:5432"]
    db_path: Path = Path("ttlstore.db")
    postgres_url: str = ""  # overrides hosts/username/password/database when set
    pool_min: int = 1
    pool_max: int = 10

    @field_validator("hosts", mode="before")
    @classmethod
    def _parse_hosts(cls, v: object) -> list[str]:
        if isinstance(v, str):
            return [h.strip() for h in v.split(",") if h.strip()]
        return v if isinstance(v, list) else []

    # Namespace / table
    namespace: str = DEFAULT_NAMESPACE
    database: str = "fiber"
    table: str = DEFAULT_TABLE

    @field_validator("namespace", "table")
    @classmethod
    def _check_identifier(cls, v: str) -> str:
        if not _IDENTIFIER.match(v):
            raise ValueError(f"invalid SQL identifier: {v!r}")
        return v

    # Credentials
    username: str = "postgres"
    password: str = ""

    # Behaviour
    consistency: Consistency = Consistency.QUORUM
    reset: bool = False
    default_expiration: float = 0.0  # seconds applied when set() gets no ttl
    gc_interval: float = DEFAULT_GC_INTERVAL  # seconds, 0 disables the collector
    timeout: float = DEFAULT_TIMEOUT  # seconds per backend call

    @field_validator("default_expiration", "gc_interval")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @field_validator("timeout")
    @classmethod
    def _positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    def postgres_dsn(self) -> str:
        """Return the PostgreSQL DSN, built from hosts and credentials if needed."""
        if self.postgres_url:
            return self.postgres_url
        auth = self.username
        if self.password:
            auth = f"{auth}:{self.password}"
        return f"postgresql://{auth}@{','.join(self.hosts)}/{self.database}"


def get_settings(**overrides: object) -> Settings:
    return Settings(**overrides)
