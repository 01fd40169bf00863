# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Custom exception hierarchy for ttlstore."""


class TTLStoreError(Exception):
    """Base exception for all ttlstore errors."""


class ConfigurationError(TTLStoreError):
    """Invalid or missing configuration."""


class KeyNotFoundError(TTLStoreError, KeyError):
    """No row exists for the requested key."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"key not found: {self.key}"


class KeyExpiredError(KeyNotFoundError):
    """A row exists for the key but its expiry has passed."""

    def __str__(self) -> str:
        return f"key expired: {self.key}"


class DecodeError(TTLStoreError):
    """The backend returned a result with an unexpected shape."""


class BackendError(TTLStoreError):
    """A backend statement failed (network, auth, query syntax, ...)."""


class BackendConnectionError(BackendError):
    """Failed to connect to or authenticate with the backend."""


class StoreTimeoutError(TTLStoreError, TimeoutError):
    """A backend call did not complete within the configured timeout."""
