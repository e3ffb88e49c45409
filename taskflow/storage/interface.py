from __future__ import annotations

from typing import Protocol


class StorageError(RuntimeError):
    """Raised by storage adapters when the underlying transport fails."""


class KeyValueStorage(Protocol):
    """Minimal string key-value storage.

    Mirrors browser local storage: whole values are read and overwritten,
    never patched.
    """

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""

    def set(self, key: str, value: str) -> None:
        """Overwrite the value stored under key."""


__all__ = ["KeyValueStorage", "StorageError"]
