from __future__ import annotations

from taskflow.config import AppConfig

from .file import CorruptStorageFile, JsonFileStorage
from .interface import KeyValueStorage, StorageError
from .memory import InMemoryStorage


def open_storage(config: AppConfig) -> KeyValueStorage:
    """Build the storage adapter selected by ``config.storage_backend``."""
    if config.storage_backend == "memory":
        return InMemoryStorage()
    if config.storage_backend == "redis":
        # Deferred so file/memory users never touch the redis client
        from .redis_adapter import RedisStorage

        return RedisStorage(config.redis_url, key_prefix=config.key_prefix)
    return JsonFileStorage(config.data_file)


__all__ = [
    "CorruptStorageFile",
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorage",
    "StorageError",
    "open_storage",
]
