from __future__ import annotations

import os
from typing import Any

import redis

from .interface import KeyValueStorage, StorageError


class RedisStorage(KeyValueStorage):
    """Redis-backed key-value storage.

    Data structures:
    - One string per key at ``{prefix}:{key}`` holding the serialized value
    """

    def __init__(
        self,
        redis_url: str | None = None,
        *,
        key_prefix: str = "taskflow",
        client: Any | None = None,
    ) -> None:
        url = redis_url or os.getenv("REDIS_URL", "redis://localhost:6379/0")
        if client is not None:
            self._redis = client
        else:
            # decode_responses=True returns str everywhere for easier JSON handling
            self._redis = redis.Redis.from_url(url, decode_responses=True)
        self._prefix = key_prefix.rstrip(":")

    def get_client(self) -> Any:
        return self._redis

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    def get(self, key: str) -> str | None:
        try:
            raw = self._redis.get(self._key(key))
        except redis.exceptions.RedisError as exc:
            raise StorageError(f"redis get failed: {exc}") from exc
        if raw is None:
            return None
        if isinstance(raw, bytes):
            return raw.decode("utf-8")
        return str(raw)

    def set(self, key: str, value: str) -> None:
        try:
            self._redis.set(self._key(key), value)
        except redis.exceptions.RedisError as exc:
            raise StorageError(f"redis set failed: {exc}") from exc


__all__ = ["RedisStorage"]
