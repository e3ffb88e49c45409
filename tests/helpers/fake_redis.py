from __future__ import annotations

import redis


class FakeRedis:
    """Just enough of ``redis.Redis`` for RedisStorage: string get/set."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.fail = False

    def _check(self) -> None:
        if self.fail:
            raise redis.exceptions.ConnectionError("connection refused")

    def get(self, key: str) -> str | None:
        self._check()
        return self.values.get(key)

    def set(self, key: str, value: str) -> bool:
        self._check()
        self.values[key] = value
        return True


__all__ = ["FakeRedis"]
