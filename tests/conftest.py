from __future__ import annotations

import datetime as dt
import itertools
import os
import time
from collections.abc import Callable, Generator

import pytest

from taskflow.observability import reset_metrics

T0 = dt.datetime(2024, 5, 1, 9, 0, tzinfo=dt.UTC)


def _wait_until(timeout_s: float, pause_s: float, check: Callable[[], bool]) -> bool:
    deadline = time.time() + timeout_s
    while time.time() < deadline:
        if check():
            return True
        time.sleep(pause_s)
    return False


def _redis_ping(url: str) -> bool:
    try:
        import redis

        r = redis.Redis.from_url(url)
        return bool(r.ping())
    except Exception:
        return False


def _local_redis_available() -> bool:
    url = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    return _redis_ping(url)


@pytest.fixture(autouse=True)
def _fresh_metrics() -> Generator[None, None, None]:
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture()
def clock() -> Callable[[], dt.datetime]:
    """Deterministic clock: each call is one minute after the previous one."""
    ticks = itertools.count()
    return lambda: T0 + dt.timedelta(minutes=next(ticks))


@pytest.fixture()
def id_factory() -> Callable[[], str]:
    counter = itertools.count(1)
    return lambda: f"task-{next(counter)}"


@pytest.fixture(scope="session")
def redis_url() -> str:
    """Provide a reachable Redis URL (REDIS_URL first, then localhost) or skip."""
    env_url = os.getenv("REDIS_URL")
    if env_url and _wait_until(3.0, 0.2, lambda: _redis_ping(env_url)):
        return env_url

    local_url = "redis://localhost:6379/0"
    if _wait_until(1.0, 0.2, lambda: _redis_ping(local_url)):
        return local_url

    pytest.skip("Redis not available; set REDIS_URL or start local Redis")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip tests that need a live Redis when none is reachable."""
    if os.getenv("REDIS_URL") or _local_redis_available():
        return
    for item in items:
        closure = set(getattr(getattr(item, "_fixtureinfo", None), "names_closure", []) or [])
        if "redis_url" in closure:
            item.add_marker(
                pytest.mark.skip(reason="Redis not available; set REDIS_URL or start local Redis")
            )
