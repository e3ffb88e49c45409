from __future__ import annotations

import uuid
from pathlib import Path

import pytest

from taskflow.config import load_config
from taskflow.storage import (
    CorruptStorageFile,
    InMemoryStorage,
    JsonFileStorage,
    StorageError,
    open_storage,
)
from taskflow.storage.redis_adapter import RedisStorage
from tests.helpers.fake_redis import FakeRedis


def test_in_memory_get_set() -> None:
    s = InMemoryStorage()
    assert s.get("k") is None
    s.set("k", "v1")
    s.set("k", "v2")
    assert s.get("k") == "v2"


def test_file_storage_missing_file_reads_empty(tmp_path: Path) -> None:
    s = JsonFileStorage(tmp_path / "nested" / "store.json")
    assert s.get("todoTasks") is None


def test_file_storage_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    JsonFileStorage(path).set("a", "[1]")
    JsonFileStorage(path).set("b", "x")

    again = JsonFileStorage(path)
    assert again.get("a") == "[1]"
    assert again.get("b") == "x"
    # no temp files left behind
    assert [p.name for p in tmp_path.iterdir()] == ["store.json"]


def test_file_storage_corrupt_file_raises_storage_error(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageError):
        JsonFileStorage(path).get("a")

    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(StorageError):
        JsonFileStorage(path).get("a")


def test_file_storage_set_replaces_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")

    JsonFileStorage(path).set("todoTasks", "[]")

    assert JsonFileStorage(path).get("todoTasks") == "[]"


def test_file_storage_non_utf8_file(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    path.write_bytes(b'{"todoTasks": "\xff\xfe"}')
    storage = JsonFileStorage(path)
    with pytest.raises(CorruptStorageFile):
        storage.get("todoTasks")

    storage.set("todoTasks", "[]")
    assert storage.get("todoTasks") == "[]"


def test_redis_storage_prefixes_keys() -> None:
    client = FakeRedis()
    s = RedisStorage(key_prefix="tf:", client=client)
    s.set("todoTasks", "[]")
    assert client.values == {"tf:todoTasks": "[]"}
    assert s.get("todoTasks") == "[]"
    assert s.get("missing") is None


def test_redis_errors_become_storage_errors() -> None:
    client = FakeRedis()
    client.fail = True
    s = RedisStorage(client=client)
    with pytest.raises(StorageError):
        s.get("k")
    with pytest.raises(StorageError):
        s.set("k", "v")


def test_open_storage_selects_backend(tmp_path: Path) -> None:
    mem = open_storage(load_config({"TASKFLOW_STORAGE": "memory"}))
    assert isinstance(mem, InMemoryStorage)

    data_file = str(tmp_path / "s.json")
    f = open_storage(load_config({"TASKFLOW_STORAGE": "file", "TASKFLOW_DATA_FILE": data_file}))
    assert isinstance(f, JsonFileStorage)
    assert f.path == Path(data_file)

    r = open_storage(load_config({"TASKFLOW_STORAGE": "redis"}))
    assert isinstance(r, RedisStorage)


def test_real_redis_round_trip(redis_url: str) -> None:
    prefix = f"testtaskflow:{uuid.uuid4()}"
    s = RedisStorage(redis_url, key_prefix=prefix)
    s.set("todoTasks", "[]")
    assert RedisStorage(redis_url, key_prefix=prefix).get("todoTasks") == "[]"
    s.get_client().delete(f"{prefix}:todoTasks")
