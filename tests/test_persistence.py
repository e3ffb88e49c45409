from __future__ import annotations

import datetime as dt
import json
from typing import Any

import pytest

from taskflow.models import Task
from taskflow.observability import get_metrics
from taskflow.storage import InMemoryStorage, StorageError
from taskflow.tasks.persistence import PersistenceBridge, dumps, loads


class _BrokenStorage:
    def get(self, key: str) -> str | None:
        raise StorageError("read boom")

    def set(self, key: str, value: str) -> None:
        raise StorageError("write boom")


def _sample() -> tuple[Task, ...]:
    return (
        Task(
            id="2",
            text="Fix bug",
            priority="high",
            created_at=dt.datetime(2024, 5, 1, 10, 30, 15, 123000, tzinfo=dt.UTC),
        ),
        Task(
            id="1",
            text="Buy milk",
            completed=True,
            priority="low",
            created_at=dt.datetime(2024, 5, 1, 9, 0, tzinfo=dt.UTC),
        ),
    )


def test_round_trip_reproduces_collection() -> None:
    tasks = _sample()
    restored = loads(dumps(tasks))
    assert restored == tasks
    assert all(isinstance(t.created_at, dt.datetime) for t in restored)


def test_serialized_shape() -> None:
    data: Any = json.loads(dumps(_sample()))
    assert isinstance(data, list)
    assert data[0]["createdAt"].startswith("2024-05-01T10:30:15")
    assert data[1] == {
        "id": "1",
        "text": "Buy milk",
        "completed": True,
        "createdAt": "2024-05-01T09:00:00Z",
        "priority": "low",
    }


def test_load_missing_key_is_empty() -> None:
    assert PersistenceBridge(InMemoryStorage()).load() == ()


def test_save_overwrites_under_fixed_key() -> None:
    storage = InMemoryStorage()
    bridge = PersistenceBridge(storage)
    assert bridge.save(_sample()) is True
    assert bridge.save(_sample()[:1]) is True

    raw = storage.get("todoTasks")
    assert raw is not None
    assert len(json.loads(raw)) == 1
    assert bridge.load() == _sample()[:1]


def test_custom_key() -> None:
    storage = InMemoryStorage()
    PersistenceBridge(storage, key="other").save(_sample())
    assert storage.get("todoTasks") is None
    assert storage.get("other") is not None


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        '{"id": 1}',
        '[{"id": "1", "text": "x", "createdAt": "yesterday"}]',
        '[{"id": "1", "text": "x", "createdAt": "2024-01-01", "priority": "urgent"}]',
    ],
)
def test_malformed_state_falls_back_to_empty(raw: str) -> None:
    bridge = PersistenceBridge(InMemoryStorage({"todoTasks": raw}))

    assert bridge.load() == ()
    assert get_metrics().value("persist_errors", {"op": "load"}) == 1


def test_browser_written_state_loads() -> None:
    raw = json.dumps(
        [
            {
                "id": "1714550400000",
                "text": "Ship it",
                "completed": False,
                "createdAt": "2024-05-01T08:00:00.000Z",
                "priority": "medium",
            }
        ]
    )
    (task,) = PersistenceBridge(InMemoryStorage({"todoTasks": raw})).load()
    assert task.id == "1714550400000"
    assert task.created_at == dt.datetime(2024, 5, 1, 8, 0, tzinfo=dt.UTC)


def test_storage_failures_never_raise() -> None:
    bridge = PersistenceBridge(_BrokenStorage())

    assert bridge.load() == ()
    assert bridge.save(_sample()) is False
    assert get_metrics().value("persist_errors", {"op": "save"}) == 1


def test_load_failure_is_logged(capsys: Any) -> None:
    PersistenceBridge(InMemoryStorage({"todoTasks": "[oops"})).load()
    assert "load_failed" in capsys.readouterr().err
