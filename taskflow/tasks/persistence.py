from __future__ import annotations

from collections.abc import Iterable

from pydantic import ValidationError

from taskflow.config import DEFAULT_STORAGE_KEY
from taskflow.models import Task, TaskList
from taskflow.observability import get_json_logger, get_metrics
from taskflow.storage import KeyValueStorage, StorageError


def dumps(tasks: Iterable[Task]) -> str:
    """Serialize tasks as a JSON array of ``{id, text, completed, createdAt, priority}``."""
    return TaskList.dump_json(list(tasks), by_alias=True).decode("utf-8")


def loads(raw: str) -> tuple[Task, ...]:
    """Parse a serialized collection; raises pydantic ``ValidationError`` when malformed."""
    return tuple(TaskList.validate_json(raw))


class PersistenceBridge:
    """Loads the task collection once and writes it back whole after each commit.

    Neither direction raises: read problems fall back to an empty collection,
    write problems are logged and reported through the return value.
    """

    def __init__(self, storage: KeyValueStorage, *, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key
        self._logger = get_json_logger("taskflow.persistence")

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> tuple[Task, ...]:
        try:
            raw = self._storage.get(self._key)
        except StorageError as exc:
            self._load_failed("storage read failed", exc)
            return ()
        if raw is None:
            return ()
        try:
            return loads(raw)
        except ValidationError as exc:
            self._load_failed("stored tasks could not be parsed", exc)
            return ()

    def save(self, tasks: Iterable[Task]) -> bool:
        payload = dumps(tasks)
        try:
            self._storage.set(self._key, payload)
        except StorageError as exc:
            self._logger.error(
                "saving tasks failed",
                extra={
                    "event": "save_failed",
                    "key": self._key,
                    "metadata": {"error": str(exc)[:200]},
                },
            )
            get_metrics().increment("persist_errors", {"op": "save"})
            return False
        return True

    def _load_failed(self, msg: str, exc: Exception) -> None:
        self._logger.warning(
            msg,
            extra={
                "event": "load_failed",
                "key": self._key,
                "metadata": {"error": str(exc)[:200]},
            },
        )
        get_metrics().increment("persist_errors", {"op": "load"})


__all__ = ["PersistenceBridge", "dumps", "loads"]
