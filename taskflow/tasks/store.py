from __future__ import annotations

import datetime as _dt
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from taskflow.models import Task, require_priority
from taskflow.observability import get_json_logger, get_metrics

from .commands import (
    AddTask,
    ClearCompleted,
    Command,
    RemoveTask,
    SetPriority,
    ToggleTask,
    apply_command,
)
from .persistence import PersistenceBridge
from .validation import check_text
from .view import TaskStats, ViewCriteria, compute_view, summarize

Saver = Callable[[tuple[Task, ...]], object]


@dataclass(frozen=True, slots=True)
class AddResult:
    task: Task | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _utcnow() -> _dt.datetime:
    return _dt.datetime.now(_dt.UTC)


def _new_id() -> str:
    return str(uuid.uuid4())


class TaskStore:
    """Sole owner of the task collection.

    Every mutation goes through ``dispatch``: the reducer produces the next
    collection and, when it differs, the store commits it and then calls the
    save hook. Views are derived on demand and never touch stored order.
    """

    def __init__(
        self,
        tasks: Iterable[Task] = (),
        *,
        save: Saver | None = None,
        clock: Callable[[], _dt.datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._tasks: tuple[Task, ...] = tuple(tasks)
        self._save = save
        self._clock = clock
        self._id_factory = id_factory
        self._logger = get_json_logger("taskflow.store")

    @classmethod
    def from_persistence(
        cls,
        bridge: PersistenceBridge,
        *,
        clock: Callable[[], _dt.datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_id,
    ) -> TaskStore:
        """Load the saved collection once and save back through the same bridge."""
        return cls(bridge.load(), save=bridge.save, clock=clock, id_factory=id_factory)

    # ----------------------------
    # Queries
    # ----------------------------
    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task | None:
        return next((t for t in self._tasks if t.id == task_id), None)

    def view(self, criteria: ViewCriteria | None = None) -> list[Task]:
        return compute_view(self._tasks, criteria)

    def stats(self) -> TaskStats:
        return summarize(self._tasks)

    # ----------------------------
    # Mutations
    # ----------------------------
    def add(self, text: str) -> AddResult:
        rejection = check_text(text, self._tasks)
        if rejection is not None:
            self._logger.info(
                "task rejected",
                extra={
                    "event": "task_rejected",
                    "op": "add",
                    "metadata": {"reason": rejection.reason},
                },
            )
            get_metrics().increment("validation_errors", {"reason": rejection.reason})
            return AddResult(error=rejection.message)
        task = Task(id=self._unique_id(), text=text.strip(), created_at=self._clock())
        self.dispatch(AddTask(task))
        return AddResult(task=task)

    def toggle(self, task_id: str) -> bool:
        return self.dispatch(ToggleTask(task_id))

    def set_priority(self, task_id: str, priority: str) -> bool:
        return self.dispatch(SetPriority(task_id, require_priority(priority)))

    def remove(self, task_id: str) -> bool:
        return self.dispatch(RemoveTask(task_id))

    def clear_completed(self) -> int:
        before = len(self._tasks)
        self.dispatch(ClearCompleted())
        return before - len(self._tasks)

    def dispatch(self, command: Command) -> bool:
        """Apply one command; commit and save when the collection changed."""
        op = type(command).__name__
        updated = apply_command(self._tasks, command)
        if updated is self._tasks:
            self._logger.debug("no-op command", extra={"event": "task_noop", "op": op})
            return False
        self._tasks = updated
        if isinstance(command, AddTask):
            task_id: str | None = command.task.id
        else:
            task_id = getattr(command, "task_id", None)
        self._logger.info(
            "task mutated",
            extra={"event": "task_mutated", "op": op, "task_id": task_id},
        )
        get_metrics().increment("task_mutations", {"op": op})
        if self._save is not None:
            self._save(self._tasks)
        return True

    def _unique_id(self) -> str:
        taken = {t.id for t in self._tasks}
        while True:
            candidate = self._id_factory()
            if candidate not in taken:
                return candidate


__all__ = ["AddResult", "TaskStore"]
