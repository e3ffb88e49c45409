from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from taskflow.models import Priority, Task


@dataclass(frozen=True, slots=True)
class AddTask:
    task: Task


@dataclass(frozen=True, slots=True)
class ToggleTask:
    task_id: str


@dataclass(frozen=True, slots=True)
class SetPriority:
    task_id: str
    priority: Priority


@dataclass(frozen=True, slots=True)
class RemoveTask:
    task_id: str


@dataclass(frozen=True, slots=True)
class ClearCompleted:
    pass


Command = AddTask | ToggleTask | SetPriority | RemoveTask | ClearCompleted


def apply_command(tasks: tuple[Task, ...], command: Command) -> tuple[Task, ...]:
    """Return the collection that results from applying ``command``.

    Pure: ``tasks`` is never mutated. When the command has no effect (unknown
    id, nothing to clear, priority already set) the same tuple is returned so
    callers can detect a no-op with ``is``.
    """
    if isinstance(command, AddTask):
        return (command.task, *tasks)

    if isinstance(command, ToggleTask):
        return _replace(tasks, command.task_id, _toggled)

    if isinstance(command, SetPriority):
        priority = command.priority

        def _reprioritized(task: Task) -> Task:
            # Completed tasks keep the priority they were finished with
            if task.completed or task.priority == priority:
                return task
            return task.model_copy(update={"priority": priority})

        return _replace(tasks, command.task_id, _reprioritized)

    if isinstance(command, RemoveTask):
        kept = tuple(t for t in tasks if t.id != command.task_id)
        return tasks if len(kept) == len(tasks) else kept

    if isinstance(command, ClearCompleted):
        kept = tuple(t for t in tasks if not t.completed)
        return tasks if len(kept) == len(tasks) else kept

    raise TypeError(f"unknown command: {type(command).__name__}")


def _toggled(task: Task) -> Task:
    return task.model_copy(update={"completed": not task.completed})


def _replace(
    tasks: tuple[Task, ...], task_id: str, fn: Callable[[Task], Task]
) -> tuple[Task, ...]:
    for index, task in enumerate(tasks):
        if task.id == task_id:
            updated = fn(task)
            if updated is task:
                return tasks
            return (*tasks[:index], updated, *tasks[index + 1 :])
    return tasks


__all__ = [
    "AddTask",
    "ClearCompleted",
    "Command",
    "RemoveTask",
    "SetPriority",
    "ToggleTask",
    "apply_command",
]
