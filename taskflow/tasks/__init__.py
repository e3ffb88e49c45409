from __future__ import annotations

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
from .store import AddResult, TaskStore
from .view import TaskStats, ViewCriteria, compute_view, empty_message, summarize

__all__ = [
    "AddResult",
    "AddTask",
    "ClearCompleted",
    "Command",
    "PersistenceBridge",
    "RemoveTask",
    "SetPriority",
    "TaskStats",
    "TaskStore",
    "ToggleTask",
    "ViewCriteria",
    "apply_command",
    "compute_view",
    "empty_message",
    "summarize",
]
