from __future__ import annotations

from .task import (
    DEFAULT_PRIORITY,
    MAX_TEXT_LENGTH,
    PRIORITIES,
    PRIORITY_WEIGHTS,
    Priority,
    Task,
    TaskList,
    require_priority,
)

__all__ = [
    "DEFAULT_PRIORITY",
    "MAX_TEXT_LENGTH",
    "PRIORITIES",
    "PRIORITY_WEIGHTS",
    "Priority",
    "Task",
    "TaskList",
    "require_priority",
]
