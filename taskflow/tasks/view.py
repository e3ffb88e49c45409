from __future__ import annotations

import unicodedata
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict

from taskflow.models import Task

StatusFilter = Literal["all", "active", "completed"]
SortMode = Literal["date", "alphabetical", "priority"]

STATUS_FILTERS: tuple[StatusFilter, ...] = ("all", "active", "completed")
SORT_MODES: tuple[SortMode, ...] = ("date", "alphabetical", "priority")

NO_TASKS_MESSAGE = "No tasks yet. Add one above to get started!"
NO_MATCHES_MESSAGE = "No tasks match your current filters."


class ViewCriteria(BaseModel):
    """What the user currently wants to see."""

    model_config = ConfigDict(frozen=True)

    search: str = ""
    status: StatusFilter = "all"
    sort: SortMode = "date"


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    active: int
    completed: int

    @property
    def has_completed(self) -> bool:
        return self.completed > 0


def collation_key(text: str) -> tuple[str, str]:
    """Sort key approximating locale collation.

    Accents and case are ignored at the first level; the exact text breaks ties.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), text


def compute_view(tasks: Iterable[Task], criteria: ViewCriteria | None = None) -> list[Task]:
    """Search, then filter by status, then sort. Returns a new list."""
    c = criteria or ViewCriteria()
    visible = list(tasks)

    if c.search:
        needle = c.search.lower()
        visible = [t for t in visible if needle in t.text.lower()]

    if c.status == "active":
        visible = [t for t in visible if not t.completed]
    elif c.status == "completed":
        visible = [t for t in visible if t.completed]

    # sorted() is stable, and reverse=True keeps ties in their original order
    if c.sort == "alphabetical":
        return sorted(visible, key=lambda t: collation_key(t.text))
    if c.sort == "priority":
        return sorted(visible, key=lambda t: t.weight, reverse=True)
    return sorted(visible, key=lambda t: t.created_at, reverse=True)


def summarize(tasks: Iterable[Task]) -> TaskStats:
    total = 0
    completed = 0
    for task in tasks:
        total += 1
        if task.completed:
            completed += 1
    return TaskStats(total=total, active=total - completed, completed=completed)


def empty_message(tasks: Sequence[Task], visible: Sequence[Task]) -> str | None:
    if not tasks:
        return NO_TASKS_MESSAGE
    if not visible:
        return NO_MATCHES_MESSAGE
    return None


__all__ = [
    "NO_MATCHES_MESSAGE",
    "NO_TASKS_MESSAGE",
    "SORT_MODES",
    "STATUS_FILTERS",
    "SortMode",
    "StatusFilter",
    "TaskStats",
    "ViewCriteria",
    "collation_key",
    "compute_view",
    "empty_message",
    "summarize",
]
