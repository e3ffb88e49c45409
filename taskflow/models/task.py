from __future__ import annotations

import datetime as _dt
import uuid
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

Priority = Literal["low", "medium", "high"]

PRIORITIES: tuple[Priority, ...] = ("low", "medium", "high")
PRIORITY_WEIGHTS: dict[str, int] = {"high": 3, "medium": 2, "low": 1}
DEFAULT_PRIORITY: Priority = "medium"
MAX_TEXT_LENGTH = 200


def _utcnow() -> _dt.datetime:
    return _dt.datetime.now(_dt.UTC)


class Task(BaseModel):
    """A single tracked task.

    - Immutable; state changes produce a copy via ``model_copy``
    - Serialized with the ``createdAt`` alias so stored records keep the
      ``{id, text, completed, createdAt, priority}`` shape
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    text: str
    completed: bool = False
    created_at: _dt.datetime = Field(default_factory=_utcnow, alias="createdAt")
    priority: Priority = DEFAULT_PRIORITY

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: _dt.datetime) -> _dt.datetime:
        # Naive timestamps from older records are taken as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=_dt.UTC)
        return value

    @property
    def weight(self) -> int:
        return PRIORITY_WEIGHTS[self.priority]


TaskList = TypeAdapter(list[Task])


def require_priority(value: str) -> Priority:
    if value not in PRIORITIES:
        raise ValueError(f"priority must be one of {', '.join(PRIORITIES)}")
    return value  # type: ignore[return-value]


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
