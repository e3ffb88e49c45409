from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from taskflow.models import MAX_TEXT_LENGTH, Task


@dataclass(frozen=True, slots=True)
class Rejection:
    reason: str
    message: str


EMPTY = Rejection("empty", "Task cannot be empty")
TOO_LONG = Rejection("too_long", f"Task must be less than {MAX_TEXT_LENGTH} characters")
DUPLICATE = Rejection("duplicate", "Task already exists")


def check_text(text: str, existing: Iterable[Task]) -> Rejection | None:
    """Return why ``text`` cannot be added, or None when it is acceptable.

    Checks run in order: empty, too long, duplicate (case-insensitive,
    compared after trimming).
    """
    candidate = text.strip()
    if not candidate:
        return EMPTY
    if len(candidate) > MAX_TEXT_LENGTH:
        return TOO_LONG
    lowered = candidate.lower()
    if any(t.text.lower() == lowered for t in existing):
        return DUPLICATE
    return None


__all__ = ["DUPLICATE", "EMPTY", "TOO_LONG", "Rejection", "check_text"]
