from __future__ import annotations

import argparse
import dataclasses
import sys
from typing import Any

from taskflow.config import STORAGE_BACKENDS, AppConfig, load_config
from taskflow.models import PRIORITIES, Task
from taskflow.storage import open_storage
from taskflow.tasks import PersistenceBridge, TaskStore, ViewCriteria, empty_message
from taskflow.tasks.persistence import dumps
from taskflow.tasks.view import SORT_MODES, STATUS_FILTERS

ID_DISPLAY_LEN = 8


class CommandError(Exception):
    """User-facing failure; printed to stderr and mapped to exit code 1."""


def _format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    day = task.created_at.date().isoformat()
    return f"[{mark}] {task.id[:ID_DISPLAY_LEN]}  {task.priority:<6}  {day}  {task.text}"


def resolve_id(store: TaskStore, ref: str) -> str:
    """Map a full id or a unique id prefix to a task id."""
    ref = ref.strip()
    if not ref:
        raise CommandError("task id required")
    if store.get(ref) is not None:
        return ref
    matches = [t.id for t in store.tasks if t.id.startswith(ref)]
    if not matches:
        raise CommandError(f"no task matches '{ref}'")
    if len(matches) > 1:
        raise CommandError(f"id prefix '{ref}' is ambiguous")
    return matches[0]


def _cmd_add(store: TaskStore, args: Any) -> None:
    result = store.add(" ".join(args.text))
    if not result.ok:
        raise CommandError(str(result.error))
    assert result.task is not None
    print(_format_task(result.task))


def _cmd_list(store: TaskStore, args: Any) -> None:
    criteria = ViewCriteria(search=args.search or "", status=args.filter, sort=args.sort)
    visible = store.view(criteria)
    if args.json:
        print(dumps(visible))
        return
    message = empty_message(store.tasks, visible)
    if message:
        print(message)
        return
    for task in visible:
        print(_format_task(task))


def _cmd_toggle(store: TaskStore, args: Any) -> None:
    task_id = resolve_id(store, args.id)
    store.toggle(task_id)
    task = store.get(task_id)
    assert task is not None
    print(_format_task(task))


def _cmd_priority(store: TaskStore, args: Any) -> None:
    task_id = resolve_id(store, args.id)
    task = store.get(task_id)
    assert task is not None
    if task.completed:
        raise CommandError("completed tasks keep their priority")
    store.set_priority(task_id, args.priority)
    updated = store.get(task_id)
    assert updated is not None
    print(_format_task(updated))


def _cmd_rm(store: TaskStore, args: Any) -> None:
    task_id = resolve_id(store, args.id)
    store.remove(task_id)
    print(f"Removed {task_id[:ID_DISPLAY_LEN]}")


def _cmd_clear_completed(store: TaskStore, args: Any) -> None:
    removed = store.clear_completed()
    print(f"Cleared {removed} completed task(s)")


def _cmd_stats(store: TaskStore, args: Any) -> None:
    stats = store.stats()
    print(f"total={stats.total} active={stats.active} completed={stats.completed}")


_HANDLERS = {
    "add": _cmd_add,
    "list": _cmd_list,
    "toggle": _cmd_toggle,
    "priority": _cmd_priority,
    "rm": _cmd_rm,
    "clear-completed": _cmd_clear_completed,
    "stats": _cmd_stats,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("taskflow")
    parser.add_argument("--storage", choices=list(STORAGE_BACKENDS))
    parser.add_argument("--data-file")
    sub = parser.add_subparsers(dest="cmd")

    p_add = sub.add_parser("add", help="Add a task")
    p_add.add_argument("text", nargs="+")

    p_list = sub.add_parser("list", help="Show tasks (search, then filter, then sort)")
    p_list.add_argument("--search")
    p_list.add_argument("--filter", choices=list(STATUS_FILTERS), default="all")
    p_list.add_argument("--sort", choices=list(SORT_MODES), default="date")
    p_list.add_argument("--json", action="store_true")

    p_toggle = sub.add_parser("toggle", help="Flip a task between active and completed")
    p_toggle.add_argument("id")

    p_priority = sub.add_parser("priority", help="Set the priority of an active task")
    p_priority.add_argument("id")
    p_priority.add_argument("priority", choices=list(PRIORITIES))

    p_rm = sub.add_parser("rm", help="Delete a task")
    p_rm.add_argument("id")

    sub.add_parser("clear-completed", help="Delete every completed task")
    sub.add_parser("stats", help="Show total/active/completed counts")
    return parser


def _apply_overrides(config: AppConfig, args: Any) -> AppConfig:
    overrides: dict[str, str] = {}
    if args.storage:
        overrides["storage_backend"] = args.storage
    if args.data_file:
        overrides["data_file"] = args.data_file
    return dataclasses.replace(config, **overrides)


def run(argv: list[str] | None = None, *, config: AppConfig | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    handler = _HANDLERS.get(str(args.cmd or ""))
    if handler is None:
        parser.print_help()
        return 0

    cfg = _apply_overrides(config or load_config(), args)
    bridge = PersistenceBridge(open_storage(cfg), key=cfg.storage_key)
    store = TaskStore.from_persistence(bridge)
    try:
        handler(store, args)
    except CommandError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1
    return 0


def main(argv: list[str] | None = None) -> None:
    raise SystemExit(run(argv))


if __name__ == "__main__":
    main()
