from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from taskflow.observability import get_json_logger

STORAGE_BACKENDS = ("file", "memory", "redis")
DEFAULT_STORAGE_KEY = "todoTasks"
DEFAULT_DATA_FILE = "~/.taskflow/storage.json"


@dataclass(slots=True)
class AppConfig:
    storage_backend: str
    storage_key: str
    data_file: str
    redis_url: str
    key_prefix: str


def _read_backend(raw: str | None) -> str:
    backend = (raw or "").strip().lower() or "file"
    if backend not in STORAGE_BACKENDS:
        get_json_logger("taskflow.config").warning(
            "unknown storage backend; using file",
            extra={"event": "config_fallback", "backend": backend},
        )
        return "file"
    return backend


def load_config(env: dict[str, str] | None = None) -> AppConfig:
    e: dict[str, Any] = dict(os.environ)
    if env:
        e.update(env)
    return AppConfig(
        storage_backend=_read_backend(e.get("TASKFLOW_STORAGE")),
        storage_key=(e.get("TASKFLOW_STORAGE_KEY") or "").strip() or DEFAULT_STORAGE_KEY,
        data_file=(e.get("TASKFLOW_DATA_FILE") or "").strip() or DEFAULT_DATA_FILE,
        redis_url=e.get("REDIS_URL", "redis://localhost:6379/0"),
        key_prefix=(e.get("TASKFLOW_KEY_PREFIX") or "").strip() or "taskflow",
    )


__all__ = ["AppConfig", "STORAGE_BACKENDS", "load_config"]
