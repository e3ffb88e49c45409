from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from taskflow.observability import get_json_logger

from .interface import KeyValueStorage, StorageError


class CorruptStorageFile(StorageError):
    """The storage file exists but does not hold a UTF-8 JSON object."""


class JsonFileStorage(KeyValueStorage):
    """Key-value storage kept in a single JSON object file.

    - Missing file reads as empty
    - Every ``set`` rewrites the whole file via a temp file + ``os.replace``
    - ``get`` reports corrupt contents; ``set`` replaces them
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()
        self._logger = get_json_logger("taskflow.storage")

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except UnicodeDecodeError as exc:
            raise CorruptStorageFile(f"storage file {self._path} is not UTF-8: {exc}") from exc
        except OSError as exc:
            raise StorageError(f"failed to read {self._path}: {exc}") from exc
        try:
            data: Any = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as exc:
            raise CorruptStorageFile(f"corrupt storage file {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise CorruptStorageFile(f"storage file {self._path} must hold a JSON object")
        return {str(k): str(v) for k, v in data.items()}

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        try:
            values = self._read_all()
        except CorruptStorageFile as exc:
            # Unreadable contents are replaced rather than blocking every write
            self._logger.warning(
                "overwriting corrupt storage file",
                extra={
                    "event": "storage_reset",
                    "key": key,
                    "metadata": {"path": str(self._path), "error": str(exc)[:200]},
                },
            )
            values = {}
        values[key] = value
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=".storage-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(values, f, indent=2, ensure_ascii=False)
                os.replace(tmp, self._path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"failed to write {self._path}: {exc}") from exc


__all__ = ["CorruptStorageFile", "JsonFileStorage"]
