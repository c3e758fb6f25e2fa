"""
JSON File Storage Implementation

A single JSON object on disk mapping each key to its string value.

Writes go to a temporary file first and are moved into place with
os.replace, so a crash mid-write never leaves a truncated file.
"""

import json
import os
from pathlib import Path
from typing import Optional

from src.services.storage.interface import (
    ConnectionError,
    CorruptDataError,
    KeyValueStore,
    StorageError,
)


class JsonFileKeyValueStore(KeyValueStore):
    """Key-value store backed by one JSON file."""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw_text = self._path.read_text(encoding="utf-8").strip()
        except OSError as e:
            raise ConnectionError(f"Failed to read {self._path}: {e}")
        if not raw_text:
            return {}
        try:
            data = json.loads(raw_text)
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"Store file {self._path} is not valid JSON: {e}")
        if not isinstance(data, dict):
            raise CorruptDataError(f"Store file {self._path} must hold a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            raise CorruptDataError(f"Value for key {key!r} is not a string")
        return value

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        tmp_path = self._path.with_name(f"{self._path.name}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self._path)
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}")
