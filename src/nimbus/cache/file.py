"""File-backed DataStore implementation."""

from __future__ import annotations

import json
import threading
from pathlib import Path

from result import Err, Ok, Result

from nimbus.common import AppDirectories, JsonValue, get_data_directory_from_dirs

from .models import StoreError, StoreKeyNotFoundError, StoreReadError, StoreWriteError


class FileDataStore:
    """Keeps every entry of a namespace in one JSON document.

    Fetch workers write concurrently, so each read-modify-write cycle holds
    the store's lock.
    """

    def __init__(self, namespace: str, directories: AppDirectories) -> None:
        self._namespace = namespace
        self._directories = directories
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return get_data_directory_from_dirs(self._directories) / self._namespace / "data.json"

    def save(self, key: str, data: JsonValue) -> Result[None, StoreError]:
        data_file = self.path
        with self._lock:
            try:
                entries = self._read_entries(data_file)
                entries[key] = data
                payload = json.dumps(entries, indent=2)
                data_file.parent.mkdir(parents=True, exist_ok=True)
                data_file.write_text(payload, encoding="utf-8")
            except (OSError, TypeError, ValueError) as e:
                return Err(StoreWriteError(namespace=self._namespace, key=key, message=f"Failed to save entry: {e}"))
        return Ok(None)

    def load(self, key: str) -> Result[JsonValue, StoreError]:
        data_file = self.path
        with self._lock:
            try:
                entries = self._read_entries(data_file)
            except (OSError, TypeError, ValueError) as e:
                return Err(StoreReadError(namespace=self._namespace, key=key, message=f"Failed to read entries: {e}"))

        if key not in entries:
            return Err(
                StoreKeyNotFoundError(
                    namespace=self._namespace,
                    key=key,
                    message=f"Key '{key}' not found in namespace '{self._namespace}'",
                )
            )
        return Ok(entries[key])

    def delete(self, key: str) -> Result[None, StoreError]:
        data_file = self.path
        with self._lock:
            try:
                entries = self._read_entries(data_file)
                if key in entries:
                    del entries[key]
                    data_file.write_text(json.dumps(entries, indent=2), encoding="utf-8")
            except (OSError, TypeError, ValueError) as e:
                return Err(StoreWriteError(namespace=self._namespace, key=key, message=f"Failed to delete entry: {e}"))
        return Ok(None)

    @staticmethod
    def _read_entries(data_file: Path) -> dict[str, JsonValue]:
        if not data_file.exists():
            return {}
        entries = json.loads(data_file.read_text(encoding="utf-8"))
        if not isinstance(entries, dict):
            raise TypeError("Stored data must be a JSON object")
        return entries
