from __future__ import annotations

import json
import logging
import os
import tempfile
import threading

from .base import KeyValueStore

logger = logging.getLogger(__name__)


class JsonFileStore(KeyValueStore):
    """Key-value store kept in one JSON file mapping key -> UTF-8 text."""

    _path_locks: dict[str, threading.RLock] = {}
    _path_locks_guard = threading.Lock()

    def __init__(self, file_path: str = "expenso.json") -> None:
        self._file_path = file_path
        abs_path = os.path.abspath(file_path)
        with self._path_locks_guard:
            if abs_path not in self._path_locks:
                self._path_locks[abs_path] = threading.RLock()
            self._lock = self._path_locks[abs_path]

    @property
    def file_path(self) -> str:
        return self._file_path

    def _load_data(self) -> dict[str, str]:
        with self._lock:
            try:
                with open(self._file_path, encoding="utf-8") as f:
                    data = json.load(f)
            except FileNotFoundError:
                return {}
            except (json.JSONDecodeError, UnicodeDecodeError):
                logger.warning(
                    "Failed to load key-value data from %s, using empty dataset",
                    self._file_path,
                )
                return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring non-object root in %s", self._file_path)
            return {}
        return {str(key): value for key, value in data.items() if isinstance(value, str)}

    def _save_data(self, data: dict[str, str]) -> None:
        with self._lock:
            directory = os.path.dirname(self._file_path) or "."
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".expenso_", suffix=".json", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, self._file_path)
            finally:
                try:
                    if os.path.exists(tmp_path):
                        os.remove(tmp_path)
                except OSError:
                    logger.exception("Failed to cleanup temporary file during save: %s", tmp_path)

    def get(self, key: str) -> bytes | None:
        value = self._load_data().get(key)
        if value is None:
            return None
        return value.encode("utf-8")

    def set(self, key: str, value: bytes) -> bool:
        try:
            text = bytes(value).decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Refusing to store non UTF-8 value under %s", key)
            return False
        with self._lock:
            data = self._load_data()
            data[key] = text
            try:
                self._save_data(data)
            except OSError:
                logger.exception("Failed to write %s", self._file_path)
                return False
        return True
