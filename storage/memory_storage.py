from __future__ import annotations

from .base import KeyValueStore


class MemoryStore(KeyValueStore):
    """Process-local store, used by tests and throwaway sessions."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> bool:
        self._data[key] = bytes(value)
        return True

    def keys(self) -> list[str]:
        return list(self._data)
