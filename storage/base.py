from __future__ import annotations

from typing import Protocol


class KeyValueStore(Protocol):
    """Byte store addressed by key. ``set`` reports failure instead of raising."""

    def get(self, key: str) -> bytes | None:
        ...

    def set(self, key: str, value: bytes) -> bool:
        ...
