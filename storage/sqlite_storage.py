from __future__ import annotations

import logging
import sqlite3

from .base import KeyValueStore

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value BLOB NOT NULL
)
"""


class SQLiteStore(KeyValueStore):
    """SQLite-backed key-value store without domain logic."""

    def __init__(self, db_path: str = "expenso.db") -> None:
        self._db_path = db_path
        self._conn = sqlite3.connect(db_path)
        self._conn.execute("PRAGMA journal_mode = WAL;")
        self.initialize_schema()

    def close(self) -> None:
        self._conn.close()

    def initialize_schema(self) -> None:
        self._conn.executescript(SCHEMA)
        self._conn.commit()

    def get(self, key: str) -> bytes | None:
        row = self._conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        return bytes(row[0])

    def set(self, key: str, value: bytes) -> bool:
        try:
            self._conn.execute(
                """
                INSERT INTO kv (key, value)
                VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, sqlite3.Binary(bytes(value))),
            )
            self._conn.commit()
        except sqlite3.Error:
            logger.exception("Failed to write key %s to %s", key, self._db_path)
            return False
        return True
