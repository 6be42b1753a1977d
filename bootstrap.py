from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date as dt_date

from app.ledger_store import LedgerStore
from backup import create_backup
from config import JSON_PATH, SQLITE_PATH, USE_SQLITE
from infrastructure.repositories import KeyValueLedgerRepository
from storage.base import KeyValueStore
from storage.json_storage import JsonFileStore
from storage.sqlite_storage import SQLiteStore

logger = logging.getLogger(__name__)


def bootstrap_key_value_store(
    data_path: str | None = None,
    *,
    use_sqlite: bool = USE_SQLITE,
    make_backup: bool = False,
) -> KeyValueStore:
    path = data_path or (SQLITE_PATH if use_sqlite else JSON_PATH)
    logger.info("[bootstrap] Storage selected: %s (%s)", "SQLite" if use_sqlite else "JSON", path)
    if make_backup:
        create_backup(path)
    if use_sqlite:
        return SQLiteStore(path)
    return JsonFileStore(path)


def bootstrap_ledger_store(
    store: KeyValueStore,
    *,
    today: Callable[[], dt_date] = dt_date.today,
) -> LedgerStore:
    ledger_store = LedgerStore(KeyValueLedgerRepository(store), today=today)
    ledger = ledger_store.ledger
    logger.info(
        "[bootstrap] Ledger ready: incomes=%s expenses=%s",
        len(ledger.incomes),
        len(ledger.expenses),
    )
    return ledger_store
