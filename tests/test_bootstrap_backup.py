from __future__ import annotations

from datetime import date
from pathlib import Path

from backup import create_backup, prune_store_backups
from bootstrap import bootstrap_key_value_store, bootstrap_ledger_store
from storage.json_storage import JsonFileStore
from storage.sqlite_storage import SQLiteStore


def test_create_backup_creates_timestamped_copy(tmp_path) -> None:
    src = tmp_path / "expenso.json"
    src.write_text('{"personal-expense-app": "{}"}', encoding="utf-8")

    backup_path = create_backup(str(src))
    assert backup_path is not None
    backup = Path(backup_path)
    assert backup.exists()
    assert backup.parent.name == "backups"
    assert backup.name.startswith("expenso_backup_")
    assert backup.suffix == ".json"


def test_create_backup_without_source(tmp_path) -> None:
    assert create_backup(str(tmp_path / "missing.json")) is None


def test_bootstrap_selects_store(tmp_path) -> None:
    json_store = bootstrap_key_value_store(str(tmp_path / "a.json"), use_sqlite=False)
    assert isinstance(json_store, JsonFileStore)

    sqlite_store = bootstrap_key_value_store(str(tmp_path / "a.db"), use_sqlite=True)
    try:
        assert isinstance(sqlite_store, SQLiteStore)
    finally:
        sqlite_store.close()


def test_bootstrap_backs_up_existing_store(tmp_path) -> None:
    path = tmp_path / "expenso.json"
    JsonFileStore(str(path)).set("k", b"v")

    bootstrap_key_value_store(str(path), use_sqlite=False, make_backup=True)

    assert len(list((tmp_path / "backups").iterdir())) == 1


def test_bootstrap_ledger_store_survives_corrupt_document(tmp_path) -> None:
    path = tmp_path / "expenso.json"
    store = JsonFileStore(str(path))
    store.set("personal-expense-app", b'{"incomes": "oops"}')

    ledger_store = bootstrap_ledger_store(store, today=lambda: date(2025, 6, 15))

    assert not ledger_store.ledger.has_data
    record = ledger_store.add_expense("Tea", 20)
    assert record.date == date(2025, 6, 15)


def test_only_newest_store_backups_are_kept(tmp_path) -> None:
    src = tmp_path / "expenso.json"
    src.write_text("{}", encoding="utf-8")

    created = [create_backup(str(src), keep=2) for _ in range(4)]

    remaining = sorted(str(p) for p in (tmp_path / "backups").iterdir())
    assert remaining == sorted(created[-2:])


def test_prune_ignores_other_files(tmp_path) -> None:
    src = tmp_path / "expenso.json"
    backups = tmp_path / "backups"
    backups.mkdir()
    (backups / "notes.txt").write_text("keep me", encoding="utf-8")
    for stamp in ("20250101_000000_000000", "20250102_000000_000000"):
        (backups / f"expenso_backup_{stamp}.json").write_text("{}", encoding="utf-8")

    removed = prune_store_backups(src, keep=1)

    assert [p.name for p in removed] == ["expenso_backup_20250101_000000_000000.json"]
    assert sorted(p.name for p in backups.iterdir()) == [
        "expenso_backup_20250102_000000_000000.json",
        "notes.txt",
    ]
