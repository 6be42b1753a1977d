import json
import threading

import pytest

from storage import JsonFileStore, MemoryStore, SQLiteStore


class TestMemoryStore:
    def test_get_set(self):
        store = MemoryStore()
        assert store.get("k") is None
        assert store.set("k", b"v") is True
        assert store.get("k") == b"v"
        assert store.keys() == ["k"]


class TestJsonFileStore:
    def test_round_trip_and_multiple_keys(self, tmp_path):
        path = tmp_path / "store.json"
        store = JsonFileStore(str(path))
        assert store.get("ledger") is None
        assert store.set("ledger", '{"a": "ü"}'.encode("utf-8"))
        assert store.set("theme", b"dark")

        reopened = JsonFileStore(str(path))
        assert reopened.get("ledger") == '{"a": "ü"}'.encode("utf-8")
        assert reopened.get("theme") == b"dark"
        assert json.loads(path.read_text(encoding="utf-8")) == {
            "ledger": '{"a": "ü"}',
            "theme": "dark",
        }

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{broken", encoding="utf-8")
        store = JsonFileStore(str(path))
        assert store.get("ledger") is None
        assert store.set("ledger", b"{}")
        assert store.get("ledger") == b"{}"

    def test_non_utf8_value_is_refused(self, tmp_path):
        store = JsonFileStore(str(tmp_path / "store.json"))
        assert store.set("ledger", b"\xff") is False

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "store.json"
        assert JsonFileStore(str(path)).set("k", b"v")
        assert path.exists()

    def test_no_temp_files_left_behind(self, tmp_path):
        store = JsonFileStore(str(tmp_path / "store.json"))
        store.set("k", b"v")
        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]

    def test_concurrent_writers_do_not_lose_keys(self, tmp_path):
        path = str(tmp_path / "store.json")

        def write(index: int) -> None:
            JsonFileStore(path).set(f"k{index}", str(index).encode("utf-8"))

        threads = [threading.Thread(target=write, args=(i,)) for i in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        store = JsonFileStore(path)
        assert {store.get(f"k{i}") for i in range(10)} == {str(i).encode() for i in range(10)}


class TestSQLiteStore:
    @pytest.fixture
    def store(self, tmp_path):
        store = SQLiteStore(str(tmp_path / "store.db"))
        yield store
        store.close()

    def test_get_set_overwrite(self, store):
        assert store.get("ledger") is None
        assert store.set("ledger", b"one")
        assert store.set("ledger", b"two")
        assert store.get("ledger") == b"two"

    def test_persists_across_connections(self, tmp_path):
        path = str(tmp_path / "store.db")
        first = SQLiteStore(path)
        first.set("theme", b"dark")
        first.close()

        second = SQLiteStore(path)
        try:
            assert second.get("theme") == b"dark"
        finally:
            second.close()
