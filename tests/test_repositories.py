import json
from unittest.mock import Mock

import pytest

from config import LEDGER_KEY
from domain.expenses import ExpenseRecord
from domain.ledger import Ledger
from infrastructure.repositories import KeyValueLedgerRepository, LedgerRepository
from storage.base import KeyValueStore
from storage.memory_storage import MemoryStore


class TestLedgerRepository:
    def test_repository_is_abstract(self):
        with pytest.raises(TypeError):
            LedgerRepository()  # type: ignore[abstract]


class TestKeyValueLedgerRepository:
    def setup_method(self):
        self.kv = MemoryStore()
        self.repo = KeyValueLedgerRepository(self.kv)

    def test_absent_document_loads_empty(self):
        assert self.repo.load() == Ledger()

    def test_save_and_load(self):
        ledger = Ledger(
            incomes={"2025-06": 30000.0},
            expenses=[ExpenseRecord(id="1", title="Lunch", amount=250, date="2025-06-05")],
        )
        assert self.repo.save(ledger) is True
        assert self.repo.load() == ledger
        assert json.loads(self.kv.get(LEDGER_KEY))["expenses"][0]["monthKey"] == "2025-06"

    @pytest.mark.parametrize(
        "raw",
        [
            b"{not json",
            b"\xff\xfe",
            b"[]",
            b'{"expenses": []}',
            b'{"incomes": {}, "expenses": {}}',
            b'{"incomes": {"2025-06": ' + b"1" * 5000 + b'}, "expenses": []}',
        ],
    )
    def test_corrupt_document_loads_empty(self, raw):
        self.kv.set(LEDGER_KEY, raw)
        assert self.repo.load() == Ledger()

    def test_one_unreadable_record_does_not_discard_the_document(self, caplog):
        self.kv.set(
            LEDGER_KEY,
            json.dumps(
                {
                    "incomes": {"2025-06": 30000},
                    "expenses": [
                        {"id": "1", "title": "Rent", "amount": 9000, "date": "2025-06-01"},
                        {"id": "2", "title": "Lunch", "amount": "oops", "date": "2025-06-05"},
                    ],
                }
            ).encode("utf-8"),
        )

        with caplog.at_level("WARNING"):
            ledger = self.repo.load()

        assert ledger.incomes == {"2025-06": 30000.0}
        assert [r.id for r in ledger.expenses] == ["1"]
        assert "expenses[2]" in caplog.text

    def test_custom_key(self):
        repo = KeyValueLedgerRepository(self.kv, key="other")
        repo.save(Ledger(incomes={"2025-01": 5.0}))
        assert self.kv.get("other") is not None
        assert self.kv.get(LEDGER_KEY) is None

    def test_store_rejection_is_reported(self):
        kv = Mock(spec=KeyValueStore)
        kv.set.return_value = False
        assert KeyValueLedgerRepository(kv).save(Ledger()) is False

    def test_store_exception_is_reported(self):
        kv = Mock(spec=KeyValueStore)
        kv.set.side_effect = OSError("disk full")
        kv.get.side_effect = OSError("unreadable")
        repo = KeyValueLedgerRepository(kv)
        assert repo.save(Ledger()) is False
        assert repo.load() == Ledger()
