import json

import pytest
from openpyxl import load_workbook

from domain.aggregates import month_summary
from domain.expenses import ExpenseRecord
from domain.ledger import Ledger
from utils.backup_utils import default_backup_path, export_backup_to_json, read_backup_file
from utils.excel_utils import bill_to_xlsx
from utils.pdf_utils import bill_to_pdf


def _ledger() -> Ledger:
    return Ledger(
        incomes={"2025-06": 1000.0},
        expenses=[
            ExpenseRecord(id="b", title="Bus", amount=50, date="2025-06-06", category="Transport"),
            ExpenseRecord(id="a", title="Чай", amount=250, date="2025-06-05", category="Food"),
        ],
    )


def test_bill_pdf_is_written(tmp_path):
    path = tmp_path / "bills" / "2025-06.pdf"
    bill_to_pdf(month_summary(_ledger(), "2025-06"), str(path))
    data = path.read_bytes()
    assert data.startswith(b"%PDF")
    assert len(data) > 0


def test_bill_pdf_for_empty_month(tmp_path):
    path = tmp_path / "empty.pdf"
    bill_to_pdf(month_summary(_ledger(), "2025-01"), str(path))
    assert path.stat().st_size > 0


def test_bill_xlsx_contents(tmp_path):
    path = tmp_path / "bill.xlsx"
    bill_to_xlsx(month_summary(_ledger(), "2025-06"), str(path))

    wb = load_workbook(path)
    try:
        bill = wb["Bill"]
        rows = [tuple(row) for row in bill.iter_rows(values_only=True)]
        assert rows[0][:2] == ("Monthly Expense Bill", "2025-06")
        assert rows[1][:2] == ("Income", 1000)
        assert rows[2][:2] == ("Total Expense", 300)
        assert rows[3][:2] == ("Balance", 700)
        titles = [row[1] for row in rows[6:]]
        assert titles == ["Bus", "Чай"]

        by_category = [tuple(row) for row in wb["By Category"].iter_rows(values_only=True)]
        assert by_category == [
            ("Category", "Amount"),
            ("Food", 250),
            ("Transport", 50),
            ("TOTAL", 300),
        ]
    finally:
        wb.close()


def test_backup_json_round_trip(tmp_path):
    document = _ledger().to_document()
    path = tmp_path / "out" / "expense-backup.json"
    export_backup_to_json(str(path), document)

    text = read_backup_file(str(path))
    assert json.loads(text) == document
    assert "Чай" in text


def test_read_missing_backup_raises(tmp_path):
    with pytest.raises(FileNotFoundError, match="missing.json"):
        read_backup_file(str(tmp_path / "missing.json"))


def test_default_backup_path():
    assert default_backup_path("/tmp").endswith("expense-backup.json")
