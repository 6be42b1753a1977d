from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .errors import LedgerShapeError
from .expenses import ExpenseRecord
from .validation import as_finite_amount, parse_ymd


@dataclass
class Ledger:
    """Aggregate root: monthly incomes plus the ordered expense sequence."""

    incomes: dict[str, float] = field(default_factory=dict)
    expenses: list[ExpenseRecord] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return bool(self.incomes) or bool(self.expenses)

    def find(self, expense_id: str) -> ExpenseRecord | None:
        for record in self.expenses:
            if record.id == expense_id:
                return record
        return None

    def index_of(self, expense_id: str) -> int | None:
        for index, record in enumerate(self.expenses):
            if record.id == expense_id:
                return index
        return None

    def expense_ids(self) -> set[str]:
        return {record.id for record in self.expenses}

    def copy(self) -> Ledger:
        # Records are frozen, so sharing them between copies is safe.
        return Ledger(incomes=dict(self.incomes), expenses=list(self.expenses))

    def to_document(self) -> dict:
        return {
            "incomes": dict(self.incomes),
            "expenses": [record.to_dict() for record in self.expenses],
        }

    @classmethod
    def from_document(cls, payload: Any) -> Ledger:
        return parse_document(payload).ledger


@dataclass
class ParsedDocument:
    """A shape-checked document plus the entries that could not be read."""

    ledger: Ledger
    skipped: list[str] = field(default_factory=list)


def _parse_incomes(raw: dict, skipped: list[str]) -> dict[str, float]:
    incomes: dict[str, float] = {}
    for month_key, value in raw.items():
        amount = as_finite_amount(value)
        if not isinstance(month_key, str):
            skipped.append(f"incomes: key of type {type(month_key).__name__} is not a month")
            continue
        if amount is None:
            skipped.append(f"incomes[{month_key}]: unreadable amount")
            continue
        incomes[month_key] = amount
    return incomes


def _parse_expense(item: Any) -> ExpenseRecord:
    """Coerce one stored expense; raises ValueError when it cannot be represented."""
    if not isinstance(item, dict):
        raise ValueError("not an object")
    raw_id = item.get("id")
    if isinstance(raw_id, bool) or not isinstance(raw_id, (str, int)) or not str(raw_id).strip():
        raise ValueError("missing id")
    amount = as_finite_amount(item.get("amount"))
    if amount is None:
        raise ValueError("unreadable amount")
    title = item.get("title")
    category = item.get("category")
    return ExpenseRecord(
        id=str(raw_id),
        title="" if title is None else str(title),
        amount=amount,
        date=parse_ymd(item.get("date")),
        category=category if isinstance(category, str) else None,
    )


def parse_document(payload: Any) -> ParsedDocument:
    """Convert a ledger document.

    Only the top-level shape is all-or-nothing: a root object holding an
    ``incomes`` object and an ``expenses`` array, else ``LedgerShapeError``.
    Entries inside are coerced leniently (numeric strings become floats, a
    negative amount or empty title is kept) and an entry that still cannot be
    read is skipped and reported in ``skipped``. The stored ``monthKey`` is
    ignored and recomputed from ``date``.
    """
    if not isinstance(payload, dict):
        raise LedgerShapeError("Ledger document root must be an object")
    if "incomes" not in payload:
        raise LedgerShapeError("Ledger document is missing 'incomes'")
    if "expenses" not in payload:
        raise LedgerShapeError("Ledger document is missing 'expenses'")
    if not isinstance(payload["incomes"], dict):
        raise LedgerShapeError("'incomes' must be an object")
    if not isinstance(payload["expenses"], list):
        raise LedgerShapeError("'expenses' must be an array")

    skipped: list[str] = []
    incomes = _parse_incomes(payload["incomes"], skipped)
    expenses: list[ExpenseRecord] = []
    for idx, item in enumerate(payload["expenses"], start=1):
        label = f"expenses[{idx}]"
        try:
            expenses.append(_parse_expense(item))
        except (ValueError, OverflowError) as exc:
            skipped.append(f"{label}: {exc}")
    return ParsedDocument(ledger=Ledger(incomes=incomes, expenses=expenses), skipped=skipped)


def sort_by_date_desc(expenses: Iterable[ExpenseRecord]) -> list[ExpenseRecord]:
    """Most recent first; records sharing a date keep their relative order."""
    return sorted(expenses, key=lambda record: record.date, reverse=True)
