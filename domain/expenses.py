from dataclasses import dataclass, field, replace
from datetime import date as dt_date
from typing import Any
from uuid import uuid4

from .categories import normalize_category
from .validation import month_key_of, parse_ymd


def new_expense_id() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class ExpenseRecord:
    id: str
    title: str
    amount: float
    date: dt_date | str
    category: str = "Other"
    month_key: str = field(init=False)

    def __post_init__(self) -> None:
        record_id = str(self.id).strip() if self.id is not None else ""
        if not record_id:
            raise ValueError("id must be a non-empty string")
        object.__setattr__(self, "id", record_id)
        object.__setattr__(self, "title", str(self.title))
        object.__setattr__(self, "amount", float(self.amount))
        object.__setattr__(self, "date", parse_ymd(self.date))
        object.__setattr__(self, "category", normalize_category(self.category))
        object.__setattr__(self, "month_key", month_key_of(self.date))

    def with_changes(self, **changes: Any) -> "ExpenseRecord":
        """Return a copy with ``changes`` applied; ``month_key`` follows the new date."""
        if "id" in changes:
            raise ValueError("Expense id cannot be reassigned")
        if "month_key" in changes:
            raise ValueError("month_key is derived from date")
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "amount": self.amount,
            "date": self.date.isoformat() if isinstance(self.date, dt_date) else self.date,
            "monthKey": self.month_key,
            "category": self.category,
        }
