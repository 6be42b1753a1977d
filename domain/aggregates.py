"""Derived views over a ledger snapshot.

Every function here is a pure read: the ledger is never modified and nothing
is cached, so callers recompute after each mutation. Time-relative views take
an explicit reference date instead of reading the clock.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date as dt_date
from datetime import timedelta

from config import DEFAULT_TREND_MONTHS, WEEKLY_WARNING_RATIO, WEEKS_PER_MONTH

from .categories import ALL_CATEGORIES, normalize_category
from .expenses import ExpenseRecord
from .ledger import Ledger
from .validation import month_key_of, parse_ymd, previous_month_key, shift_month_key

WEEK_WINDOW_DAYS = 7


@dataclass(frozen=True)
class TrendPoint:
    month_key: str
    income: float
    expense: float


@dataclass(frozen=True)
class MonthSummary:
    month_key: str
    income: float
    total: float
    expenses: list[ExpenseRecord] = field(default_factory=list)

    @property
    def balance(self) -> float:
        return self.income - self.total


@dataclass(frozen=True)
class Dashboard:
    reference_date: dt_date
    current_month_key: str
    current_income: float
    current_total: float
    previous_month_key: str
    previous_income: float
    previous_total: float
    weekly_total: float
    weekly_limit: float
    warning: bool


def month_expenses(ledger: Ledger, month_key: str) -> list[ExpenseRecord]:
    return [record for record in ledger.expenses if record.month_key == month_key]


def month_total(ledger: Ledger, month_key: str) -> float:
    return sum((record.amount for record in month_expenses(ledger, month_key)), 0.0)


def month_income(ledger: Ledger, month_key: str) -> float:
    return float(ledger.incomes.get(month_key, 0.0))


def weekly_total(ledger: Ledger, month_key: str, reference_date: dt_date | str) -> float:
    """Spending in ``month_key`` dated within the 7 days ending at ``reference_date``."""
    end = parse_ymd(reference_date)
    start = end - timedelta(days=WEEK_WINDOW_DAYS - 1)
    return sum(
        (
            record.amount
            for record in month_expenses(ledger, month_key)
            if start <= record.date <= end
        ),
        0.0,
    )


def weekly_limit(income: float) -> float:
    return income / WEEKS_PER_MONTH


def over_budget_warning(weekly_spent: float, limit: float) -> bool:
    return limit > 0 and weekly_spent > limit * WEEKLY_WARNING_RATIO


def category_breakdown(ledger: Ledger, month_key: str) -> dict[str, float]:
    totals: dict[str, float] = {}
    for record in month_expenses(ledger, month_key):
        totals[record.category] = totals.get(record.category, 0.0) + record.amount
    return totals


def trend_series(
    ledger: Ledger, current_month_key: str, count: int = DEFAULT_TREND_MONTHS
) -> list[TrendPoint]:
    if count < 1:
        return []
    totals: dict[str, float] = {}
    for record in ledger.expenses:
        totals[record.month_key] = totals.get(record.month_key, 0.0) + record.amount
    points: list[TrendPoint] = []
    for offset in range(count - 1, -1, -1):
        key = shift_month_key(current_month_key, -offset)
        points.append(
            TrendPoint(
                month_key=key,
                income=month_income(ledger, key),
                expense=totals.get(key, 0.0),
            )
        )
    return points


def filter_by_category(
    expenses: Iterable[ExpenseRecord], categories: Iterable[str] | None
) -> list[ExpenseRecord]:
    wanted = set(categories or ())
    if not wanted or ALL_CATEGORIES in wanted:
        return list(expenses)
    wanted = {normalize_category(category) for category in wanted}
    return [record for record in expenses if normalize_category(record.category) in wanted]


def month_summary(ledger: Ledger, month_key: str) -> MonthSummary:
    expenses = month_expenses(ledger, month_key)
    return MonthSummary(
        month_key=month_key,
        income=month_income(ledger, month_key),
        total=sum((record.amount for record in expenses), 0.0),
        expenses=expenses,
    )


def dashboard(ledger: Ledger, reference_date: dt_date | str) -> Dashboard:
    today = parse_ymd(reference_date)
    current_key = month_key_of(today)
    previous_key = previous_month_key(current_key)
    income = month_income(ledger, current_key)
    spent = weekly_total(ledger, current_key, today)
    limit = weekly_limit(income)
    return Dashboard(
        reference_date=today,
        current_month_key=current_key,
        current_income=income,
        current_total=month_total(ledger, current_key),
        previous_month_key=previous_key,
        previous_income=month_income(ledger, previous_key),
        previous_total=month_total(ledger, previous_key),
        weekly_total=spent,
        weekly_limit=limit,
        warning=over_budget_warning(spent, limit),
    )
