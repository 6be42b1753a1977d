from collections.abc import Iterable

from prettytable import PrettyTable

from config import WEEKLY_WARNING_RATIO

from .aggregates import (
    Dashboard,
    MonthSummary,
    TrendPoint,
    category_breakdown,
    filter_by_category,
    month_summary,
)
from .ledger import Ledger


def _money(value: float) -> str:
    return f"{value:.2f}" if value >= 0 else f"({abs(value):.2f})"


class MonthReport:
    """Text tables for one month of a ledger."""

    def __init__(self, ledger: Ledger, month_key: str, categories: Iterable[str] | None = None):
        self._summary = month_summary(ledger, month_key)
        self._breakdown = category_breakdown(ledger, month_key)
        self._expenses = filter_by_category(self._summary.expenses, categories)

    @property
    def summary(self) -> MonthSummary:
        return self._summary

    @property
    def statement_title(self) -> str:
        return f"Expense statement ({self._summary.month_key})"

    def as_table(self) -> str:
        table = PrettyTable()
        table.field_names = ["ID", "Date", "Title", "Category", "Amount"]
        table.align["Title"] = "l"
        table.align["Amount"] = "r"
        for record in self._expenses:
            table.add_row(
                [
                    record.id,
                    record.date.isoformat(),
                    record.title,
                    record.category,
                    _money(record.amount),
                ]
            )
        table.add_row(["", "", "TOTAL", "", _money(self._summary.total)], divider=True)
        table.add_row(["", "", "INCOME", "", _money(self._summary.income)])
        table.add_row(["", "", "BALANCE", "", _money(self._summary.balance)])
        return str(table)

    def category_table(self) -> str:
        table = PrettyTable()
        table.field_names = ["Category", "Amount"]
        table.align["Amount"] = "r"
        for category, amount in sorted(self._breakdown.items(), key=lambda item: -item[1]):
            table.add_row([category, _money(amount)])
        table.add_row(["TOTAL", _money(sum(self._breakdown.values()))], divider=True)
        return str(table)


def trend_table(points: Iterable[TrendPoint]) -> str:
    table = PrettyTable()
    table.field_names = ["Month", "Income", "Expense"]
    total_income = 0.0
    total_expense = 0.0
    for point in points:
        total_income += point.income
        total_expense += point.expense
        table.add_row([point.month_key, _money(point.income), _money(point.expense)])
    table.add_row(["TOTAL", _money(total_income), _money(total_expense)], divider=True)
    return str(table)


def dashboard_table(view: Dashboard) -> str:
    table = PrettyTable()
    table.field_names = ["Period", "Income", "Total Expense"]
    table.add_row(
        [
            f"Current month ({view.current_month_key})",
            _money(view.current_income),
            _money(view.current_total),
        ]
    )
    table.add_row(
        [
            f"Previous month ({view.previous_month_key})",
            _money(view.previous_income),
            _money(view.previous_total),
        ]
    )
    table.add_row(
        ["Last 7 days", f"limit {_money(view.weekly_limit)}", _money(view.weekly_total)],
        divider=True,
    )
    lines = [str(table)]
    if view.warning:
        lines.append(
            f"Warning: weekly spending is more than {WEEKLY_WARNING_RATIO:.0%} of your limit "
            f"({view.weekly_limit:.0f})."
        )
    return "\n".join(lines)
