from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from domain.aggregates import TrendPoint
from domain.expenses import ExpenseRecord


@dataclass(frozen=True)
class CategorySlice:
    category: str
    amount: float
    percent: float


def category_slices(breakdown: dict[str, float]) -> list[CategorySlice]:
    """Pie-chart slices, largest first. Percentages are of the breakdown total."""
    total = sum(breakdown.values())
    ordered = sorted(breakdown.items(), key=lambda item: (-item[1], item[0]))
    return [
        CategorySlice(
            category=category,
            amount=amount,
            percent=(amount / total * 100.0) if total > 0 else 0.0,
        )
        for category, amount in ordered
    ]


def trend_bars(points: Iterable[TrendPoint]) -> tuple[list[str], list[float], list[float]]:
    labels: list[str] = []
    income: list[float] = []
    expense: list[float] = []
    for point in points:
        labels.append(point.month_key)
        income.append(point.income)
        expense.append(point.expense)
    return labels, income, expense


def extract_months(expenses: Iterable[ExpenseRecord]) -> list[str]:
    return sorted({record.month_key for record in expenses})
