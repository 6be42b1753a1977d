import logging
import os

from openpyxl import Workbook

from domain.aggregates import MonthSummary, category_breakdown
from domain.ledger import Ledger

logger = logging.getLogger(__name__)

BILL_HEADERS = ["Date", "Title", "Category", "Amount"]


def bill_to_xlsx(summary: MonthSummary, filepath: str) -> None:
    """Export the monthly bill as a workbook with a Bill and a By Category sheet."""
    wb = Workbook()
    ws = wb.active
    if ws is not None:
        ws.title = "Bill"
        ws.append(["Monthly Expense Bill", summary.month_key])
        ws.append(["Income", summary.income])
        ws.append(["Total Expense", summary.total])
        ws.append(["Balance", summary.balance])
        ws.append([])
        ws.append(BILL_HEADERS)
        for record in summary.expenses:
            ws.append([record.date, record.title, record.category, record.amount])
        if not summary.expenses:
            ws.append(["No expenses for this month."])

    # Summary carries only this month's expenses, so the breakdown is month-local.
    breakdown = category_breakdown(
        Ledger(expenses=list(summary.expenses)), summary.month_key
    )
    bycat_ws = wb.create_sheet(title="By Category")
    bycat_ws.append(["Category", "Amount"])
    for category, amount in sorted(breakdown.items()):
        bycat_ws.append([category, amount])
    bycat_ws.append(["TOTAL", summary.total])

    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)
    wb.save(filepath)
    wb.close()
    logger.info("XLSX bill exported: month=%s file=%s", summary.month_key, filepath)
