from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from datetime import date as dt_date

from app.ledger_store import LedgerStore
from app.services import THEMES, PreferenceService
from app.use_cases import BuildDashboard, ExportBackup, ExportMonthBill, RestoreBackup
from bootstrap import bootstrap_key_value_store, bootstrap_ledger_store
from config import BACKUP_FILENAME, DEFAULT_TREND_MONTHS, LOG_LEVEL, USE_SQLITE
from domain.aggregates import category_breakdown, trend_series
from domain.categories import ALL_CATEGORIES, category_names
from domain.reports import MonthReport, dashboard_table, trend_table
from domain.validation import month_key_of
from storage.base import KeyValueStore
from utils.charting import category_slices, extract_months, trend_bars

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="expenso",
        description="Track monthly income and expenses in a local ledger.",
    )
    parser.add_argument("--data", default=None, help="Path to the ledger store file")
    parser.add_argument(
        "--sqlite",
        action="store_true",
        default=USE_SQLITE,
        help="Use the SQLite store instead of the JSON file store",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    income = commands.add_parser("income", help="Set the income for a month")
    income.add_argument("month", help="Month key, YYYY-MM")
    income.add_argument("amount")

    add = commands.add_parser("add", help="Add an expense")
    add.add_argument("title")
    add.add_argument("amount")
    add.add_argument("--date", default="", help="YYYY-MM-DD (default: today)")
    add.add_argument("--category", default="Other", choices=category_names())

    edit = commands.add_parser("edit", help="Edit an expense")
    edit.add_argument("id")
    edit.add_argument("--title")
    edit.add_argument("--amount")
    edit.add_argument("--date")
    edit.add_argument("--category", choices=category_names())

    delete = commands.add_parser("delete", help="Delete an expense")
    delete.add_argument("id")

    listing = commands.add_parser("list", help="List a month's expenses")
    listing.add_argument("--month", help="Month key (default: current month)")
    listing.add_argument(
        "--category",
        action="append",
        default=[],
        choices=[ALL_CATEGORIES, *category_names()],
        help="Repeat to show several categories",
    )

    summary = commands.add_parser("summary", help="Current/previous month and weekly limit")
    summary.add_argument("--date", help="Reference date (default: today)")

    trend = commands.add_parser("trend", help="Income vs expense over recent months")
    trend.add_argument("--month", help="Last month of the series (default: current month)")
    trend.add_argument("--count", type=int, default=DEFAULT_TREND_MONTHS)

    chart = commands.add_parser("chart", help="Category shares and income/expense bars")
    chart.add_argument("--month", help="Month key (default: current month)")
    chart.add_argument("--count", type=int, default=DEFAULT_TREND_MONTHS)

    commands.add_parser("months", help="List months that have expenses")

    backup = commands.add_parser("backup", help="Export a JSON backup")
    backup.add_argument("path", nargs="?", default=BACKUP_FILENAME)

    restore = commands.add_parser("restore", help="Merge a JSON backup into the ledger")
    restore.add_argument("path")

    bill = commands.add_parser("bill", help="Export a month's bill as PDF or XLSX")
    bill.add_argument("month")
    bill.add_argument("path")

    theme = commands.add_parser("theme", help="Show or set the UI theme")
    theme.add_argument("value", nargs="?", choices=THEMES)

    return parser.parse_args(argv)


def _current_month() -> str:
    return month_key_of(dt_date.today())


def run_command(args: argparse.Namespace, store: LedgerStore, kv_store: KeyValueStore) -> int:
    if args.command == "income":
        if not store.set_income(args.month, args.amount):
            print("[error] Income must be a positive number and month must be YYYY-MM")
            return 1
        print(f"Income for {args.month} set to {store.incomes[args.month]:.2f}")
        return 0

    if args.command == "add":
        record = store.add_expense(args.title, args.amount, args.date, args.category)
        if record is None:
            print("[error] Expense needs a title, a positive amount and a valid date")
            return 1
        print(f"Added expense {record.id} ({record.month_key})")
        return 0

    if args.command == "edit":
        record = store.update_expense(
            args.id,
            title=args.title,
            amount=args.amount,
            date=args.date,
            category=args.category,
        )
        if record is None:
            print(f"[error] Expense {args.id} not found or new values are invalid")
            return 1
        print(f"Updated expense {record.id}")
        return 0

    if args.command == "delete":
        if not store.delete_expense(args.id):
            print(f"[error] Expense {args.id} not found")
            return 1
        print(f"Deleted expense {args.id}")
        return 0

    if args.command == "list":
        report = MonthReport(store.ledger, args.month or _current_month(), args.category)
        print(report.statement_title)
        print(report.as_table())
        print(report.category_table())
        return 0

    if args.command == "summary":
        view = BuildDashboard(store).execute(args.date or dt_date.today())
        print(dashboard_table(view))
        return 0

    if args.command == "trend":
        points = trend_series(store.ledger, args.month or _current_month(), args.count)
        print(trend_table(points))
        return 0

    if args.command == "chart":
        month_key = args.month or _current_month()
        ledger = store.ledger
        print(f"Spending by category ({month_key})")
        for part in category_slices(category_breakdown(ledger, month_key)):
            print(f"  {part.category:<14}{part.amount:>12.2f}{part.percent:>7.1f}%")
        labels, incomes, expenses = trend_bars(trend_series(ledger, month_key, args.count))
        print("Income vs expense")
        for label, income, expense in zip(labels, incomes, expenses):
            print(f"  {label}  income {income:>12.2f}  expense {expense:>12.2f}")
        return 0

    if args.command == "months":
        for month_key in extract_months(store.expenses):
            print(month_key)
        return 0

    if args.command == "backup":
        if not ExportBackup(store).execute(args.path):
            print("[error] Nothing to back up yet")
            return 1
        print(f"Backup written to {args.path}")
        return 0

    if args.command == "restore":
        result = RestoreBackup(store).execute(args.path)
        if not result.ok:
            print(f"[error] Invalid backup file: {result.error}")
            return 1
        print(
            f"Backup merged: {result.incomes_added} income(s), "
            f"{result.expenses_added} expense(s) added"
        )
        if result.skipped:
            print(f"Skipped {result.skipped} unreadable backup entries")
        return 0

    if args.command == "bill":
        summary = ExportMonthBill(store).execute(args.month, args.path)
        print(f"Bill for {summary.month_key} written to {args.path}")
        return 0

    if args.command == "theme":
        preferences = PreferenceService(kv_store)
        if args.value:
            preferences.set_theme(args.value)
        print(preferences.get_theme())
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Sequence[str] | None = None) -> int:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = parse_args(argv)
    kv_store = bootstrap_key_value_store(
        args.data,
        use_sqlite=args.sqlite,
        make_backup=args.command == "restore",
    )
    try:
        store = bootstrap_ledger_store(kv_store)
        return run_command(args, store, kv_store)
    except (OSError, ValueError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"[error] {exc}")
        return 1
    finally:
        close = getattr(kv_store, "close", None)
        if close is not None:
            close()


if __name__ == "__main__":
    sys.exit(main())
