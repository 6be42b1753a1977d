import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date as dt_date
from enum import Enum
from typing import Any

from domain.categories import DEFAULT_CATEGORY
from domain.errors import LedgerShapeError
from domain.expenses import ExpenseRecord, new_expense_id
from domain.ledger import Ledger, parse_document, sort_by_date_desc
from domain.validation import as_positive_amount, is_month_key, parse_ymd
from infrastructure.repositories import LedgerRepository

logger = logging.getLogger(__name__)


class MergeStatus(str, Enum):
    MERGED = "merged"
    BAD_SHAPE = "bad_shape"


@dataclass(frozen=True)
class MergeResult:
    status: MergeStatus
    incomes_added: int = 0
    expenses_added: int = 0
    skipped: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is MergeStatus.MERGED


class LedgerStore:
    """Owns the ledger for one session and writes it through on every change.

    Invalid input never raises: mutations return ``None``/``False`` and leave
    both the ledger and the store untouched.
    """

    def __init__(
        self,
        repository: LedgerRepository,
        *,
        today: Callable[[], dt_date] = dt_date.today,
        id_factory: Callable[[], str] = new_expense_id,
    ) -> None:
        self._repository = repository
        self._today = today
        self._id_factory = id_factory
        self._ledger = repository.load()
        self._last_save_ok = True

    @property
    def ledger(self) -> Ledger:
        return self._ledger.copy()

    @property
    def expenses(self) -> tuple[ExpenseRecord, ...]:
        return tuple(self._ledger.expenses)

    @property
    def incomes(self) -> dict[str, float]:
        return dict(self._ledger.incomes)

    @property
    def last_save_ok(self) -> bool:
        return self._last_save_ok

    def get_expense(self, expense_id: str) -> ExpenseRecord | None:
        return self._ledger.find(str(expense_id))

    def _persist(self) -> bool:
        self._last_save_ok = self._repository.save(self._ledger)
        if not self._last_save_ok:
            logger.warning("Ledger change kept in memory only; persistence failed")
        return self._last_save_ok

    def _resolve_date(self, value: dt_date | str | None) -> dt_date | None:
        if value is None or (isinstance(value, str) and not value.strip()):
            return parse_ymd(self._today())
        try:
            return parse_ymd(value)
        except ValueError:
            return None

    def _fresh_id(self) -> str:
        taken = self._ledger.expense_ids()
        while True:
            candidate = str(self._id_factory())
            if candidate and candidate not in taken:
                return candidate

    def set_income(self, month_key: str, amount: Any) -> bool:
        value = as_positive_amount(amount)
        if value is None or not is_month_key(month_key):
            logger.debug("Income rejected month=%s amount=%r", month_key, amount)
            return False
        self._ledger.incomes[month_key] = value
        self._persist()
        logger.info("Income set month=%s amount=%s", month_key, value)
        return True

    def add_expense(
        self,
        title: str,
        amount: Any,
        date: dt_date | str | None = None,
        category: str | None = None,
    ) -> ExpenseRecord | None:
        clean_title = title.strip() if isinstance(title, str) else ""
        value = as_positive_amount(amount)
        expense_date = self._resolve_date(date)
        if not clean_title or value is None or expense_date is None:
            logger.debug("Expense rejected title=%r amount=%r date=%r", title, amount, date)
            return None
        record = ExpenseRecord(
            id=self._fresh_id(),
            title=clean_title,
            amount=value,
            date=expense_date,
            category=category or DEFAULT_CATEGORY,
        )
        self._ledger.expenses.insert(0, record)
        self._persist()
        logger.info(
            "Expense added id=%s date=%s amount=%s category=%s",
            record.id,
            record.date,
            record.amount,
            record.category,
        )
        return record

    def update_expense(
        self,
        expense_id: str,
        *,
        title: str | None = None,
        amount: Any = None,
        date: dt_date | str | None = None,
        category: str | None = None,
    ) -> ExpenseRecord | None:
        index = self._ledger.index_of(str(expense_id))
        if index is None:
            return None
        changes: dict[str, Any] = {}
        if title is not None:
            clean_title = title.strip() if isinstance(title, str) else ""
            if not clean_title:
                return None
            changes["title"] = clean_title
        if amount is not None:
            value = as_positive_amount(amount)
            if value is None:
                return None
            changes["amount"] = value
        if date is not None:
            expense_date = self._resolve_date(date)
            if expense_date is None:
                return None
            changes["date"] = expense_date
        if category is not None:
            changes["category"] = category
        updated = self._ledger.expenses[index].with_changes(**changes)
        self._ledger.expenses[index] = updated
        self._persist()
        logger.info("Expense updated id=%s fields=%s", updated.id, sorted(changes))
        return updated

    def delete_expense(self, expense_id: str) -> bool:
        index = self._ledger.index_of(str(expense_id))
        if index is None:
            return False
        del self._ledger.expenses[index]
        self._persist()
        logger.info("Expense deleted id=%s", expense_id)
        return True

    def merge_restore(self, payload: Any) -> MergeResult:
        """Merge a backup document into the ledger; local data always wins.

        Entries the document cannot represent are skipped and counted in
        ``MergeResult.skipped``; only a wrong top-level shape rejects it.
        """
        try:
            parsed = parse_document(payload)
        except LedgerShapeError as exc:
            logger.warning("Backup rejected: %s", exc)
            return MergeResult(status=MergeStatus.BAD_SHAPE, error=str(exc))
        for problem in parsed.skipped:
            logger.warning("Backup entry skipped: %s", problem)
        imported = parsed.ledger

        incomes_added = 0
        for month_key, amount in imported.incomes.items():
            if month_key not in self._ledger.incomes:
                self._ledger.incomes[month_key] = amount
                incomes_added += 1

        known_ids = self._ledger.expense_ids()
        merged = list(self._ledger.expenses)
        for record in imported.expenses:
            if record.id in known_ids:
                continue
            known_ids.add(record.id)
            merged.append(record)
        expenses_added = len(merged) - len(self._ledger.expenses)
        self._ledger.expenses = sort_by_date_desc(merged)

        self._persist()
        logger.info(
            "Backup merged incomes_added=%s expenses_added=%s",
            incomes_added,
            expenses_added,
        )
        return MergeResult(
            status=MergeStatus.MERGED,
            incomes_added=incomes_added,
            expenses_added=expenses_added,
            skipped=len(parsed.skipped),
        )

    def restore_from_text(self, raw: str | bytes) -> MergeResult:
        try:
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            payload = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            logger.warning("Backup is not valid JSON: %s", exc)
            return MergeResult(status=MergeStatus.BAD_SHAPE, error=f"Invalid JSON: {exc}")
        return self.merge_restore(payload)

    def export_document(self) -> dict:
        return self._ledger.to_document()
