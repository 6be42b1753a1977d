import logging
from datetime import date as dt_date
from pathlib import Path

from domain.aggregates import Dashboard, MonthSummary, dashboard, month_summary
from domain.validation import is_month_key
from utils.backup_utils import export_backup_to_json, read_backup_file
from utils.excel_utils import bill_to_xlsx
from utils.pdf_utils import bill_to_pdf

from .ledger_store import LedgerStore, MergeResult, MergeStatus

logger = logging.getLogger(__name__)


class ExportBackup:
    def __init__(self, store: LedgerStore):
        self._store = store

    def execute(self, filepath: str) -> bool:
        """Write the ledger to ``filepath``. Nothing is written for an empty ledger."""
        if not self._store.ledger.has_data:
            logger.info("Backup skipped: ledger is empty")
            return False
        export_backup_to_json(filepath, self._store.export_document())
        return True


class RestoreBackup:
    def __init__(self, store: LedgerStore):
        self._store = store

    def execute(self, filepath: str) -> MergeResult:
        try:
            raw = read_backup_file(filepath)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to read backup file %s: %s", filepath, exc)
            return MergeResult(status=MergeStatus.BAD_SHAPE, error=str(exc))
        return self._store.restore_from_text(raw)


class ExportMonthBill:
    SUPPORTED_SUFFIXES = (".pdf", ".xlsx")

    def __init__(self, store: LedgerStore):
        self._store = store

    def execute(self, month_key: str, filepath: str) -> MonthSummary:
        if not is_month_key(month_key):
            raise ValueError(f"Invalid month key: {month_key!r}. Use YYYY-MM")
        suffix = Path(filepath).suffix.lower()
        if suffix not in self.SUPPORTED_SUFFIXES:
            raise ValueError(
                f"Unsupported bill format: {suffix or '<none>'}. "
                f"Must be one of {list(self.SUPPORTED_SUFFIXES)}"
            )
        summary = month_summary(self._store.ledger, month_key)
        if suffix == ".pdf":
            bill_to_pdf(summary, filepath)
        else:
            bill_to_xlsx(summary, filepath)
        logger.info(
            "Bill exported month=%s expenses=%s file=%s",
            month_key,
            len(summary.expenses),
            filepath,
        )
        return summary


class BuildDashboard:
    def __init__(self, store: LedgerStore):
        self._store = store

    def execute(self, reference_date: dt_date | str) -> Dashboard:
        return dashboard(self._store.ledger, reference_date)
