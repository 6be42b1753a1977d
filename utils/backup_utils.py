import json
import logging
import os

from config import BACKUP_FILENAME

logger = logging.getLogger(__name__)


def default_backup_path(directory: str = ".") -> str:
    return os.path.join(directory, BACKUP_FILENAME)


def export_backup_to_json(filepath: str, document: dict) -> None:
    """Write a ledger document as a human-readable backup file."""
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filepath, "w", encoding="utf-8") as fp:
        json.dump(document, fp, ensure_ascii=False, indent=2)
    logger.info(
        "JSON backup exported: file=%s incomes=%s expenses=%s",
        filepath,
        len(document.get("incomes", {})),
        len(document.get("expenses", [])),
    )


def read_backup_file(filepath: str) -> str:
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"JSON file not found: {filepath}")
    with open(filepath, encoding="utf-8") as fp:
        return fp.read()
