import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent
DATA_DIR = Path(os.environ.get("EXPENSO_DATA_DIR") or PROJECT_ROOT)

USE_SQLITE = os.environ.get("EXPENSO_USE_SQLITE", "").strip().lower() in {"1", "true", "yes"}
SQLITE_PATH = str(DATA_DIR / "expenso.db")
JSON_PATH = str(DATA_DIR / "expenso.json")

LEDGER_KEY = "personal-expense-app"
THEME_KEY = "expenso-theme"
BACKUP_FILENAME = "expense-backup.json"
STORE_BACKUPS_KEPT = int(os.environ.get("EXPENSO_STORE_BACKUPS_KEPT", "5"))

DEFAULT_TREND_MONTHS = 6
WEEKS_PER_MONTH = 4
WEEKLY_WARNING_RATIO = 0.8

LOG_LEVEL = os.environ.get("EXPENSO_LOG_LEVEL", "WARNING").upper()
