from __future__ import annotations

import logging
import shutil
from datetime import datetime
from pathlib import Path

from config import STORE_BACKUPS_KEPT

logger = logging.getLogger(__name__)


def _store_backups(backup_dir: Path, source: Path) -> list[Path]:
    # Stamps sort lexicographically, oldest first.
    return sorted(backup_dir.glob(f"{source.stem}_backup_*{source.suffix}"))


def prune_store_backups(source: Path, keep: int = STORE_BACKUPS_KEPT) -> list[Path]:
    """Delete all but the ``keep`` newest copies of ``source``; returns what was removed."""
    backup_dir = source.parent / "backups"
    if keep < 1 or not backup_dir.is_dir():
        return []
    stale = _store_backups(backup_dir, source)[:-keep]
    for path in stale:
        path.unlink(missing_ok=True)
        logger.info("[backup] Removed old store backup %s", path)
    return stale


def create_backup(data_path: str, keep: int = STORE_BACKUPS_KEPT) -> str | None:
    """Snapshot the on-disk store before it is rewritten by a restore.

    Copies land in ``backups/`` next to the store; only the ``keep`` newest
    are retained. Returns None when there is no store file yet.
    """
    source = Path(data_path)
    if not source.is_file():
        return None
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    backup_dir = source.parent / "backups"
    backup_dir.mkdir(exist_ok=True)
    backup_path = backup_dir / f"{source.stem}_backup_{stamp}{source.suffix}"
    shutil.copy2(source, backup_path)
    logger.info("[backup] Store backup created: %s", backup_path)
    prune_store_backups(source, keep)
    return str(backup_path)
