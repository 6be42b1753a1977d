import json
import logging
from abc import ABC, abstractmethod

from config import LEDGER_KEY
from domain.ledger import Ledger, ParsedDocument, parse_document
from storage.base import KeyValueStore

logger = logging.getLogger(__name__)


class LedgerRepository(ABC):
    @abstractmethod
    def load(self) -> Ledger:
        """Load the stored ledger. Returns an empty ledger if absent or unreadable."""
        pass

    @abstractmethod
    def save(self, ledger: Ledger) -> bool:
        """Persist the full ledger. Returns False if the write failed."""
        pass


class KeyValueLedgerRepository(LedgerRepository):
    """Stores the whole ledger as one JSON document under a fixed key."""

    def __init__(self, store: KeyValueStore, key: str = LEDGER_KEY) -> None:
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    @staticmethod
    def encode(ledger: Ledger) -> bytes:
        return json.dumps(ledger.to_document(), ensure_ascii=False).encode("utf-8")

    @staticmethod
    def decode(raw: bytes | str) -> ParsedDocument:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return parse_document(json.loads(raw))

    def load(self) -> Ledger:
        try:
            raw = self._store.get(self._key)
        except Exception:
            logger.exception("Failed to read ledger document %s, starting empty", self._key)
            return Ledger()
        if raw is None:
            return Ledger()
        try:
            parsed = self.decode(raw)
        except (ValueError, RecursionError) as exc:
            # ValueError covers undecodable bytes, bad JSON, oversized integers and shape errors.
            logger.warning("Discarding corrupt ledger document %s: %s", self._key, exc)
            return Ledger()
        for problem in parsed.skipped:
            logger.warning("Skipping unreadable entry in %s: %s", self._key, problem)
        ledger = parsed.ledger
        logger.info(
            "Ledger loaded key=%s incomes=%s expenses=%s",
            self._key,
            len(ledger.incomes),
            len(ledger.expenses),
        )
        return ledger

    def save(self, ledger: Ledger) -> bool:
        payload = self.encode(ledger)
        try:
            saved = bool(self._store.set(self._key, payload))
        except Exception:
            logger.exception("Failed to write ledger document %s", self._key)
            return False
        if not saved:
            logger.warning("Key-value store rejected ledger document %s", self._key)
        return saved
