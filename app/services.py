import logging

from config import THEME_KEY
from storage.base import KeyValueStore

logger = logging.getLogger(__name__)

THEMES = ("light", "dark")
DEFAULT_THEME = "light"


class PreferenceService:
    """UI preference kept next to the ledger under its own key.

    Only the theme is stored. Unknown stored values read back as the default.
    """

    def __init__(self, store: KeyValueStore, key: str = THEME_KEY) -> None:
        self._store = store
        self._key = key

    def get_theme(self) -> str:
        raw = self._store.get(self._key)
        if raw is None:
            return DEFAULT_THEME
        try:
            theme = raw.decode("utf-8").strip().lower()
        except UnicodeDecodeError:
            logger.warning("Ignoring unreadable theme preference")
            return DEFAULT_THEME
        return theme if theme in THEMES else DEFAULT_THEME

    def set_theme(self, theme: str) -> bool:
        normalized = (theme or "").strip().lower()
        if normalized not in THEMES:
            raise ValueError(f"Unsupported theme: {theme}. Must be one of {list(THEMES)}")
        return bool(self._store.set(self._key, normalized.encode("utf-8")))

    def toggle_theme(self) -> str:
        theme = "dark" if self.get_theme() == "light" else "light"
        self.set_theme(theme)
        return theme
