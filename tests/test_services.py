import pytest

from app.services import PreferenceService
from config import LEDGER_KEY, THEME_KEY
from storage.memory_storage import MemoryStore


def test_theme_defaults_to_light():
    assert PreferenceService(MemoryStore()).get_theme() == "light"


def test_set_and_toggle_theme():
    store = MemoryStore()
    preferences = PreferenceService(store)

    assert preferences.set_theme("Dark") is True
    assert store.get(THEME_KEY) == b"dark"
    assert preferences.toggle_theme() == "light"
    assert preferences.get_theme() == "light"


def test_unknown_theme_is_rejected():
    with pytest.raises(ValueError):
        PreferenceService(MemoryStore()).set_theme("sepia")


def test_garbage_stored_theme_reads_as_default():
    store = MemoryStore({THEME_KEY: b"\xff"})
    assert PreferenceService(store).get_theme() == "light"
    store.set(THEME_KEY, b"neon")
    assert PreferenceService(store).get_theme() == "light"


def test_theme_does_not_touch_ledger_key():
    store = MemoryStore()
    PreferenceService(store).set_theme("dark")
    assert store.get(LEDGER_KEY) is None
