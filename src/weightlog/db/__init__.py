"""Local persistence layer for weightlog."""

from .engine import ENTRIES_KEY, SETTINGS_KEY, get_db_path, init_db
from .repositories import EntryRepository, SettingsRepository

__all__ = [
    "ENTRIES_KEY",
    "EntryRepository",
    "get_db_path",
    "init_db",
    "SETTINGS_KEY",
    "SettingsRepository",
]
