"""Data models for weightlog."""

from .entry import WeightEntry, validate_weight_entry
from .settings import DateFormat, UserSettings, WeightUnit

__all__ = [
    "DateFormat",
    "UserSettings",
    "validate_weight_entry",
    "WeightEntry",
    "WeightUnit",
]
