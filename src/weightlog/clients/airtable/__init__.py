"""Airtable remote table client."""

from .client import AirtableClient
from .fields import ENTRY_FIELDS, SETTINGS_FIELDS, SETUP_INSTRUCTIONS

__all__ = ["AirtableClient", "ENTRY_FIELDS", "SETTINGS_FIELDS", "SETUP_INSTRUCTIONS"]
