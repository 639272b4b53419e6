"""Remote table clients."""

from .airtable import AirtableClient
from .base import MAX_BATCH_SIZE, ConnectionTestResult, RemoteTableClient

__all__ = [
    "AirtableClient",
    "ConnectionTestResult",
    "MAX_BATCH_SIZE",
    "RemoteTableClient",
]
