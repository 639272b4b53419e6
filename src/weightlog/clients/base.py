"""Base protocol for remote table clients."""

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from ..models.entry import WeightEntry
from ..models.settings import UserSettings

# Remote APIs accept at most this many records per create/delete call
MAX_BATCH_SIZE = 10


@dataclass
class ConnectionTestResult:
    """Outcome of probing the remote tables."""

    success: bool
    message: str
    missing_tables: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "missing_tables": self.missing_tables,
        }


@runtime_checkable
class RemoteTableClient(Protocol):
    """Protocol for remote stores the sync coordinator can push to."""

    async def fetch_entries(self) -> list[WeightEntry]:
        """Fetch every entry stored remotely.

        Returns an empty list when the entries table does not exist.
        """
        ...

    async def create_entries(self, entries: list[WeightEntry]) -> list[WeightEntry]:
        """Create the given entries that are not yet present remotely.

        Returns:
            The entries that were actually written
        """
        ...

    async def fetch_settings(self) -> UserSettings | None:
        """Fetch the first settings record, or None if there is none."""
        ...

    async def upsert_settings(self, settings: UserSettings) -> None:
        """Update the first settings record, creating one if needed."""
        ...

    async def test_connection(self) -> ConnectionTestResult:
        """Probe both tables and report which are missing."""
        ...

    async def delete_duplicate_settings_records(self) -> int:
        """Keep one settings record and delete the rest.

        Returns:
            Number of records deleted
        """
        ...


def chunked(items: list, size: int = MAX_BATCH_SIZE) -> list[list]:
    """Split a list into consecutive chunks of at most `size` items."""
    return [items[i:i + size] for i in range(0, len(items), size)]
