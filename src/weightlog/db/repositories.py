"""Data access layer for weightlog.

Both records live as JSON documents in a single key-value table. Every
mutation rewrites the whole document.
"""

import asyncio
import json
import logging
from datetime import date
from pathlib import Path
from typing import Any

import aiosqlite

from ..errors import StorageWriteError
from ..models.entry import WeightEntry, utc_now
from ..models.settings import UserSettings
from .engine import ENTRIES_KEY, SETTINGS_KEY, get_db_path

logger = logging.getLogger(__name__)


class KeyValueRepository:
    """Base repository reading and writing JSON documents by key."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()
        self._lock = asyncio.Lock()

    async def _read(self, key: str) -> Any | None:
        """Load a JSON document; unreadable data is logged and treated as absent."""
        try:
            async with aiosqlite.connect(self.db_path) as db:
                cursor = await db.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            logger.error("Error reading %s from local store: %s", key, e)
            return None

        if row is None:
            return None

        try:
            return json.loads(row[0])
        except ValueError as e:
            logger.error("Corrupt data under %s in local store: %s", key, e)
            return None

    async def _write(self, key: str, value: Any) -> None:
        """Persist a JSON document.

        Raises:
            StorageWriteError: If the write did not reach the database
        """
        try:
            async with aiosqlite.connect(self.db_path) as db:
                await db.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, json.dumps(value)),
                )
                await db.commit()
        except aiosqlite.Error as e:
            logger.error("Error saving %s to local store: %s", key, e)
            raise StorageWriteError(f"Failed to save {key}") from e

    async def _remove(self, key: str) -> None:
        try:
            async with aiosqlite.connect(self.db_path) as db:
                await db.execute("DELETE FROM kv_store WHERE key = ?", (key,))
                await db.commit()
        except aiosqlite.Error as e:
            raise StorageWriteError(f"Failed to clear {key}") from e


class EntryRepository(KeyValueRepository):
    """Repository for weight entries, kept in insertion order."""

    async def get_all(self) -> list[WeightEntry]:
        """Get all entries. Never raises; corrupt storage reads as empty."""
        data = await self._read(ENTRIES_KEY)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.error("Stored entries are not a list; treating as empty")
            return []

        try:
            return [WeightEntry.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Malformed entry in local store: %s", e)
            return []

    async def get(self, entry_id: str) -> WeightEntry | None:
        """Get an entry by ID."""
        for entry in await self.get_all():
            if entry.id == entry_id:
                return entry
        return None

    async def add(
        self, entry_date: date, weight: float, notes: str | None = None
    ) -> WeightEntry:
        """Create a new entry with a fresh id and timestamps."""
        async with self._lock:
            entries = await self.get_all()
            existing_ids = {e.id for e in entries}

            now = utc_now()
            entry = WeightEntry(
                date=entry_date,
                weight=weight,
                notes=notes,
                created_at=now,
                updated_at=now,
            )
            while entry.id in existing_ids:
                entry = WeightEntry(
                    date=entry_date,
                    weight=weight,
                    notes=notes,
                    created_at=now,
                    updated_at=now,
                )

            entries.append(entry)
            await self._save(entries)
            return entry

    async def update(
        self,
        entry_id: str,
        entry_date: date,
        weight: float,
        notes: str | None = None,
    ) -> WeightEntry | None:
        """Update an existing entry in place. Returns None if it does not exist."""
        async with self._lock:
            entries = await self.get_all()
            for index, entry in enumerate(entries):
                if entry.id == entry_id:
                    break
            else:
                return None

            updated = WeightEntry(
                id=entry.id,
                date=entry_date,
                weight=weight,
                notes=notes,
                created_at=entry.created_at,
                updated_at=utc_now(),
            )
            entries[index] = updated
            await self._save(entries)
            return updated

    async def delete(self, entry_id: str) -> bool:
        """Delete an entry. Returns False if it does not exist."""
        async with self._lock:
            entries = await self.get_all()
            remaining = [e for e in entries if e.id != entry_id]
            if len(remaining) == len(entries):
                return False

            await self._save(remaining)
            return True

    async def save_all(self, entries: list[WeightEntry]) -> None:
        """Overwrite the whole collection."""
        async with self._lock:
            await self._save(entries)

    async def clear(self) -> None:
        """Remove every entry."""
        async with self._lock:
            await self._remove(ENTRIES_KEY)

    async def _save(self, entries: list[WeightEntry]) -> None:
        await self._write(ENTRIES_KEY, [e.to_dict() for e in entries])


class SettingsRepository(KeyValueRepository):
    """Repository for the singleton settings record."""

    async def get(self) -> UserSettings:
        """Get settings with defaults merged under the stored record."""
        data = await self._read(SETTINGS_KEY)
        if not isinstance(data, dict):
            return UserSettings()

        try:
            return UserSettings.from_dict(data)
        except ValueError as e:
            logger.error("Invalid settings in local store: %s", e)
            return UserSettings()

    async def has_record(self) -> bool:
        """Whether a settings record has ever been saved."""
        return isinstance(await self._read(SETTINGS_KEY), dict)

    async def save(self, settings: UserSettings) -> None:
        """Replace the stored settings."""
        async with self._lock:
            await self._write(SETTINGS_KEY, settings.to_dict())

    async def update(self, **changes) -> UserSettings:
        """Merge changes over the current settings and save."""
        async with self._lock:
            updated = (await self.get()).merge(**changes)
            await self._write(SETTINGS_KEY, updated.to_dict())
            return updated

    async def clear(self) -> None:
        """Remove the stored settings record."""
        async with self._lock:
            await self._remove(SETTINGS_KEY)
