"""Backup export and all-or-nothing restore."""

import json
import logging

from ..db import EntryRepository, SettingsRepository
from ..errors import ImportValidationError, StorageWriteError
from ..models.entry import WeightEntry, utc_now
from ..models.settings import UserSettings

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0.0"


class BackupService:
    """Exports the local store and restores it from a backup payload."""

    def __init__(self, entries: EntryRepository, settings: SettingsRepository):
        self.entries = entries
        self.settings = settings

    async def export_data(self) -> dict:
        """Snapshot both records as one self-contained payload."""
        entries = await self.entries.get_all()
        settings = await self.settings.get()
        return {
            "entries": [entry.to_dict() for entry in entries],
            "settings": settings.to_dict(),
            "exportDate": utc_now().isoformat(),
            "version": EXPORT_VERSION,
        }

    async def export_json(self) -> str:
        return json.dumps(await self.export_data(), indent=2, ensure_ascii=False)

    def _validate(self, payload) -> tuple[list[WeightEntry], UserSettings]:
        """Parse a payload without touching storage.

        Raises:
            ImportValidationError: If the payload shape or any value is invalid
        """
        if not isinstance(payload, dict):
            raise ImportValidationError("Invalid backup: expected a JSON object")

        raw_entries = payload.get("entries")
        if not isinstance(raw_entries, list):
            raise ImportValidationError("Invalid entries data")

        raw_settings = payload.get("settings")
        if not isinstance(raw_settings, dict):
            raise ImportValidationError("Invalid settings data")

        entries = []
        for index, item in enumerate(raw_entries):
            if not isinstance(item, dict):
                raise ImportValidationError(f"Invalid entry at position {index}")
            try:
                entries.append(WeightEntry.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                raise ImportValidationError(
                    f"Invalid entry at position {index}: {e}"
                ) from e

        ids = [entry.id for entry in entries]
        if len(ids) != len(set(ids)):
            raise ImportValidationError("Invalid entries data: duplicate entry ids")

        try:
            settings = UserSettings.from_dict(raw_settings)
        except ValueError as e:
            raise ImportValidationError(f"Invalid settings data: {e}") from e

        return entries, settings

    async def import_data(self, payload: dict) -> int:
        """Replace local entries and settings with a backup.

        The current state is backed up first and restored verbatim if any
        write fails, after which the original error is re-raised.

        Returns:
            Number of entries imported
        """
        entries, settings = self._validate(payload)

        backup = await self.export_data()
        backup_entries = [WeightEntry.from_dict(item) for item in backup["entries"]]
        backup_settings = UserSettings.from_dict(backup["settings"])

        try:
            await self.entries.save_all(entries)
            await self.settings.save(settings)
        except Exception:
            logger.error("Import failed; restoring previous data")
            await self._restore(backup_entries, backup_settings)
            raise

        logger.info("Imported %d entries from backup", len(entries))
        return len(entries)

    async def _restore(self, entries: list[WeightEntry], settings: UserSettings) -> None:
        """Write back both records; a failure on one does not skip the other."""
        try:
            await self.entries.save_all(entries)
        except StorageWriteError:
            logger.exception("Could not restore entries after failed import")
        try:
            await self.settings.save(settings)
        except StorageWriteError:
            logger.exception("Could not restore settings after failed import")

    async def import_json(self, text: str) -> int:
        try:
            payload = json.loads(text)
        except ValueError as e:
            raise ImportValidationError(f"Backup is not valid JSON: {e}") from e
        return await self.import_data(payload)

    async def clear_all(self) -> None:
        """Wipe both local records."""
        await self.entries.clear()
        await self.settings.clear()
