"""Hybrid local/remote sync coordinator.

The local store is authoritative. Every mutation is applied locally first;
the affected dataset is then marked dirty and pushed to the remote table
service on a best-effort basis.
"""

import asyncio
import logging
from contextlib import suppress
from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path

from ..clients.airtable import AirtableClient
from ..clients.base import ConnectionTestResult, RemoteTableClient
from ..config import AppConfig, Settings
from ..db import EntryRepository, SettingsRepository, get_db_path
from ..errors import RemoteNotConfiguredError
from ..models.entry import WeightEntry
from ..models.settings import UserSettings

logger = logging.getLogger(__name__)


class SyncDataset(str, Enum):
    """Datasets that can be marked dirty."""

    ENTRIES = "entries"
    SETTINGS = "settings"


@dataclass
class SyncStatus:
    """Snapshot of the coordinator state for status indicators."""

    is_pending: bool
    is_online: bool
    has_remote: bool

    def to_dict(self) -> dict:
        return {
            "is_pending": self.is_pending,
            "is_online": self.is_online,
            "has_remote": self.has_remote,
        }


@dataclass
class RecoveryResult:
    """What a recovery pulled down from the remote."""

    entries: list[WeightEntry]
    settings: UserSettings | None


def _unique_by_id(entries: list[WeightEntry]) -> list[WeightEntry]:
    """Drop later entries that repeat an earlier id."""
    seen = set()
    unique = []
    for entry in entries:
        if entry.id not in seen:
            seen.add(entry.id)
            unique.append(entry)
    return unique


class HybridSyncCoordinator:
    """Owns the dirty-dataset queue and decides when to push.

    Works as a plain local store when no remote client is given.
    """

    def __init__(
        self,
        entries: EntryRepository,
        settings: SettingsRepository,
        remote: RemoteTableClient | None = None,
        online: bool = True,
        debounce_seconds: float = 1.0,
        sync_interval: float = 30.0,
    ):
        """Initialize the coordinator.

        Args:
            entries: Local entry repository
            settings: Local settings repository
            remote: Remote table client, or None for local-only operation
            online: Initial connectivity flag
            debounce_seconds: Delay that coalesces bursts of mutations into one push
            sync_interval: Period of the background retry push
        """
        self.entries = entries
        self.settings = settings
        self.remote = remote
        self.is_online = online
        self.debounce_seconds = debounce_seconds
        self.sync_interval = sync_interval

        self._dirty: set[SyncDataset] = set()
        self._push_lock = asyncio.Lock()
        self._debounce_handle: asyncio.TimerHandle | None = None
        self._periodic_task: asyncio.Task | None = None
        self._push_tasks: set[asyncio.Task] = set()

    @property
    def has_remote(self) -> bool:
        return self.remote is not None

    # Lifecycle

    async def start(self) -> None:
        """Start the periodic background push (only with a remote)."""
        if self.remote is not None and self._periodic_task is None:
            self._periodic_task = asyncio.create_task(self._run_periodic_sync())

    async def close(self) -> None:
        """Stop timers and wait for pushes already in flight."""
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None

        if self._periodic_task is not None:
            self._periodic_task.cancel()
            with suppress(asyncio.CancelledError):
                await self._periodic_task
            self._periodic_task = None

        await self.drain()

    async def drain(self) -> None:
        """Wait until no scheduled push task is running."""
        while self._push_tasks:
            await asyncio.gather(*self._push_tasks, return_exceptions=True)

    async def __aenter__(self) -> "HybridSyncCoordinator":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # Reads

    async def get_entries(self) -> list[WeightEntry]:
        return await self.entries.get_all()

    async def get_settings(self) -> UserSettings:
        return await self.settings.get()

    # Mutations

    async def add_entry(
        self, entry_date: date, weight: float, notes: str | None = None
    ) -> WeightEntry:
        entry = await self.entries.add(entry_date, weight, notes)
        self._queue_sync(SyncDataset.ENTRIES)
        return entry

    async def update_entry(
        self,
        entry_id: str,
        entry_date: date,
        weight: float,
        notes: str | None = None,
    ) -> WeightEntry | None:
        entry = await self.entries.update(entry_id, entry_date, weight, notes)
        if entry is not None:
            self._queue_sync(SyncDataset.ENTRIES)
        return entry

    async def delete_entry(self, entry_id: str) -> bool:
        deleted = await self.entries.delete(entry_id)
        if deleted:
            self._queue_sync(SyncDataset.ENTRIES)
        return deleted

    async def update_settings(self, settings: UserSettings) -> UserSettings:
        await self.settings.save(settings)
        self._queue_sync(SyncDataset.SETTINGS)
        return settings

    async def patch_settings(self, **changes) -> UserSettings:
        """Merge the given fields over the current settings."""
        settings = await self.settings.update(**changes)
        self._queue_sync(SyncDataset.SETTINGS)
        return settings

    # Connectivity

    def set_online(self, online: bool) -> None:
        """Record a connectivity change; coming back online triggers a push."""
        was_online = self.is_online
        self.is_online = online

        if online and not was_online:
            logger.info("Connectivity restored")
            if self.remote is not None and self._dirty:
                self._spawn_push()
        elif not online and was_online:
            logger.info("Connectivity lost; changes will be queued")

    # Push scheduling

    def _queue_sync(self, dataset: SyncDataset) -> None:
        self._dirty.add(dataset)
        if self.remote is not None and self.is_online:
            self._schedule_debounced_push()

    def _schedule_debounced_push(self) -> None:
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
        loop = asyncio.get_running_loop()
        self._debounce_handle = loop.call_later(self.debounce_seconds, self._on_debounce)

    def _on_debounce(self) -> None:
        self._debounce_handle = None
        self._spawn_push()

    def _spawn_push(self) -> None:
        task = asyncio.get_running_loop().create_task(self.process_sync_queue())
        self._push_tasks.add(task)
        task.add_done_callback(self._push_tasks.discard)

    async def _run_periodic_sync(self) -> None:
        while True:
            await asyncio.sleep(self.sync_interval)
            if self.is_online and self.remote is not None:
                await self.process_sync_queue()

    async def process_sync_queue(self, raise_errors: bool = False) -> bool:
        """Push every dirty dataset to the remote.

        The dirty set is snapshotted and cleared when the push starts. If
        any write fails, every dataset in the snapshot is marked dirty again,
        including ones that already succeeded in this pass.

        Args:
            raise_errors: Re-raise a failure instead of logging it

        Returns:
            True if a push ran and succeeded
        """
        if self.remote is None or not self.is_online or not self._dirty:
            return False

        async with self._push_lock:
            if not self.is_online or not self._dirty:
                return False

            snapshot = set(self._dirty)
            self._dirty.clear()

            try:
                if SyncDataset.ENTRIES in snapshot:
                    await self.remote.create_entries(await self.entries.get_all())
                if SyncDataset.SETTINGS in snapshot:
                    await self.remote.upsert_settings(await self.settings.get())
            except asyncio.CancelledError:
                self._dirty.update(snapshot)
                raise
            except Exception as e:  # noqa: BLE001
                self._dirty.update(snapshot)
                if raise_errors:
                    raise
                logger.error("Failed to sync to Airtable: %s", e)
                return False

        logger.info(
            "Data synced to Airtable successfully (%s)",
            ", ".join(sorted(d.value for d in snapshot)),
        )
        return True

    # Explicit remote actions

    def _require_remote(self) -> RemoteTableClient:
        if self.remote is None:
            raise RemoteNotConfiguredError()
        return self.remote

    async def force_sync(self) -> bool:
        """Mark everything dirty and push now, propagating any failure.

        Returns:
            False if the push was skipped because the coordinator is offline
        """
        self._require_remote()
        self._dirty.update({SyncDataset.ENTRIES, SyncDataset.SETTINGS})
        return await self.process_sync_queue(raise_errors=True)

    async def recover_from_remote(self) -> RecoveryResult:
        """Overwrite local data with what the remote holds.

        A non-empty remote entry list replaces the whole local collection;
        remote settings replace local settings. Nothing is written locally
        if either fetch fails.
        """
        remote = self._require_remote()

        try:
            entries, settings = await asyncio.gather(
                remote.fetch_entries(),
                remote.fetch_settings(),
            )
        except Exception:
            logger.exception("Failed to recover data from Airtable")
            raise

        if entries:
            entries = _unique_by_id(entries)
            await self.entries.save_all(entries)
        if settings is not None:
            await self.settings.save(settings)

        logger.info(
            "Recovered %d entries%s from Airtable",
            len(entries),
            " and settings" if settings is not None else "",
        )
        return RecoveryResult(entries=entries, settings=settings)

    async def test_connection(self) -> ConnectionTestResult:
        return await self._require_remote().test_connection()

    async def delete_duplicate_settings(self) -> int:
        return await self._require_remote().delete_duplicate_settings_records()

    def get_sync_status(self) -> SyncStatus:
        return SyncStatus(
            is_pending=bool(self._dirty),
            is_online=self.is_online,
            has_remote=self.has_remote,
        )


def create_coordinator(
    config: Settings = AppConfig,
    db_path: Path | None = None,
    online: bool = True,
) -> HybridSyncCoordinator:
    """Build a coordinator from configuration.

    The Airtable client is attached only when both a base id and an API
    key are configured.
    """
    db_path = db_path or get_db_path(config.DATA_DIR)

    remote = None
    if config.remote_configured:
        remote = AirtableClient(
            base_id=config.AIRTABLE_BASE_ID,
            api_key=config.AIRTABLE_API_KEY,
            table_name=config.AIRTABLE_TABLE_NAME,
            settings_table=config.AIRTABLE_SETTINGS_TABLE,
            api_url=config.AIRTABLE_API_URL,
            timeout=config.AIRTABLE_TIMEOUT,
        )

    return HybridSyncCoordinator(
        EntryRepository(db_path),
        SettingsRepository(db_path),
        remote=remote,
        online=online,
        debounce_seconds=config.SYNC_DEBOUNCE_SECONDS,
        sync_interval=config.SYNC_INTERVAL_SECONDS,
    )
