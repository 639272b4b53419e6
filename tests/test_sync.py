"""Tests for the hybrid sync coordinator."""

import asyncio
import json
from datetime import date
from types import SimpleNamespace

import httpx
import pytest

from weightlog.errors import RemoteNotConfiguredError, RemoteTransportError
from weightlog.models.settings import UserSettings
from weightlog.services import HybridSyncCoordinator, create_coordinator
from weightlog.services.sync import SyncDataset


async def settle(coordinator, delay=0.05):
    """Let the debounce timer fire and wait for the push it starts."""
    await asyncio.sleep(delay)
    await coordinator.drain()


def posted_entry_ids(airtable):
    return [
        [r["fields"]["Entry ID"] for r in json.loads(request.content)["records"]]
        for request in airtable.calls("POST", "WeightEntries")
    ]


class TestLocalFirst:
    """Mutations hit the local store regardless of the remote."""

    @pytest.mark.asyncio
    async def test_works_without_remote(self, entry_repo, settings_repo):
        async with HybridSyncCoordinator(entry_repo, settings_repo) as coordinator:
            entry = await coordinator.add_entry(date(2024, 1, 1), 200)
            await coordinator.patch_settings(name="Sam")

            assert await coordinator.get_entries() == [entry]
            assert (await coordinator.get_settings()).name == "Sam"

            status = coordinator.get_sync_status()
            assert status.has_remote is False
            assert status.is_pending is True
            assert await coordinator.process_sync_queue() is False

    @pytest.mark.asyncio
    async def test_remote_actions_require_remote(self, entry_repo, settings_repo):
        coordinator = HybridSyncCoordinator(entry_repo, settings_repo)

        with pytest.raises(RemoteNotConfiguredError):
            await coordinator.force_sync()
        with pytest.raises(RemoteNotConfiguredError):
            await coordinator.recover_from_remote()
        with pytest.raises(RemoteNotConfiguredError):
            await coordinator.test_connection()

    @pytest.mark.asyncio
    async def test_remote_failure_does_not_fail_mutation(self, coordinator, airtable):
        airtable.fail_next("GET", "WeightEntries", httpx.Response(500, text="down"))

        entry = await coordinator.add_entry(date(2024, 1, 1), 200)
        await settle(coordinator)

        assert await coordinator.get_entries() == [entry]
        assert coordinator.get_sync_status().is_pending is True

    @pytest.mark.asyncio
    async def test_missing_entry_is_not_queued(self, coordinator):
        assert await coordinator.update_entry("nope", date(2024, 1, 1), 200) is None
        assert await coordinator.delete_entry("nope") is False
        assert coordinator.get_sync_status().is_pending is False


class TestDebouncedPush:
    """Pushes triggered by local mutations."""

    @pytest.mark.asyncio
    async def test_add_entry_pushes_entry_id(self, coordinator, airtable):
        entry = await coordinator.add_entry(date(2024, 1, 1), 200)
        await settle(coordinator)

        assert posted_entry_ids(airtable) == [[entry.id]]
        assert coordinator.get_sync_status().is_pending is False

    @pytest.mark.asyncio
    async def test_burst_coalesces_into_one_push(self, entry_repo, settings_repo, airtable_client, airtable):
        coordinator = HybridSyncCoordinator(
            entry_repo, settings_repo, remote=airtable_client, debounce_seconds=0.3
        )
        async with coordinator:
            for weight in (200, 199, 198):
                await coordinator.add_entry(date(2024, 1, 1), weight)
            assert airtable.requests == []

            await settle(coordinator, delay=0.5)

        [batch] = posted_entry_ids(airtable)
        assert len(batch) == 3
        assert len(airtable.calls("POST", "Settings")) == 1
        assert airtable.calls("PATCH") == []
        [record] = airtable.tables["Settings"]
        assert record["fields"]["Name"] == "Sam"

    @pytest.mark.asyncio
    async def test_settings_change_pushes_settings(self, coordinator, airtable):
        await coordinator.update_settings(UserSettings(name="Sam", goal_weight=170))
        await settle(coordinator)

        [record] = airtable.tables["Settings"]
        assert record["fields"]["Name"] == "Sam"
        assert record["fields"]["Goal Weight"] == 170
        assert airtable.calls("POST", "WeightEntries") == []

    @pytest.mark.asyncio
    async def test_offline_changes_pushed_once_on_reconnect(self, coordinator, airtable):
        coordinator.set_online(False)
        for weight in (200, 199, 198):
            await coordinator.add_entry(date(2024, 1, 1), weight)
        await coordinator.update_settings(UserSettings(name="Sam", goal_weight=170))
        await asyncio.sleep(0.05)

        assert airtable.requests == []
        assert coordinator.get_sync_status().is_pending is True
        assert coordinator.get_sync_status().is_online is False

        coordinator.set_online(True)
        await coordinator.drain()

        [batch] = posted_entry_ids(airtable)
        assert len(batch) == 3
        assert len(airtable.calls("POST", "Settings")) == 1
        assert airtable.calls("PATCH") == []
        [record] = airtable.tables["Settings"]
        assert record["fields"]["Name"] == "Sam"
        assert coordinator.get_sync_status().is_pending is False

    @pytest.mark.asyncio
    async def test_reconnect_with_nothing_pending_does_not_push(self, coordinator, airtable):
        coordinator.set_online(False)
        coordinator.set_online(True)
        await coordinator.drain()

        assert airtable.requests == []

    @pytest.mark.asyncio
    async def test_periodic_push_retries(self, entry_repo, settings_repo, airtable_client, airtable):
        coordinator = HybridSyncCoordinator(
            entry_repo,
            settings_repo,
            remote=airtable_client,
            debounce_seconds=10,
            sync_interval=0.05,
        )
        async with coordinator:
            await coordinator.add_entry(date(2024, 1, 1), 200)
            await asyncio.sleep(0.3)

            assert len(posted_entry_ids(airtable)) == 1
            assert coordinator.get_sync_status().is_pending is False


class TestProcessSyncQueue:
    """Direct pushes of the dirty set."""

    @pytest.fixture
    def manual(self, entry_repo, settings_repo, airtable_client):
        """Coordinator whose timers never fire during a test."""
        return HybridSyncCoordinator(
            entry_repo,
            settings_repo,
            remote=airtable_client,
            debounce_seconds=60,
            sync_interval=60,
        )

    @pytest.mark.asyncio
    async def test_failure_requeues_every_dataset(self, manual, airtable):
        async with manual:
            await manual.add_entry(date(2024, 1, 1), 200)
            await manual.patch_settings(name="Sam")
            airtable.fail_next("GET", "Settings", httpx.Response(500, text="down"))

            assert await manual.process_sync_queue() is False

            # entries were written before settings failed, and are still re-queued
            assert len(airtable.calls("POST", "WeightEntries")) == 1
            assert manual._dirty == {SyncDataset.ENTRIES, SyncDataset.SETTINGS}

            assert await manual.process_sync_queue() is True
            assert manual.get_sync_status().is_pending is False
            assert len(airtable.tables["WeightEntries"]) == 1

    @pytest.mark.asyncio
    async def test_raise_errors(self, manual, airtable):
        async with manual:
            await manual.add_entry(date(2024, 1, 1), 200)
            airtable.fail_next("GET", "WeightEntries", httpx.Response(500, text="down"))

            with pytest.raises(RemoteTransportError):
                await manual.process_sync_queue(raise_errors=True)
            assert manual.get_sync_status().is_pending is True

    @pytest.mark.asyncio
    async def test_offline_skips_push(self, manual, airtable):
        async with manual:
            await manual.add_entry(date(2024, 1, 1), 200)
            manual.is_online = False

            assert await manual.process_sync_queue() is False
            assert airtable.requests == []
            assert manual.get_sync_status().is_pending is True

    @pytest.mark.asyncio
    async def test_nothing_dirty(self, manual, airtable):
        assert await manual.process_sync_queue() is False
        assert airtable.requests == []


class TestForceSync:
    """Tests for force_sync."""

    @pytest.mark.asyncio
    async def test_creates_only_missing_entries(
        self, coordinator, entry_repo, airtable, sample_entries
    ):
        entry_a, entry_b = sample_entries
        await entry_repo.save_all(sample_entries)
        airtable.add_record("WeightEntries", {
            "Entry ID": entry_a.id,
            "Date": "2024-01-01",
            "Weight": 200,
        })

        assert await coordinator.force_sync() is True

        assert posted_entry_ids(airtable) == [[entry_b.id]]
        assert len(airtable.tables["Settings"]) == 1
        assert coordinator.get_sync_status().is_pending is False

    @pytest.mark.asyncio
    async def test_offline_returns_false(self, coordinator, airtable):
        coordinator.set_online(False)

        assert await coordinator.force_sync() is False
        assert airtable.requests == []
        assert coordinator.get_sync_status().is_pending is True

    @pytest.mark.asyncio
    async def test_failure_propagates(self, coordinator, airtable, sample_entries, entry_repo):
        await entry_repo.save_all(sample_entries)
        airtable.fail_next("POST", "WeightEntries", httpx.Response(500, text="down"))

        with pytest.raises(RemoteTransportError):
            await coordinator.force_sync()
        assert coordinator.get_sync_status().is_pending is True


class TestRecovery:
    """Tests for recover_from_remote."""

    @pytest.mark.asyncio
    async def test_remote_replaces_local(
        self, coordinator, entry_repo, settings_repo, airtable, entry_factory
    ):
        local_only = entry_factory("local", 210, date(2023, 12, 1))
        await entry_repo.save_all([local_only])
        await settings_repo.save(UserSettings(name="Local"))
        airtable.add_record("WeightEntries", {"Entry ID": "1", "Date": "2024-01-01", "Weight": 200})
        airtable.add_record("WeightEntries", {"Entry ID": "2", "Date": "2024-01-15", "Weight": 195})
        airtable.add_record("Settings", {"Name": "Remote", "Weight Unit": "kg"})

        result = await coordinator.recover_from_remote()

        entries = await entry_repo.get_all()
        assert [e.id for e in entries] == ["1", "2"]
        assert [e.id for e in result.entries] == ["1", "2"]
        settings = await settings_repo.get()
        assert settings.name == "Remote"
        assert settings.weight_unit.value == "kg"
        assert coordinator.get_sync_status().is_pending is False

    @pytest.mark.asyncio
    async def test_empty_remote_keeps_local(
        self, coordinator, entry_repo, settings_repo, sample_entries
    ):
        await entry_repo.save_all(sample_entries)
        await settings_repo.save(UserSettings(name="Local"))

        result = await coordinator.recover_from_remote()

        assert result.entries == []
        assert result.settings is None
        assert await entry_repo.get_all() == sample_entries
        assert (await settings_repo.get()).name == "Local"

    @pytest.mark.asyncio
    async def test_missing_table_marks_nothing_dirty(
        self, entry_repo, settings_repo, airtable_factory, sample_entries
    ):
        _, client = airtable_factory(tables=("Settings",))
        await entry_repo.save_all(sample_entries)
        coordinator = HybridSyncCoordinator(entry_repo, settings_repo, remote=client)

        result = await coordinator.recover_from_remote()

        assert result.entries == []
        assert await entry_repo.get_all() == sample_entries
        assert coordinator.get_sync_status().is_pending is False

    @pytest.mark.asyncio
    async def test_fetch_failure_writes_nothing(
        self, coordinator, entry_repo, airtable, sample_entries
    ):
        await entry_repo.save_all(sample_entries)
        airtable.add_record("WeightEntries", {"Entry ID": "9", "Date": "2024-02-01", "Weight": 190})
        airtable.fail_next("GET", "Settings", httpx.Response(500, text="down"))

        with pytest.raises(RemoteTransportError):
            await coordinator.recover_from_remote()
        assert await entry_repo.get_all() == sample_entries

    @pytest.mark.asyncio
    async def test_duplicate_remote_ids_collapse(self, coordinator, entry_repo, airtable):
        airtable.add_record("WeightEntries", {"Entry ID": "1", "Date": "2024-01-01", "Weight": 200})
        airtable.add_record("WeightEntries", {"Entry ID": "1", "Date": "2024-01-01", "Weight": 200})

        await coordinator.recover_from_remote()

        assert [e.id for e in await entry_repo.get_all()] == ["1"]


class TestRemoteMaintenance:
    """Connection test and duplicate cleanup through the coordinator."""

    @pytest.mark.asyncio
    async def test_connection(self, coordinator):
        result = await coordinator.test_connection()
        assert result.success is True

    @pytest.mark.asyncio
    async def test_delete_duplicate_settings(self, coordinator, airtable):
        airtable.add_record("Settings", {"Name": "a"})
        airtable.add_record("Settings", {"Name": "b"})

        assert await coordinator.delete_duplicate_settings() == 1
        assert len(airtable.tables["Settings"]) == 1


class TestCreateCoordinator:
    """Tests for building a coordinator from configuration."""

    def _config(self, tmp_path, base_id="", api_key=""):
        return SimpleNamespace(
            DATA_DIR=tmp_path,
            AIRTABLE_BASE_ID=base_id,
            AIRTABLE_API_KEY=api_key,
            AIRTABLE_TABLE_NAME="Weights",
            AIRTABLE_SETTINGS_TABLE="Prefs",
            AIRTABLE_API_URL="https://api.airtable.test/v0",
            AIRTABLE_TIMEOUT=5.0,
            SYNC_DEBOUNCE_SECONDS=2.0,
            SYNC_INTERVAL_SECONDS=45.0,
            remote_configured=bool(base_id and api_key),
        )

    def test_local_only_without_credentials(self, tmp_path):
        coordinator = create_coordinator(self._config(tmp_path))

        assert coordinator.remote is None
        assert coordinator.entries.db_path == tmp_path / "weightlog.db"
        assert coordinator.debounce_seconds == 2.0
        assert coordinator.sync_interval == 45.0

    def test_remote_attached_with_credentials(self, tmp_path):
        coordinator = create_coordinator(self._config(tmp_path, "appX", "keyY"))

        assert coordinator.remote is not None
        assert coordinator.remote.table_name == "Weights"
        assert coordinator.remote.settings_table == "Prefs"
        assert coordinator.remote.base_url == "https://api.airtable.test/v0/appX"
