"""Tests for the JSON API."""

import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from weightlog import __version__
from weightlog.clients.airtable import AirtableClient
from weightlog.db import EntryRepository, SettingsRepository, init_db
from weightlog.services import HybridSyncCoordinator
from weightlog.web import create_app


@pytest.fixture
def web_db(tmp_path):
    db_path = tmp_path / "web.db"
    asyncio.run(init_db(db_path))
    return db_path


def _client(db_path, remote=None):
    coordinator = HybridSyncCoordinator(
        EntryRepository(db_path),
        SettingsRepository(db_path),
        remote=remote,
        debounce_seconds=60,
        sync_interval=60,
    )
    return TestClient(create_app(coordinator))


@pytest.fixture
def client(web_db):
    with _client(web_db) as test_client:
        yield test_client


@pytest.fixture
def synced_client(web_db, airtable):
    remote = AirtableClient(
        base_id="appTestBase",
        api_key="keyTest123",
        api_url="https://api.airtable.test/v0",
        transport=airtable.transport,
    )
    with _client(web_db, remote) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": __version__}


class TestEntriesApi:
    """Tests for /entries and /stats."""

    def test_add_and_list(self, client):
        first = client.post("/entries", json={"date": "2024-01-01", "weight": 200, "notes": "start"})
        second = client.post("/entries", json={"date": "2024-01-15", "weight": 195})

        assert first.status_code == 201
        assert first.json()["notes"] == "start"
        assert "notes" not in second.json()

        entries = client.get("/entries").json()["entries"]
        assert [e["date"] for e in entries] == ["2024-01-15", "2024-01-01"]

        ascending = client.get("/entries", params={"order": "asc"}).json()["entries"]
        assert [e["date"] for e in ascending] == ["2024-01-01", "2024-01-15"]

    def test_date_range_filter(self, client):
        client.post("/entries", json={"date": "2024-01-01", "weight": 200})
        client.post("/entries", json={"date": "2024-01-15", "weight": 195})

        entries = client.get("/entries", params={"start_date": "2024-01-10"}).json()["entries"]
        assert [e["weight"] for e in entries] == [195]

    def test_invalid_entry_rejected(self, client):
        response = client.post("/entries", json={"date": "2999-01-01", "weight": 1500})

        assert response.status_code == 400
        body = response.json()
        assert body["error_type"] == "ValidationError"
        assert body["errors"] == [
            "Weight seems unrealistic (over 1000)",
            "Date cannot be in the future",
        ]
        assert client.get("/entries").json()["entries"] == []

    def test_update_and_delete(self, client):
        entry = client.post("/entries", json={"date": "2024-01-01", "weight": 200}).json()

        updated = client.put(
            f"/entries/{entry['id']}", json={"date": "2024-01-02", "weight": 199}
        )
        assert updated.status_code == 200
        assert updated.json()["id"] == entry["id"]
        assert updated.json()["createdAt"] == entry["createdAt"]

        assert client.delete(f"/entries/{entry['id']}").json() == {"deleted": True}
        assert client.delete(f"/entries/{entry['id']}").status_code == 404

    def test_update_missing(self, client):
        response = client.put("/entries/nope", json={"date": "2024-01-02", "weight": 199})
        assert response.status_code == 404

    def test_stats(self, client):
        client.put("/settings", json={"name": "Sam", "goalWeight": 190})
        client.post("/entries", json={"date": "2024-01-01", "weight": 200})
        client.post("/entries", json={"date": "2024-01-15", "weight": 195})

        stats = client.get("/stats").json()

        assert stats["current_weight"] == 195
        assert stats["progress_percentage"] == 50.0
        assert stats["weekly_averages"][0] == {"week_start": "2023-12-31", "weight": 200.0}


class TestSettingsApi:
    """Tests for /settings."""

    def test_defaults(self, client):
        assert client.get("/settings").json() == {
            "name": "",
            "weightUnit": "lbs",
            "dateFormat": "MM/dd/yyyy",
        }

    def test_save(self, client):
        response = client.put(
            "/settings", json={"name": "Sam", "heightCm": 180, "weightUnit": "kg"}
        )

        assert response.status_code == 200
        saved = client.get("/settings").json()
        assert saved["name"] == "Sam"
        assert saved["heightCm"] == 180
        assert saved["weightUnit"] == "kg"
        assert "goalWeight" not in saved

    def test_invalid_unit(self, client):
        response = client.put("/settings", json={"weightUnit": "stone"})
        assert response.status_code == 422


class TestSyncApi:
    """Tests for /sync routes."""

    def test_status_local_only(self, client):
        client.post("/entries", json={"date": "2024-01-01", "weight": 200})

        assert client.get("/sync/status").json() == {
            "is_pending": True,
            "is_online": True,
            "has_remote": False,
        }

    def test_push_without_remote(self, client):
        response = client.post("/sync/push")

        assert response.status_code == 409
        assert response.json()["error_type"] == "RemoteNotConfiguredError"

    def test_push(self, synced_client, airtable):
        synced_client.post("/entries", json={"date": "2024-01-01", "weight": 200})

        response = synced_client.post("/sync/push")

        assert response.status_code == 200
        assert response.json()["pushed"] is True
        assert response.json()["is_pending"] is False
        assert len(airtable.tables["WeightEntries"]) == 1
        assert len(airtable.tables["Settings"]) == 1

    def test_push_remote_failure(self, synced_client, airtable):
        synced_client.post("/entries", json={"date": "2024-01-01", "weight": 200})
        airtable.fail_next("GET", "WeightEntries", httpx.Response(500, text="down"))

        response = synced_client.post("/sync/push")

        assert response.status_code == 502
        assert response.json()["error_type"] == "RemoteTransportError"

    def test_recover(self, synced_client, airtable):
        airtable.add_record("WeightEntries", {"Entry ID": "r1", "Date": "2024-01-01", "Weight": 200})

        response = synced_client.post("/sync/recover")

        assert response.json() == {"entries": 1, "settings": None}
        assert [e["id"] for e in synced_client.get("/entries").json()["entries"]] == ["r1"]

    def test_connection(self, synced_client):
        assert synced_client.post("/sync/test").json() == {
            "success": True,
            "message": "Connection successful! All tables found.",
            "missing_tables": [],
        }

    def test_connectivity(self, synced_client, airtable):
        assert synced_client.post("/sync/connectivity", json={"online": False}).json()[
            "is_online"
        ] is False

        synced_client.post("/entries", json={"date": "2024-01-01", "weight": 200})
        assert synced_client.get("/sync/status").json()["is_pending"] is True
        assert airtable.requests == []


class TestBackupApi:
    """Tests for /backup routes."""

    def test_export_import(self, client):
        client.post("/entries", json={"date": "2024-01-01", "weight": 200})
        exported = client.get("/backup/export").json()

        exported["entries"][0]["weight"] = 150
        response = client.post("/backup/import", json=exported)

        assert response.json() == {"imported": 1}
        assert client.get("/entries").json()["entries"][0]["weight"] == 150

    def test_import_invalid(self, client):
        client.post("/entries", json={"date": "2024-01-01", "weight": 200})

        response = client.post("/backup/import", json={"entries": "nope", "settings": {}})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid entries data"
        assert len(client.get("/entries").json()["entries"]) == 1
