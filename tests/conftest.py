"""Pytest configuration and fixtures."""

import json
import tempfile
from datetime import date, datetime, timezone
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

from weightlog.clients.airtable import AirtableClient
from weightlog.db import EntryRepository, SettingsRepository, init_db
from weightlog.models.entry import WeightEntry
from weightlog.services import HybridSyncCoordinator

BASE_ID = "appTestBase"
API_URL = "https://api.airtable.test/v0"


class AirtableStub:
    """In-memory Airtable base served through httpx.MockTransport."""

    def __init__(self, tables=("WeightEntries", "Settings"), page_size: int | None = None):
        self.tables: dict[str, list[dict]] = {name: [] for name in tables}
        self.requests: list[httpx.Request] = []
        self.page_size = page_size
        self._failures: dict[tuple[str, str], list[httpx.Response]] = {}
        self._next_id = 1

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def fail_next(self, method: str, table: str, response: httpx.Response, times: int = 1):
        """Answer the next `times` matching requests with `response`."""
        self._failures.setdefault((method, table), []).extend([response] * times)

    def add_record(self, table: str, fields: dict) -> dict:
        record = {"id": f"rec{self._next_id:04d}", "fields": dict(fields)}
        self._next_id += 1
        self.tables[table].append(record)
        return record

    def calls(self, method: str, table: str | None = None) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and (table is None or r.url.path.split("/")[3] == table)
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = request.url.path.split("/")
        table = parts[3]
        record_id = parts[4] if len(parts) > 4 else None

        pending = self._failures.get((request.method, table))
        if pending:
            return pending.pop(0)

        if table not in self.tables:
            return httpx.Response(404, json={"error": {"type": "TABLE_NOT_FOUND"}})
        records = self.tables[table]

        if request.method == "GET":
            max_records = request.url.params.get("maxRecords")
            if max_records is not None:
                return httpx.Response(200, json={"records": records[:int(max_records)]})
            if self.page_size is None:
                return httpx.Response(200, json={"records": records})
            offset = int(request.url.params.get("offset", 0))
            page = {"records": records[offset:offset + self.page_size]}
            if offset + self.page_size < len(records):
                page["offset"] = str(offset + self.page_size)
            return httpx.Response(200, json=page)

        if request.method == "POST":
            body = json.loads(request.content)
            created = [self.add_record(table, r["fields"]) for r in body["records"]]
            return httpx.Response(200, json={"records": created})

        if request.method == "PATCH":
            for record in records:
                if record["id"] == record_id:
                    record["fields"].update(json.loads(request.content)["fields"])
                    return httpx.Response(200, json=record)
            return httpx.Response(404, json={"error": "NOT_FOUND"})

        if request.method == "DELETE":
            ids = request.url.params.get_list("records[]")
            self.tables[table] = [r for r in records if r["id"] not in ids]
            return httpx.Response(
                200, json={"records": [{"id": i, "deleted": True} for i in ids]}
            )

        return httpx.Response(405)


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest_asyncio.fixture
async def db_path(temp_db_path):
    """Temporary database with the schema applied."""
    await init_db(temp_db_path)
    return temp_db_path


@pytest.fixture
def entry_repo(db_path):
    return EntryRepository(db_path)


@pytest.fixture
def settings_repo(db_path):
    return SettingsRepository(db_path)


@pytest.fixture
def airtable():
    return AirtableStub()


@pytest.fixture
def airtable_client(airtable):
    return AirtableClient(
        base_id=BASE_ID,
        api_key="keyTest123",
        api_url=API_URL,
        transport=airtable.transport,
    )


@pytest_asyncio.fixture
async def coordinator(entry_repo, settings_repo, airtable_client):
    """Coordinator with a stubbed Airtable remote and fast timers."""
    coordinator = HybridSyncCoordinator(
        entry_repo,
        settings_repo,
        remote=airtable_client,
        debounce_seconds=0.01,
        sync_interval=60,
    )
    await coordinator.start()
    yield coordinator
    await coordinator.close()


def make_entry(entry_id: str, weight: float, day: date, notes: str | None = None) -> WeightEntry:
    stamp = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)
    return WeightEntry(
        id=entry_id,
        date=day,
        weight=weight,
        notes=notes,
        created_at=stamp,
        updated_at=stamp,
    )


@pytest.fixture
def sample_entries():
    """Two entries: A (200 on 2024-01-01) and B (195 on 2024-01-15)."""
    return [
        make_entry("1", 200, date(2024, 1, 1), "start"),
        make_entry("2", 195, date(2024, 1, 15)),
    ]


@pytest.fixture
def entry_factory():
    return make_entry


@pytest.fixture
def airtable_factory():
    """Build a separate stubbed base and a client pointed at it."""

    def factory(tables=("WeightEntries", "Settings"), page_size: int | None = None):
        stub = AirtableStub(tables=tables, page_size=page_size)
        client = AirtableClient(
            base_id=BASE_ID,
            api_key="keyTest123",
            api_url=API_URL,
            transport=stub.transport,
        )
        return stub, client

    return factory
