"""HTTP client for the Airtable REST API."""

import logging
from urllib.parse import quote

import httpx

from ...errors import (
    RemoteChoiceMisconfiguredError,
    RemoteError,
    RemoteSchemaMismatchError,
    RemoteSchemaMissingError,
    RemoteTransportError,
)
from ...models.entry import WeightEntry
from ...models.settings import UserSettings
from ..base import ConnectionTestResult, chunked
from .fields import (
    entry_to_fields,
    record_entry_id,
    record_to_entry,
    record_to_settings,
    settings_to_fields,
)

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.airtable.com/v0"


class AirtableClient:
    """Stateless client for the entries and settings tables of one base.

    Every call opens its own connection; the only state is configuration.
    """

    def __init__(
        self,
        base_id: str,
        api_key: str,
        table_name: str = "WeightEntries",
        settings_table: str = "Settings",
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_id = base_id
        self.api_key = api_key
        self.table_name = table_name
        self.settings_table = settings_table
        self.base_url = f"{api_url.rstrip('/')}/{base_id}"
        self.timeout = timeout
        self._transport = transport

    def _get_headers(self) -> dict:
        """Get headers with the bearer credential."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        table: str,
        record_id: str | None = None,
        params: dict | list | None = None,
        json: dict | None = None,
    ) -> dict:
        """Send one request and return the decoded JSON body.

        Raises:
            RemoteError: A typed failure, see `_raise_for_response`
        """
        url = f"{self.base_url}/{quote(table, safe='')}"
        if record_id:
            url += f"/{record_id}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    headers=self._get_headers(),
                )
        except httpx.HTTPError as e:
            raise RemoteTransportError(
                f"Airtable request failed: {e}", table=table
            ) from e

        if not response.is_success:
            self._raise_for_response(table, response, record_id)

        if not response.content:
            return {}
        return response.json()

    def _raise_for_response(
        self, table: str, response: httpx.Response, record_id: str | None = None
    ) -> None:
        """Translate a non-success response into a typed error."""
        status = response.status_code
        text = response.text

        if status == 404 and record_id is None:
            raise RemoteSchemaMissingError(table)
        if "UNKNOWN_FIELD_NAME" in text:
            raise RemoteSchemaMismatchError(table, status_code=status)
        if "INVALID_MULTIPLE_CHOICE_OPTIONS" in text:
            raise RemoteChoiceMisconfiguredError(table, status_code=status)
        raise RemoteTransportError(
            f"Airtable API error: {status} {response.reason_phrase} - {text}",
            table=table,
            status_code=status,
        )

    async def _list_records(self, table: str, max_records: int | None = None) -> list[dict]:
        """List records, following pagination unless a record cap is given."""
        params: dict = {}
        if max_records is not None:
            params["maxRecords"] = max_records

        records: list[dict] = []
        while True:
            data = await self._request("GET", table, params=params)
            records.extend(data.get("records", []))
            offset = data.get("offset")
            if not offset or max_records is not None:
                return records
            params = {**params, "offset": offset}

    async def fetch_entries(self) -> list[WeightEntry]:
        """Fetch all weight entries; a missing table yields an empty list."""
        try:
            records = await self._list_records(self.table_name)
        except RemoteSchemaMissingError:
            logger.warning(
                "Airtable table '%s' not found. Returning no entries.", self.table_name
            )
            return []
        except RemoteError as e:
            logger.error("Failed to fetch weight entries from Airtable: %s", e)
            raise

        entries = []
        for record in records:
            try:
                entries.append(record_to_entry(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed Airtable record %s: %s", record.get("id"), e)
        return entries

    async def _fetch_entry_ids(self) -> set[str]:
        """Ids of every remote entry record, including ones that fail to parse."""
        try:
            records = await self._list_records(self.table_name)
        except RemoteSchemaMissingError:
            return set()
        return {record_entry_id(record) for record in records}

    async def create_entries(self, entries: list[WeightEntry]) -> list[WeightEntry]:
        """Create entries not already present remotely, in batches of 10.

        Batches are sent one after another; a failing batch stops the rest.

        Returns:
            The entries that were written
        """
        if not entries:
            return []

        existing_ids = await self._fetch_entry_ids()
        to_create = [entry for entry in entries if entry.id not in existing_ids]

        for batch in chunked(to_create):
            await self._request(
                "POST",
                self.table_name,
                json={"records": [{"fields": entry_to_fields(entry)} for entry in batch]},
            )

        if to_create:
            logger.info("Created %d weight entries in Airtable", len(to_create))
        return to_create

    async def fetch_settings(self) -> UserSettings | None:
        """Fetch the first settings record; None if absent or the table is missing."""
        try:
            records = await self._list_records(self.settings_table, max_records=1)
        except RemoteSchemaMissingError:
            logger.warning(
                "Airtable table '%s' not found. Returning no settings.", self.settings_table
            )
            return None
        except RemoteError as e:
            logger.error("Failed to fetch settings from Airtable: %s", e)
            raise

        if not records:
            return None

        try:
            return record_to_settings(records[0])
        except ValueError as e:
            logger.warning("Ignoring invalid settings record in Airtable: %s", e)
            return None

    async def upsert_settings(self, settings: UserSettings) -> None:
        """Update the first settings record in place, or create one.

        Two writers racing here can each create a record; see
        `delete_duplicate_settings_records`.
        """
        records = await self._list_records(self.settings_table, max_records=1)
        fields = settings_to_fields(settings)

        if records:
            await self._request(
                "PATCH",
                self.settings_table,
                record_id=records[0]["id"],
                json={"fields": fields},
            )
            logger.info("Settings updated in Airtable")
        else:
            await self._request(
                "POST",
                self.settings_table,
                json={"records": [{"fields": fields}]},
            )
            logger.info("Settings created in Airtable")

    async def test_connection(self) -> ConnectionTestResult:
        """Probe both tables, collecting every missing one."""
        missing_tables = []
        for table in (self.table_name, self.settings_table):
            try:
                await self._request("GET", table, params={"maxRecords": 1})
            except RemoteSchemaMissingError:
                missing_tables.append(table)

        if missing_tables:
            return ConnectionTestResult(
                success=False,
                message=(
                    f"Missing tables: {', '.join(missing_tables)}. "
                    "Please create them in your Airtable base."
                ),
                missing_tables=missing_tables,
            )

        return ConnectionTestResult(
            success=True, message="Connection successful! All tables found."
        )

    async def delete_duplicate_settings_records(self) -> int:
        """Keep the last settings record returned and delete the others."""
        records = await self._list_records(self.settings_table)
        if len(records) <= 1:
            return 0

        record_ids = [record["id"] for record in records[:-1]]
        for batch in chunked(record_ids):
            await self._request(
                "DELETE",
                self.settings_table,
                params=[("records[]", record_id) for record_id in batch],
            )

        logger.info("Deleted %d duplicate settings records from Airtable", len(record_ids))
        return len(record_ids)

