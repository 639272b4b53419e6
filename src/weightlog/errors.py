"""Exception hierarchy for weightlog."""

from typing import Any


class WeightLogError(Exception):
    """Base class for weightlog errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(WeightLogError):
    """Input rejected at the entry/settings boundary."""


class ImportValidationError(WeightLogError):
    """Backup payload is malformed; nothing was written."""


class StorageWriteError(WeightLogError):
    """A durable write to the local store failed."""


class RemoteError(WeightLogError):
    """Base class for failures talking to the remote table service."""

    def __init__(
        self,
        message: str,
        table: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.table = table
        self.status_code = status_code


class RemoteSchemaMissingError(RemoteError):
    """The remote table does not exist."""

    def __init__(self, table: str):
        super().__init__(
            f"Airtable table '{table}' not found. "
            "Please create the table in your Airtable base first.",
            table=table,
            status_code=404,
        )


class RemoteSchemaMismatchError(RemoteError):
    """The remote table is missing one of the expected field names."""

    def __init__(self, table: str, status_code: int | None = None):
        super().__init__(
            f"Field name mismatch in {table} table. Please ensure all field "
            "names are created exactly as specified in the setup guide.",
            table=table,
            status_code=status_code,
        )


class RemoteChoiceMisconfiguredError(RemoteError):
    """A single-select field lacks the options the app writes."""

    def __init__(self, table: str, status_code: int | None = None):
        super().__init__(
            f"Single select field options missing in {table} table. Please add "
            'the required options to the "Weight Unit" and "Date Format" fields.',
            table=table,
            status_code=status_code,
        )


class RemoteTransportError(RemoteError):
    """Any other network or HTTP failure."""


class RemoteNotConfiguredError(RemoteError):
    """An explicit remote action was requested with no remote configured."""

    def __init__(self):
        super().__init__(
            "Airtable sync is not configured. Set AIRTABLE_BASE_ID and AIRTABLE_API_KEY."
        )
