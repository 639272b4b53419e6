"""Pytest configuration for integration tests.

These run against the Airtable base named by AIRTABLE_BASE_ID and
AIRTABLE_API_KEY and are skipped when either is unset.
"""

import pytest

from weightlog.clients.airtable import AirtableClient
from weightlog.config import AppConfig


# Mark all tests in this directory as integration tests
def pytest_collection_modifyitems(items):
    """Add integration marker to all tests in this directory."""
    for item in items:
        if "integration_tests" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def live_client():
    if not AppConfig.remote_configured:
        pytest.skip("AIRTABLE_BASE_ID and AIRTABLE_API_KEY are not set")
    return AirtableClient(
        base_id=AppConfig.AIRTABLE_BASE_ID,
        api_key=AppConfig.AIRTABLE_API_KEY,
        table_name=AppConfig.AIRTABLE_TABLE_NAME,
        settings_table=AppConfig.AIRTABLE_SETTINGS_TABLE,
        api_url=AppConfig.AIRTABLE_API_URL,
        timeout=AppConfig.AIRTABLE_TIMEOUT,
    )
