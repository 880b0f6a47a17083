"""Fixtures for live storage tests.

These tests require a real endpoint set via environment variables:
- AZURE_STORAGE_CONNECTION_STRING: account connection string, or
  ``UseDevelopmentStorage=true`` for a local Azurite emulator
"""

import os
from collections.abc import Generator

import pytest

from azure_oss_storage import BlobContainerClient


@pytest.fixture
def connection_string() -> str:
    value = os.getenv("AZURE_STORAGE_CONNECTION_STRING")
    if not value:
        pytest.skip("Requires AZURE_STORAGE_CONNECTION_STRING environment variable")
    return value


@pytest.fixture
def live_container(
    connection_string: str, unique_test_name: str
) -> Generator[BlobContainerClient, None, None]:
    """A freshly created container that is deleted after the test."""
    client = BlobContainerClient.from_connection_string(connection_string, unique_test_name)
    client.create()
    try:
        yield client
    finally:
        try:
            client.delete_if_exists()
        except Exception as e:
            print(f"Warning: failed to clean up container {unique_test_name}: {e}")
        client.close()
