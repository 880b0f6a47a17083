"""Shared fixtures for all tests."""

import base64
import time
import uuid
from collections.abc import Generator

import pytest

from azure_oss_storage.common import StorageSharedKeyCredential


@pytest.fixture
def mock_env_clear(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clear all storage-related environment variables for testing.

    This ensures tests don't accidentally use real credentials from the environment.
    """
    env_vars_to_clear = [
        "AZURE_STORAGE_CONNECTION_STRING",
        "AZURE_STORAGE_ACCOUNT",
        "AZURE_STORAGE_KEY",
        "DEBUG",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def mock_account_name() -> str:
    """Mock storage account name for testing."""
    return "acct"


@pytest.fixture
def mock_account_key() -> str:
    """Mock base64-encoded account key for testing."""
    return base64.b64encode(b"test_account_key_123456789").decode("ascii")


@pytest.fixture
def mock_credential(mock_account_name: str, mock_account_key: str) -> StorageSharedKeyCredential:
    return StorageSharedKeyCredential(mock_account_name, mock_account_key)


@pytest.fixture
def mock_connection_string(mock_account_name: str, mock_account_key: str) -> str:
    return (
        "DefaultEndpointsProtocol=https;"
        f"AccountName={mock_account_name};"
        f"AccountKey={mock_account_key};"
        "EndpointSuffix=core.windows.net"
    )


@pytest.fixture
def unique_test_name() -> str:
    """Generate a unique container name with timestamp (lowercase, 3-63 chars)."""
    timestamp = int(time.time())
    unique_id = uuid.uuid4().hex[:8]
    return f"aoss-test-{timestamp}-{unique_id}"
