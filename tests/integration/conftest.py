"""Fixtures for integration tests using respx mocking."""

import pytest


@pytest.fixture
def mock_blob_headers() -> dict:
    """Mock response headers for a blob HEAD request."""
    return {
        "Last-Modified": "Mon, 15 Jan 2024 10:30:00 GMT",
        "Content-Length": "13",
        "Content-Type": "text/plain",
        "Content-MD5": "ZajifYh5KDgxtmS9i38K1A==",
        "x-ms-blob-type": "BlockBlob",
    }
