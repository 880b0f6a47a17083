"""Blob storage client for Azure-compatible object stores."""

from .common import SasProtocol, StorageSharedKeyCredential
from .common.connection_string import InvalidConnectionStringError
from .blob import (
    AsyncBlobClient,
    AsyncBlobContainerClient,
    BlobClient,
    BlobContainerClient,
    BlobSasBuilder,
    BlobSasPermissions,
    StorageError,
)

__all__ = [
    "StorageSharedKeyCredential",
    "SasProtocol",
    "InvalidConnectionStringError",
    "BlobContainerClient",
    "BlobClient",
    "AsyncBlobContainerClient",
    "AsyncBlobClient",
    "BlobSasBuilder",
    "BlobSasPermissions",
    "StorageError",
]
