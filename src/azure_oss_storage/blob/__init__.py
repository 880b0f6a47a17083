from .errors import (
    StorageError,
    ContainerNotFoundError,
    ContainerAlreadyExistsError,
    BlobNotFoundError,
    BlobAlreadyExistsError,
    AuthenticationFailedError,
    InvalidBlobUriError,
    UnableToGenerateSasError,
)

from .client import BlobContainerClient, BlobClient
from .aio import AsyncBlobContainerClient, AsyncBlobClient
from .sas import BlobSasBuilder, BlobSasPermissions
from .types import (
    Blob,
    BlobPrefix,
    BlobProperties,
    ListBlobsResponseBody,
)
from .utils import get_account_name, get_blob_name, get_container_name

__all__ = [
    "StorageError",
    "ContainerNotFoundError",
    "ContainerAlreadyExistsError",
    "BlobNotFoundError",
    "BlobAlreadyExistsError",
    "AuthenticationFailedError",
    "InvalidBlobUriError",
    "UnableToGenerateSasError",
    "BlobContainerClient",
    "BlobClient",
    "AsyncBlobContainerClient",
    "AsyncBlobClient",
    "BlobSasBuilder",
    "BlobSasPermissions",
    "Blob",
    "BlobPrefix",
    "BlobProperties",
    "ListBlobsResponseBody",
    "get_account_name",
    "get_blob_name",
    "get_container_name",
]
