from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import httpx

from .._http import AsyncTransport, create_storage_async_client
from ..common.auth import StorageSharedKeyCredential
from ..common.middleware import StorageRequestAuth
from ._core import (
    BlobOperations,
    ContainerOperations,
    StorageRequestClient,
    generate_sas_uri,
    resolve_connection_string,
)
from .errors import (
    AuthenticationFailedError,
    BlobAlreadyExistsError,
    BlobNotFoundError,
    ContainerAlreadyExistsError,
    ContainerNotFoundError,
    InvalidBlobUriError,
    StorageError,
    UnableToGenerateSasError,
)
from .sas import BlobSasBuilder, BlobSasPermissions
from .types import Blob, BlobPrefix, BlobProperties, ListBlobsResponseBody
from .utils import get_blob_name, get_container_name, join_blob_uri


def _create_request_client(
    credential: StorageSharedKeyCredential | None,
    timeout: float | None,
    client: httpx.AsyncClient | None,
) -> StorageRequestClient:
    transport = AsyncTransport(
        create_storage_async_client(timeout, client=client),
        auth=StorageRequestAuth.for_credential(credential),
        owns_client=client is None,
    )
    return StorageRequestClient(transport=transport)


class AsyncBlobContainerClient:
    """Asynchronous client for one blob container.

    Same arguments as :class:`~azure_oss_storage.blob.client.BlobContainerClient`,
    with an ``httpx.AsyncClient`` for ``client``.
    """

    def __init__(
        self,
        uri: str,
        credential: StorageSharedKeyCredential | None = None,
        *,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.container_name = get_container_name(uri)
        self.uri = uri
        self.credential = credential
        self._request_client = _create_request_client(credential, timeout, client)
        self._ops = ContainerOperations(self._request_client, uri)

    @classmethod
    def from_connection_string(
        cls,
        connection_string: str | None,
        container_name: str,
        *,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> AsyncBlobContainerClient:
        uri, credential = resolve_connection_string(connection_string, container_name)
        return cls(uri, credential, timeout=timeout, client=client)

    def get_blob_client(self, blob_name: str) -> AsyncBlobClient:
        return AsyncBlobClient._with_request_client(
            join_blob_uri(self.uri, blob_name),
            self.credential,
            self._request_client,
        )

    async def create(self) -> None:
        await self._ops.create()

    async def create_if_not_exists(self) -> None:
        await self._ops.create_if_not_exists()

    async def delete(self) -> None:
        await self._ops.delete()

    async def delete_if_exists(self) -> None:
        await self._ops.delete_if_exists()

    async def exists(self) -> bool:
        return await self._ops.exists()

    async def list_blobs(
        self,
        *,
        prefix: str | None = None,
        delimiter: str | None = None,
        marker: str | None = None,
    ) -> ListBlobsResponseBody:
        return await self._ops.list_blobs(prefix=prefix, delimiter=delimiter, marker=marker)

    async def _iter_pages(
        self, prefix: str | None, delimiter: str | None
    ) -> AsyncIterator[ListBlobsResponseBody]:
        marker = ""
        while True:
            page = await self.list_blobs(prefix=prefix, delimiter=delimiter, marker=marker)
            yield page
            marker = page.next_marker
            if not marker:
                break

    async def get_blobs(self, prefix: str | None = None) -> AsyncIterator[Blob]:
        async for page in self._iter_pages(prefix, None):
            for blob in page.blobs:
                yield blob

    async def get_blobs_by_hierarchy(
        self, prefix: str | None = None, delimiter: str = "/"
    ) -> AsyncIterator[Blob | BlobPrefix]:
        async for page in self._iter_pages(prefix, delimiter):
            for blob in page.blobs:
                yield blob
            for blob_prefix in page.blob_prefixes:
                yield blob_prefix

    def can_generate_sas_uri(self) -> bool:
        return self.credential is not None

    def generate_sas_uri(self, builder: BlobSasBuilder) -> str:
        return generate_sas_uri(
            self.uri,
            self.credential,
            builder,
            container_name=self.container_name,
        )

    async def aclose(self) -> None:
        await self._request_client.aclose()

    async def __aenter__(self) -> AsyncBlobContainerClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()


class AsyncBlobClient:
    """Asynchronous client for a single blob."""

    def __init__(
        self,
        uri: str,
        credential: StorageSharedKeyCredential | None = None,
        *,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        get_blob_name(uri)
        self._setup(uri, credential, _create_request_client(credential, timeout, client), True)

    def _setup(
        self,
        uri: str,
        credential: StorageSharedKeyCredential | None,
        request_client: StorageRequestClient,
        owns_request_client: bool,
    ) -> None:
        self.container_name = get_container_name(uri)
        self.blob_name = get_blob_name(uri)
        self.uri = uri
        self.credential = credential
        self._request_client = request_client
        self._owns_request_client = owns_request_client
        self._ops = BlobOperations(request_client, uri)

    @classmethod
    def _with_request_client(
        cls,
        uri: str,
        credential: StorageSharedKeyCredential | None,
        request_client: StorageRequestClient,
    ) -> AsyncBlobClient:
        self = cls.__new__(cls)
        self._setup(uri, credential, request_client, False)
        return self

    @classmethod
    def from_connection_string(
        cls,
        connection_string: str | None,
        container_name: str,
        blob_name: str,
        *,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> AsyncBlobClient:
        uri, credential = resolve_connection_string(connection_string, container_name, blob_name)
        return cls(uri, credential, timeout=timeout, client=client)

    async def upload(
        self,
        content: bytes | str,
        *,
        content_type: str | None = None,
        overwrite: bool = True,
    ) -> None:
        await self._ops.upload(content, content_type=content_type, overwrite=overwrite)

    async def download_content(self) -> bytes:
        return await self._ops.download_content()

    async def get_properties(self) -> BlobProperties:
        return await self._ops.get_properties()

    async def exists(self) -> bool:
        return await self._ops.exists()

    async def delete(self) -> None:
        await self._ops.delete()

    async def delete_if_exists(self) -> None:
        await self._ops.delete_if_exists()

    def can_generate_sas_uri(self) -> bool:
        return self.credential is not None

    def generate_sas_uri(self, builder: BlobSasBuilder) -> str:
        return generate_sas_uri(
            self.uri,
            self.credential,
            builder,
            container_name=self.container_name,
            blob_name=self.blob_name,
        )

    async def aclose(self) -> None:
        if self._owns_request_client:
            await self._request_client.aclose()

    async def __aenter__(self) -> AsyncBlobClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()


__all__ = [
    # clients
    "AsyncBlobContainerClient",
    "AsyncBlobClient",
    # errors
    "StorageError",
    "ContainerNotFoundError",
    "ContainerAlreadyExistsError",
    "BlobNotFoundError",
    "BlobAlreadyExistsError",
    "AuthenticationFailedError",
    "InvalidBlobUriError",
    "UnableToGenerateSasError",
    # types
    "Blob",
    "BlobPrefix",
    "BlobProperties",
    "ListBlobsResponseBody",
    "BlobSasBuilder",
    "BlobSasPermissions",
]
