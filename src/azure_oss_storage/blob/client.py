from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import httpx

from .._http import BlockingTransport, create_storage_client, iter_coroutine
from ..common.auth import StorageSharedKeyCredential
from ..common.middleware import StorageRequestAuth
from ._core import (
    BlobOperations,
    ContainerOperations,
    StorageRequestClient,
    generate_sas_uri,
    resolve_connection_string,
)
from .sas import BlobSasBuilder
from .types import Blob, BlobPrefix, BlobProperties, ListBlobsResponseBody
from .utils import get_blob_name, get_container_name, join_blob_uri


def _create_request_client(
    credential: StorageSharedKeyCredential | None,
    timeout: float | None,
    client: httpx.Client | None,
) -> StorageRequestClient:
    transport = BlockingTransport(
        create_storage_client(timeout, client=client),
        auth=StorageRequestAuth.for_credential(credential),
        owns_client=client is None,
    )
    return StorageRequestClient(transport=transport)


class BlobContainerClient:
    """Synchronous client for one blob container.

    Args:
        uri: Container URI, e.g. ``https://account.blob.core.windows.net/photos``.
            A query string on the URI (such as a SAS) is sent with every request.
        credential: Shared-key credential used to sign requests and SAS URIs.
        timeout: Request timeout in seconds.
        client: Optional httpx.Client to send requests through. It is not
            modified, and closing this client leaves it open.
    """

    def __init__(
        self,
        uri: str,
        credential: StorageSharedKeyCredential | None = None,
        *,
        timeout: float | None = None,
        client: httpx.Client | None = None,
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
        client: httpx.Client | None = None,
    ) -> BlobContainerClient:
        """Build a client from a connection string, or ``AZURE_STORAGE_CONNECTION_STRING``."""
        uri, credential = resolve_connection_string(connection_string, container_name)
        return cls(uri, credential, timeout=timeout, client=client)

    def get_blob_client(self, blob_name: str) -> BlobClient:
        """Return a client for ``blob_name`` sharing this client's connection."""
        return BlobClient._with_request_client(
            join_blob_uri(self.uri, blob_name),
            self.credential,
            self._request_client,
        )

    def create(self) -> None:
        iter_coroutine(self._ops.create())

    def create_if_not_exists(self) -> None:
        iter_coroutine(self._ops.create_if_not_exists())

    def delete(self) -> None:
        iter_coroutine(self._ops.delete())

    def delete_if_exists(self) -> None:
        iter_coroutine(self._ops.delete_if_exists())

    def exists(self) -> bool:
        return iter_coroutine(self._ops.exists())

    def list_blobs(
        self,
        *,
        prefix: str | None = None,
        delimiter: str | None = None,
        marker: str | None = None,
    ) -> ListBlobsResponseBody:
        """Fetch a single page of the blob listing."""
        return iter_coroutine(
            self._ops.list_blobs(prefix=prefix, delimiter=delimiter, marker=marker)
        )

    def _iter_pages(
        self, prefix: str | None, delimiter: str | None
    ) -> Iterator[ListBlobsResponseBody]:
        marker = ""
        while True:
            page = self.list_blobs(prefix=prefix, delimiter=delimiter, marker=marker)
            yield page
            marker = page.next_marker
            if not marker:
                break

    def get_blobs(self, prefix: str | None = None) -> Iterator[Blob]:
        """Iterate over every blob in the container, following continuation markers."""
        for page in self._iter_pages(prefix, None):
            yield from page.blobs

    def get_blobs_by_hierarchy(
        self, prefix: str | None = None, delimiter: str = "/"
    ) -> Iterator[Blob | BlobPrefix]:
        """Iterate over blobs and virtual directories one level below ``prefix``.

        Within each page, blobs come first, then prefixes.
        """
        for page in self._iter_pages(prefix, delimiter):
            yield from page.blobs
            yield from page.blob_prefixes

    def can_generate_sas_uri(self) -> bool:
        return self.credential is not None

    def generate_sas_uri(self, builder: BlobSasBuilder) -> str:
        return generate_sas_uri(
            self.uri,
            self.credential,
            builder,
            container_name=self.container_name,
        )

    def close(self) -> None:
        self._request_client.close()

    def __enter__(self) -> BlobContainerClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class BlobClient:
    """Synchronous client for a single blob.

    Usually obtained from :meth:`BlobContainerClient.get_blob_client`; a blob
    client created that way shares the container client's connection and its
    ``close()`` is a no-op.
    """

    def __init__(
        self,
        uri: str,
        credential: StorageSharedKeyCredential | None = None,
        *,
        timeout: float | None = None,
        client: httpx.Client | None = None,
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
    ) -> BlobClient:
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
        client: httpx.Client | None = None,
    ) -> BlobClient:
        uri, credential = resolve_connection_string(connection_string, container_name, blob_name)
        return cls(uri, credential, timeout=timeout, client=client)

    def upload(
        self,
        content: bytes | str,
        *,
        content_type: str | None = None,
        overwrite: bool = True,
    ) -> None:
        iter_coroutine(
            self._ops.upload(content, content_type=content_type, overwrite=overwrite)
        )

    def download_content(self) -> bytes:
        return iter_coroutine(self._ops.download_content())

    def get_properties(self) -> BlobProperties:
        return iter_coroutine(self._ops.get_properties())

    def exists(self) -> bool:
        return iter_coroutine(self._ops.exists())

    def delete(self) -> None:
        iter_coroutine(self._ops.delete())

    def delete_if_exists(self) -> None:
        iter_coroutine(self._ops.delete_if_exists())

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

    def close(self) -> None:
        if self._owns_request_client:
            self._request_client.close()

    def __enter__(self) -> BlobClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


__all__ = ["BlobContainerClient", "BlobClient"]
