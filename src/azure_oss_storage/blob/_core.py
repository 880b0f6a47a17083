from __future__ import annotations

import dataclasses
import xml.etree.ElementTree as ET
from typing import Any
from urllib.parse import quote, unquote

import httpx

from .._http import AsyncTransport, BaseTransport, BlockingTransport
from ..common.auth import StorageSharedKeyCredential
from ..common.connection_string import get_connection_info
from ..common.sas import SasProtocol
from .errors import (
    AuthenticationFailedError,
    BlobAlreadyExistsError,
    BlobNotFoundError,
    ContainerAlreadyExistsError,
    ContainerNotFoundError,
    StorageError,
    UnableToGenerateSasError,
)
from .sas import BlobSasBuilder
from .types import Blob, BlobPrefix, BlobProperties, ListBlobsResponseBody
from .utils import (
    append_query,
    build_query,
    debug,
    is_development_uri,
    join_blob_uri,
    strip_query,
)

_ERROR_TYPES: dict[str, type[StorageError]] = {
    "ContainerNotFound": ContainerNotFoundError,
    "ContainerAlreadyExists": ContainerAlreadyExistsError,
    "BlobNotFound": BlobNotFoundError,
    "BlobAlreadyExists": BlobAlreadyExistsError,
    "AuthenticationFailed": AuthenticationFailedError,
    "AuthorizationFailure": AuthenticationFailedError,
    "AuthorizationPermissionMismatch": AuthenticationFailedError,
}


def _child_text(element: ET.Element, tag: str) -> str:
    child = element.find(tag)
    if child is None or child.text is None:
        return ""
    return child.text


def map_storage_error(
    response: httpx.Response,
    *,
    not_found: type[StorageError] = StorageError,
) -> StorageError:
    """Translate a non-2xx response into the matching :class:`StorageError`.

    The error code comes from the ``x-ms-error-code`` header (the only source
    for HEAD responses), falling back to the ``<Code>`` element of the XML
    error body. A 404 that carries no code at all is raised as ``not_found``,
    the missing-resource error of the operation that got it.
    """
    code = response.headers.get("x-ms-error-code") or None
    message = ""
    if response.content:
        try:
            root = ET.fromstring(response.content)
        except ET.ParseError:
            root = None
        if root is not None:
            code = code or _child_text(root, "Code") or None
            message = _child_text(root, "Message").strip()

    if not message:
        message = f"HTTP {response.status_code}"
        if code:
            message = f"{message} ({code})"

    error_type = _ERROR_TYPES.get(code or "")
    if error_type is None:
        if response.status_code == 403:
            error_type = AuthenticationFailedError
        elif response.status_code == 404 and code is None:
            error_type = not_found
        else:
            error_type = StorageError
    return error_type(message, code=code, status_code=response.status_code, response=response)


def _decode_name(element: ET.Element) -> str:
    name = element.find("Name")
    if name is None or name.text is None:
        return ""
    if name.get("Encoded") == "true":
        return unquote(name.text)
    return name.text


def parse_list_blobs_response(body: bytes | str) -> ListBlobsResponseBody:
    """Decode one ``EnumerationResults`` page of a List Blobs call."""
    try:
        root = ET.fromstring(body)
    except ET.ParseError as exc:
        raise StorageError("Invalid XML in list blobs response") from exc

    blobs: list[Blob] = []
    prefixes: list[BlobPrefix] = []
    entries = root.find("Blobs")
    if entries is not None:
        for entry in entries.findall("Blob"):
            properties = entry.find("Properties")
            values: dict[str, str] = {}
            if properties is not None:
                values = {child.tag: child.text or "" for child in properties}
            blobs.append(
                Blob(
                    name=_decode_name(entry),
                    properties=BlobProperties.from_response_headers(values),
                )
            )
        for entry in entries.findall("BlobPrefix"):
            prefixes.append(BlobPrefix(name=_decode_name(entry)))

    max_results = _child_text(root, "MaxResults")
    return ListBlobsResponseBody(
        blobs=blobs,
        blob_prefixes=prefixes,
        next_marker=_child_text(root, "NextMarker"),
        prefix=_child_text(root, "Prefix"),
        marker=_child_text(root, "Marker"),
        delimiter=_child_text(root, "Delimiter"),
        max_results=int(max_results) if max_results else None,
    )


def generate_sas_uri(
    uri: str,
    credential: StorageSharedKeyCredential | None,
    builder: BlobSasBuilder,
    *,
    container_name: str,
    blob_name: str = "",
) -> str:
    if credential is None:
        raise UnableToGenerateSasError()

    if is_development_uri(uri):
        builder = dataclasses.replace(builder, protocol=SasProtocol.HTTPS_AND_HTTP)

    sas = dataclasses.replace(
        builder, container_name=container_name, blob_name=blob_name
    ).build(credential)
    return append_query(uri, sas)


def resolve_connection_string(
    connection_string: str | None,
    container_name: str,
    blob_name: str | None = None,
) -> tuple[str, StorageSharedKeyCredential | None]:
    """Resolve a container (or blob) URI and credential from a connection string."""
    info = get_connection_info(connection_string)
    uri = f"{info.blob_endpoint}/{quote(container_name, safe='')}"
    if blob_name is not None:
        uri = join_blob_uri(uri, blob_name)
    if info.sas_token:
        uri = append_query(uri, info.sas_token)
    return uri, info.credential


class StorageRequestClient:
    """Sends one request against a resource URI and maps failures to storage errors."""

    _transport: BaseTransport

    def __init__(self, *, transport: BaseTransport) -> None:
        self._transport = transport
        self._closed = False

    @property
    def transport(self) -> BaseTransport:
        return self._transport

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Refuse further requests; an httpx client passed in by the caller stays open."""
        if self._closed:
            return
        self._closed = True
        if isinstance(self._transport, BlockingTransport):
            self._transport.close()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        if isinstance(self._transport, AsyncTransport):
            await self._transport.aclose()

    async def request_api(
        self,
        method: str,
        uri: str,
        *,
        params: dict[str, str | None] | None = None,
        headers: dict[str, str] | None = None,
        content: bytes | None = None,
        not_found: type[StorageError] = StorageError,
    ) -> httpx.Response:
        if self._closed:
            raise StorageError("Client is closed")

        url = strip_query(uri)
        query = build_query(uri, params or {})
        try:
            resp = await self._transport.send(
                method,
                url,
                params=query,
                headers=headers,
                content=content,
            )
        except httpx.TransportError as exc:
            debug("%s %s failed: %s", method, url, exc)
            raise StorageError(f"{method} {url} failed: {exc}") from exc

        debug("%s %s -> %d", method, url, resp.status_code)
        if 200 <= resp.status_code < 300:
            return resp
        raise map_storage_error(resp, not_found=not_found)


class ContainerOperations:
    """Container calls shared by the sync and async container clients."""

    def __init__(self, request_client: StorageRequestClient, uri: str) -> None:
        self._request_client = request_client
        self._uri = uri

    async def _request(self, method: str, **kwargs: Any) -> httpx.Response:
        return await self._request_client.request_api(
            method, self._uri, not_found=ContainerNotFoundError, **kwargs
        )

    async def create(self) -> None:
        await self._request("PUT", params={"restype": "container"})

    async def create_if_not_exists(self) -> None:
        try:
            await self.create()
        except ContainerAlreadyExistsError:
            pass

    async def delete(self) -> None:
        await self._request("DELETE", params={"restype": "container"})

    async def delete_if_exists(self) -> None:
        try:
            await self.delete()
        except ContainerNotFoundError:
            pass

    async def exists(self) -> bool:
        try:
            await self._request("HEAD", params={"restype": "container"})
        except ContainerNotFoundError:
            return False
        return True

    async def list_blobs(
        self,
        *,
        prefix: str | None = None,
        delimiter: str | None = None,
        marker: str | None = None,
    ) -> ListBlobsResponseBody:
        resp = await self._request(
            "GET",
            params={
                "restype": "container",
                "comp": "list",
                "prefix": prefix,
                "marker": marker,
                "delimiter": delimiter,
            },
        )
        return parse_list_blobs_response(resp.content)


class BlobOperations:
    """Blob calls shared by the sync and async blob clients."""

    def __init__(self, request_client: StorageRequestClient, uri: str) -> None:
        self._request_client = request_client
        self._uri = uri

    async def _request(self, method: str, **kwargs: Any) -> httpx.Response:
        return await self._request_client.request_api(
            method, self._uri, not_found=BlobNotFoundError, **kwargs
        )

    async def upload(
        self,
        content: bytes | str,
        *,
        content_type: str | None = None,
        overwrite: bool = True,
    ) -> None:
        data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
        headers: dict[str, str] = {"x-ms-blob-type": "BlockBlob"}
        headers["content-type"] = content_type or (
            "text/plain; charset=utf-8" if isinstance(content, str) else "application/octet-stream"
        )
        if not overwrite:
            headers["if-none-match"] = "*"
        await self._request("PUT", headers=headers, content=data)

    async def download_content(self) -> bytes:
        resp = await self._request("GET")
        return resp.content

    async def get_properties(self) -> BlobProperties:
        resp = await self._request("HEAD")
        return BlobProperties.from_response_headers(resp.headers)

    async def exists(self) -> bool:
        try:
            await self._request("HEAD")
        except (BlobNotFoundError, ContainerNotFoundError):
            return False
        return True

    async def delete(self) -> None:
        await self._request("DELETE")

    async def delete_if_exists(self) -> None:
        try:
            await self.delete()
        except (BlobNotFoundError, ContainerNotFoundError):
            pass


__all__ = [
    "BlobOperations",
    "ContainerOperations",
    "StorageRequestClient",
    "generate_sas_uri",
    "map_storage_error",
    "parse_list_blobs_response",
    "resolve_connection_string",
]
