from __future__ import annotations

import base64
import hashlib
import hmac
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from azure_oss_storage import (
    AsyncBlobClient,
    AsyncBlobContainerClient,
    BlobClient,
    BlobContainerClient,
    StorageSharedKeyCredential,
)
from azure_oss_storage._http import DEFAULT_TIMEOUT
from azure_oss_storage.blob import StorageError
from azure_oss_storage.common.auth import build_string_to_sign

CONTAINER_URI = "https://acct.blob.core.windows.net/photos"
CREDENTIAL = StorageSharedKeyCredential("acct", "a2V5")


class TestSyncClientLifecycle:
    def test_close_is_idempotent_and_blocks_use_after_close(self) -> None:
        mock_http = MagicMock(spec=httpx.Client)

        with patch("azure_oss_storage.blob.client.create_storage_client", return_value=mock_http):
            client = BlobContainerClient(CONTAINER_URI, CREDENTIAL)
            client.close()
            client.close()

            with pytest.raises(StorageError, match="Client is closed"):
                client.exists()

        mock_http.close.assert_called_once()
        mock_http.request.assert_not_called()

    def test_derived_blob_client_shares_container_connection(self) -> None:
        mock_http = MagicMock(spec=httpx.Client)

        with patch(
            "azure_oss_storage.blob.client.create_storage_client", return_value=mock_http
        ) as factory:
            container = BlobContainerClient(CONTAINER_URI, CREDENTIAL)
            blob = container.get_blob_client("a.txt")
            blob.close()
            mock_http.close.assert_not_called()

            container.close()
            with pytest.raises(StorageError, match="Client is closed"):
                blob.download_content()

        assert factory.call_count == 1
        mock_http.close.assert_called_once()

    def test_standalone_blob_client_closes_its_connection(self) -> None:
        mock_http = MagicMock(spec=httpx.Client)

        with patch("azure_oss_storage.blob.client.create_storage_client", return_value=mock_http):
            with BlobClient(f"{CONTAINER_URI}/a.txt", CREDENTIAL):
                pass

        mock_http.close.assert_called_once()

    def test_default_timeout(self) -> None:
        with BlobContainerClient(CONTAINER_URI) as client:
            http_client = client._request_client.transport.client
            assert http_client.timeout == httpx.Timeout(DEFAULT_TIMEOUT)

    def test_explicit_timeout(self) -> None:
        with BlobContainerClient(CONTAINER_URI, timeout=5.0) as client:
            assert client._request_client.transport.client.timeout == httpx.Timeout(5.0)

    def test_user_client_hooks_run_after_storage_hooks(self) -> None:
        seen: dict[str, str | None] = {}

        def user_hook(request: httpx.Request) -> None:
            seen["x-ms-date"] = request.headers.get("x-ms-date")
            seen["authorization"] = request.headers.get("authorization")

        http_client = httpx.Client(
            transport=httpx.MockTransport(lambda request: httpx.Response(200)),
            event_hooks={"request": [user_hook]},
        )

        with BlobContainerClient(CONTAINER_URI, CREDENTIAL, client=http_client) as client:
            assert client.exists()

        assert http_client.event_hooks["request"] == [user_hook]
        assert seen["x-ms-date"]
        assert seen["authorization"].startswith("SharedKey acct:")

    def test_transport_errors_are_wrapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        http_client = httpx.Client(transport=httpx.MockTransport(handler))

        with BlobContainerClient(CONTAINER_URI, client=http_client) as client:
            with pytest.raises(StorageError, match="connection refused") as exc_info:
                client.create()

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert exc_info.value.status_code is None


class TestAsyncClientLifecycle:
    @pytest.mark.asyncio
    async def test_aclose_is_idempotent_and_blocks_use_after_close(self) -> None:
        mock_http = MagicMock(spec=httpx.AsyncClient)
        mock_http.aclose = AsyncMock()
        mock_http.request = AsyncMock()

        with patch(
            "azure_oss_storage.blob.aio.create_storage_async_client", return_value=mock_http
        ):
            client = AsyncBlobContainerClient(CONTAINER_URI, CREDENTIAL)
            await client.aclose()
            await client.aclose()

            with pytest.raises(StorageError, match="Client is closed"):
                await client.exists()

        mock_http.aclose.assert_awaited_once()
        mock_http.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_derived_blob_client_aclose_is_noop(self) -> None:
        mock_http = MagicMock(spec=httpx.AsyncClient)
        mock_http.aclose = AsyncMock()

        with patch(
            "azure_oss_storage.blob.aio.create_storage_async_client", return_value=mock_http
        ):
            async with AsyncBlobContainerClient(CONTAINER_URI, CREDENTIAL) as container:
                async with container.get_blob_client("a.txt"):
                    pass
                mock_http.aclose.assert_not_called()

        mock_http.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_standalone_blob_client_acloses_its_connection(self) -> None:
        mock_http = MagicMock(spec=httpx.AsyncClient)
        mock_http.aclose = AsyncMock()

        with patch(
            "azure_oss_storage.blob.aio.create_storage_async_client", return_value=mock_http
        ):
            async with AsyncBlobClient(f"{CONTAINER_URI}/a.txt", CREDENTIAL):
                pass

        mock_http.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_user_async_client_is_signed_and_left_open(self) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["x-ms-version"] == "2023-11-03"
            assert request.headers["authorization"].startswith("SharedKey acct:")
            return httpx.Response(200)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))

        async with AsyncBlobContainerClient(CONTAINER_URI, CREDENTIAL, client=http_client) as c:
            assert await c.exists()

        assert not http_client.is_closed
        await http_client.aclose()


def _recording_client(requests: list[httpx.Request]) -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200)

    return httpx.Client(transport=httpx.MockTransport(handler))


class TestSharedHttpClient:
    def test_each_storage_client_signs_with_its_own_credential(self) -> None:
        requests: list[httpx.Request] = []
        key_b = base64.b64encode(b"account-b-key").decode()
        http_client = _recording_client(requests)

        client_a = BlobContainerClient(CONTAINER_URI, CREDENTIAL, client=http_client)
        client_b = BlobContainerClient(
            "https://other.blob.core.windows.net/docs",
            StorageSharedKeyCredential("other", key_b),
            client=http_client,
        )
        client_a.exists()
        client_b.exists()

        assert http_client.event_hooks["request"] == []
        assert requests[0].headers["authorization"].startswith("SharedKey acct:")
        signature = base64.b64encode(
            hmac.new(
                base64.b64decode(key_b),
                build_string_to_sign(requests[1], "other").encode(),
                hashlib.sha256,
            ).digest()
        ).decode()
        assert requests[1].headers["authorization"] == f"SharedKey other:{signature}"

    def test_anonymous_client_never_sends_another_clients_signature(self) -> None:
        requests: list[httpx.Request] = []
        http_client = _recording_client(requests)

        BlobContainerClient(CONTAINER_URI, CREDENTIAL, client=http_client).exists()
        BlobContainerClient(
            "https://other.blob.core.windows.net/public", client=http_client
        ).exists()

        assert "authorization" in requests[0].headers
        assert "authorization" not in requests[1].headers
        assert requests[1].headers["x-ms-version"] == "2023-11-03"

    def test_closing_storage_client_leaves_caller_client_open(self) -> None:
        http_client = _recording_client([])

        with BlobContainerClient(CONTAINER_URI, CREDENTIAL, client=http_client) as client:
            pass

        assert not http_client.is_closed
        with pytest.raises(StorageError, match="Client is closed"):
            client.exists()

        with BlobContainerClient(CONTAINER_URI, client=http_client) as other:
            assert other.exists()
        http_client.close()

    @pytest.mark.asyncio
    async def test_async_closing_leaves_caller_client_open(self) -> None:
        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200))
        )

        async with AsyncBlobClient(
            f"{CONTAINER_URI}/a.txt", CREDENTIAL, client=http_client
        ) as blob:
            assert await blob.exists()

        assert not http_client.is_closed
        with pytest.raises(StorageError, match="Client is closed"):
            await blob.exists()
        await http_client.aclose()
