"""Transports that send one storage request through an httpx client.

Each transport carries the ``httpx.Auth`` that stamps and signs its
requests, and knows whether it owns the httpx client it sends through.
A client passed in by the caller is left open on close.
"""

from __future__ import annotations

import abc
import httpx


class BaseTransport(abc.ABC):
    """Abstract base class for HTTP transports."""

    def __init__(self, *, auth: httpx.Auth | None = None, owns_client: bool = True) -> None:
        self.auth = auth
        self.owns_client = owns_client

    @abc.abstractmethod
    async def send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        content: bytes | None = None,
    ) -> httpx.Response:
        """Send a request to ``url`` and return the response, whatever its status."""
        ...


class BlockingTransport(BaseTransport):
    """Transport over a blocking ``httpx.Client``.

    ``send`` is a coroutine that never suspends, so the sync clients drive
    it with ``iter_coroutine``.
    """

    def __init__(
        self,
        client: httpx.Client,
        *,
        auth: httpx.Auth | None = None,
        owns_client: bool = True,
    ) -> None:
        super().__init__(auth=auth, owns_client=owns_client)
        self._client: httpx.Client | None = client

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            raise RuntimeError("transport is closed")
        return self._client

    async def send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        content: bytes | None = None,
    ) -> httpx.Response:
        """Send the request on the calling thread."""
        return self.client.request(
            method,
            url,
            params=params or None,
            headers=headers,
            content=content,
            auth=self.auth,
        )

    def close(self) -> None:
        client, self._client = self._client, None
        if client is not None and self.owns_client:
            client.close()


class AsyncTransport(BaseTransport):
    """Transport over an ``httpx.AsyncClient``."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        auth: httpx.Auth | None = None,
        owns_client: bool = True,
    ) -> None:
        super().__init__(auth=auth, owns_client=owns_client)
        self._client: httpx.AsyncClient | None = client

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("transport is closed")
        return self._client

    async def send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        content: bytes | None = None,
    ) -> httpx.Response:
        return await self.client.request(
            method,
            url,
            params=params or None,
            headers=headers,
            content=content,
            auth=self.auth,
        )

    async def aclose(self) -> None:
        client, self._client = self._client, None
        if client is not None and self.owns_client:
            await client.aclose()


__all__ = [
    "BaseTransport",
    "BlockingTransport",
    "AsyncTransport",
]
