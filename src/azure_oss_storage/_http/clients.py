"""Factories for the httpx clients the storage transports send through."""

from __future__ import annotations

import httpx

from .config import DEFAULT_TIMEOUT


def _timeout(timeout: float | None) -> httpx.Timeout:
    return httpx.Timeout(DEFAULT_TIMEOUT if timeout is None else timeout)


def create_storage_client(
    timeout: float | None = None,
    *,
    client: httpx.Client | None = None,
) -> httpx.Client:
    """Return the ``httpx.Client`` a storage client sends through.

    A caller-supplied ``client`` is used as is and never modified; ``timeout``
    then has no effect. Otherwise a new client is built with ``timeout``
    seconds (``DEFAULT_TIMEOUT`` when omitted). Signing happens per request
    in the transport, not on the httpx client.
    """
    if client is not None:
        return client
    return httpx.Client(timeout=_timeout(timeout))


def create_storage_async_client(
    timeout: float | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> httpx.AsyncClient:
    """Async counterpart of :func:`create_storage_client`."""
    if client is not None:
        return client
    return httpx.AsyncClient(timeout=_timeout(timeout))


__all__ = [
    "create_storage_client",
    "create_storage_async_client",
]
