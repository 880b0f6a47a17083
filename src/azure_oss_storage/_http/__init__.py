"""Shared HTTP infrastructure for storage API clients."""

from .config import API_VERSION, DEFAULT_TIMEOUT, USER_AGENT
from .clients import create_storage_async_client, create_storage_client
from .iter_coroutine import iter_coroutine
from .transport import AsyncTransport, BaseTransport, BlockingTransport

__all__ = [
    "API_VERSION",
    "DEFAULT_TIMEOUT",
    "USER_AGENT",
    "iter_coroutine",
    "BaseTransport",
    "BlockingTransport",
    "AsyncTransport",
    "create_storage_client",
    "create_storage_async_client",
]
