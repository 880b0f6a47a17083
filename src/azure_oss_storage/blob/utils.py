from __future__ import annotations

import ipaddress
import logging
import os
import sys
from collections.abc import Mapping
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any
from urllib.parse import parse_qsl, quote, unquote, urlsplit, urlunsplit

from .errors import InvalidBlobUriError

logger = logging.getLogger("azure_oss_storage")

_DEVELOPMENT_HOSTS = {"localhost"}


def _debug_enabled_from_env() -> bool:
    debug_env = os.getenv("DEBUG", "")
    return "storage" in debug_env


if _debug_enabled_from_env() and not logger.handlers:
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter("azure-oss-storage: %(message)s"))
    logger.addHandler(_handler)
    logger.setLevel(logging.DEBUG)


def debug(message: str, *args: Any) -> None:
    logger.debug(message, *args)


def is_development_uri(uri: str) -> bool:
    """Whether ``uri`` points at a path-style emulator endpoint.

    Emulators are addressed by IP or localhost and carry the account name as
    the first path segment: ``http://127.0.0.1:10000/devstoreaccount1/container``.
    """
    host = urlsplit(uri).hostname or ""
    if host in _DEVELOPMENT_HOSTS:
        return True
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def _resource_path(uri: str) -> str:
    path = urlsplit(uri).path.lstrip("/")
    if is_development_uri(uri):
        _, _, path = path.partition("/")
    return path


def get_account_name(uri: str) -> str:
    parts = urlsplit(uri)
    if is_development_uri(uri):
        account, _, _ = parts.path.lstrip("/").partition("/")
        return account
    return (parts.hostname or "").split(".", 1)[0]


def get_container_name(uri: str) -> str:
    container, _, _ = _resource_path(uri).partition("/")
    if not container:
        raise InvalidBlobUriError(uri)
    return unquote(container)


def get_blob_name(uri: str) -> str:
    get_container_name(uri)
    _, _, blob_name = _resource_path(uri).partition("/")
    if not blob_name:
        raise InvalidBlobUriError(uri, "no blob name in path")
    return unquote(blob_name)


def strip_query(uri: str) -> str:
    parts = urlsplit(uri)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def build_query(uri: str, params: Mapping[str, str | None]) -> dict[str, str]:
    """Merge the query string already on ``uri`` with operation parameters.

    Operation parameters win over URI parameters; entries that end up ``None``
    or empty are dropped, so passing ``None`` also removes a URI parameter.
    """
    merged: dict[str, str | None] = {
        **dict(parse_qsl(urlsplit(uri).query, keep_blank_values=True)),
        **params,
    }
    return {key: value for key, value in merged.items() if value}


def append_query(uri: str, query: str) -> str:
    if not query:
        return uri
    sep = "&" if urlsplit(uri).query else "?"
    return f"{uri}{sep}{query}"


def join_blob_uri(container_uri: str, blob_name: str) -> str:
    """Build a blob URI under ``container_uri``, keeping its query (e.g. a SAS)."""
    parts = urlsplit(container_uri)
    path = parts.path.rstrip("/") + "/" + quote(blob_name, safe="/~")
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, ""))


def parse_http_date(value: str | None) -> datetime:
    if not value:
        return datetime.now(tz=timezone.utc)
    try:
        return parsedate_to_datetime(value)
    except (ValueError, TypeError):
        pass
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return datetime.now(tz=timezone.utc)


__all__ = [
    "debug",
    "is_development_uri",
    "get_account_name",
    "get_container_name",
    "get_blob_name",
    "strip_query",
    "build_query",
    "append_query",
    "join_blob_uri",
    "parse_http_date",
]
