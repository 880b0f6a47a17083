"""Storage connection string parsing."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .auth import StorageSharedKeyCredential

CONNECTION_STRING_ENV = "AZURE_STORAGE_CONNECTION_STRING"

DEVELOPMENT_ACCOUNT_NAME = "devstoreaccount1"
DEVELOPMENT_ACCOUNT_KEY = (
    "Eby8vdM02xNOcqFlqUwJPLlmEtlCDXJ1OUzFT50uSRZ6IFsuFq2UVErCz4I6tq/K1SZFPTOtr/KBHBeksoGMGw=="
)
DEVELOPMENT_BLOB_ENDPOINT = "http://127.0.0.1:10000/devstoreaccount1"


class InvalidConnectionStringError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class StorageConnectionInfo:
    blob_endpoint: str
    credential: StorageSharedKeyCredential | None = None
    sas_token: str | None = None


def parse_connection_string(connection_string: str) -> dict[str, str]:
    """Split ``Key=Value;Key=Value`` pairs. Values may themselves contain ``=``."""
    settings: dict[str, str] = {}
    for segment in connection_string.split(";"):
        segment = segment.strip()
        if not segment:
            continue
        key, sep, value = segment.partition("=")
        if not sep or not key:
            raise InvalidConnectionStringError(f"Invalid connection string segment: {segment!r}")
        settings[key.strip()] = value.strip()
    return settings


def require_connection_string(connection_string: str | None) -> str:
    """Resolve connection string from argument or environment, raising if not found."""
    resolved = connection_string or os.getenv(CONNECTION_STRING_ENV)
    if not resolved:
        raise InvalidConnectionStringError(
            "Missing storage connection string. "
            f"Pass connection_string=... or set {CONNECTION_STRING_ENV}."
        )
    return resolved


def get_connection_info(connection_string: str | None = None) -> StorageConnectionInfo:
    settings = parse_connection_string(require_connection_string(connection_string))

    if settings.get("UseDevelopmentStorage", "").lower() == "true":
        return StorageConnectionInfo(
            blob_endpoint=DEVELOPMENT_BLOB_ENDPOINT,
            credential=StorageSharedKeyCredential(
                DEVELOPMENT_ACCOUNT_NAME, DEVELOPMENT_ACCOUNT_KEY
            ),
        )

    account_name = settings.get("AccountName")
    account_key = settings.get("AccountKey")
    if account_key and not account_name:
        raise InvalidConnectionStringError("AccountKey given without AccountName")
    credential = None
    if account_name and account_key:
        credential = StorageSharedKeyCredential(account_name, account_key)

    blob_endpoint = settings.get("BlobEndpoint")
    if not blob_endpoint:
        if not account_name:
            raise InvalidConnectionStringError(
                "Connection string needs either BlobEndpoint or AccountName"
            )
        protocol = settings.get("DefaultEndpointsProtocol", "https")
        suffix = settings.get("EndpointSuffix", "core.windows.net")
        blob_endpoint = f"{protocol}://{account_name}.blob.{suffix}"

    sas_token = settings.get("SharedAccessSignature") or None

    return StorageConnectionInfo(
        blob_endpoint=blob_endpoint.rstrip("/"),
        credential=credential,
        sas_token=sas_token.lstrip("?") if sas_token else None,
    )


__all__ = [
    "CONNECTION_STRING_ENV",
    "InvalidConnectionStringError",
    "StorageConnectionInfo",
    "parse_connection_string",
    "require_connection_string",
    "get_connection_info",
]
