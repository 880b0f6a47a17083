"""Request middleware applied to every outgoing storage request.

The middleware is an ``httpx.Auth`` passed with each request rather than a
hook installed on the httpx client, so several storage clients can share
one httpx client without signing each other's requests. It runs once the
request is fully built, so the signature covers the final headers and
query string.
"""

from __future__ import annotations

from collections.abc import Generator
from email.utils import formatdate

import httpx

from .._http.config import API_VERSION, USER_AGENT
from .auth import AuthScheme, SharedKeyAuthScheme, StorageSharedKeyCredential


def add_storage_headers(request: httpx.Request) -> None:
    """Stamp the date and service version headers the signature covers."""
    request.headers["x-ms-date"] = formatdate(usegmt=True)
    request.headers.setdefault("x-ms-version", API_VERSION)
    request.headers["user-agent"] = USER_AGENT


class StorageRequestAuth(httpx.Auth):
    """Stamp storage headers on a request, then set its Authorization header.

    Without an auth scheme the request goes out unsigned (anonymous or
    SAS-in-URI access) and any Authorization header is removed.
    """

    def __init__(self, auth_scheme: AuthScheme | None = None) -> None:
        self.auth_scheme = auth_scheme

    @classmethod
    def for_credential(
        cls, credential: StorageSharedKeyCredential | None
    ) -> StorageRequestAuth:
        if credential is None:
            return cls()
        return cls(SharedKeyAuthScheme(credential))

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        add_storage_headers(request)
        if self.auth_scheme is None:
            request.headers.pop("authorization", None)
        else:
            request.headers["authorization"] = self.auth_scheme.compute_authorization_header(
                request
            )
        yield request


__all__ = [
    "add_storage_headers",
    "StorageRequestAuth",
]
