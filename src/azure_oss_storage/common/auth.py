"""Shared-key credentials and request signing.

Implements the SharedKey authorization scheme for the blob service
(API versions 2015-04-05 and later)::

    StringToSign = VERB + "\\n" +
                   Content-Encoding + "\\n" +
                   Content-Language + "\\n" +
                   Content-Length + "\\n" +
                   Content-MD5 + "\\n" +
                   Content-Type + "\\n" +
                   Date + "\\n" +
                   If-Modified-Since + "\\n" +
                   If-Match + "\\n" +
                   If-None-Match + "\\n" +
                   If-Unmodified-Since + "\\n" +
                   Range + "\\n" +
                   CanonicalizedHeaders +
                   CanonicalizedResource
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from dataclasses import dataclass, field
from typing import Protocol

import httpx

_STANDARD_HEADERS = (
    "content-encoding",
    "content-language",
    "content-length",
    "content-md5",
    "content-type",
    "date",
    "if-modified-since",
    "if-match",
    "if-none-match",
    "if-unmodified-since",
    "range",
)


@dataclass(frozen=True, slots=True)
class StorageSharedKeyCredential:
    """Account name and base64-encoded account key."""

    account_name: str
    account_key: str = field(repr=False)

    def compute_hmac_sha256(self, content: str) -> str:
        """Sign ``content`` with the account key and return the base64 digest."""
        key = base64.b64decode(self.account_key)
        digest = hmac.new(key, content.encode("utf-8"), hashlib.sha256).digest()
        return base64.b64encode(digest).decode("utf-8")


class AuthScheme(Protocol):
    def compute_authorization_header(self, request: httpx.Request) -> str: ...


def _canonicalized_headers(request: httpx.Request) -> str:
    ms_headers: dict[str, str] = {}
    for name, value in request.headers.multi_items():
        name = name.lower()
        if name.startswith("x-ms-"):
            value = " ".join(value.split())
            ms_headers[name] = f"{ms_headers[name]},{value}" if name in ms_headers else value
    return "".join(f"{name}:{value}\n" for name, value in sorted(ms_headers.items()))


def _canonicalized_resource(request: httpx.Request, account_name: str) -> str:
    raw_path = request.url.raw_path.decode("ascii").split("?", 1)[0] or "/"
    resource = f"/{account_name}{raw_path}"

    params: dict[str, list[str]] = {}
    for name, value in request.url.params.multi_items():
        params.setdefault(name.lower(), []).append(value)
    for name in sorted(params):
        resource += f"\n{name}:{','.join(sorted(params[name]))}"
    return resource


def build_string_to_sign(request: httpx.Request, account_name: str) -> str:
    lines = [request.method.upper()]
    for name in _STANDARD_HEADERS:
        value = request.headers.get(name, "")
        if name == "content-length" and value == "0":
            value = ""
        lines.append(value)
    return (
        "\n".join(lines)
        + "\n"
        + _canonicalized_headers(request)
        + _canonicalized_resource(request, account_name)
    )


class SharedKeyAuthScheme:
    """Signs requests with a :class:`StorageSharedKeyCredential`."""

    def __init__(self, credential: StorageSharedKeyCredential) -> None:
        self._credential = credential

    def compute_authorization_header(self, request: httpx.Request) -> str:
        string_to_sign = build_string_to_sign(request, self._credential.account_name)
        signature = self._credential.compute_hmac_sha256(string_to_sign)
        return f"SharedKey {self._credential.account_name}:{signature}"


__all__ = [
    "StorageSharedKeyCredential",
    "AuthScheme",
    "SharedKeyAuthScheme",
    "build_string_to_sign",
]
