from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime

from .utils import parse_http_date


@dataclass(frozen=True, slots=True)
class BlobProperties:
    last_modified: datetime
    content_length: int
    content_type: str
    content_md5: str

    @classmethod
    def from_response_headers(cls, headers: Mapping[str, str]) -> BlobProperties:
        """Build properties from HTTP response headers or a listing ``<Properties>`` map.

        Both use the same names (``Last-Modified``, ``Content-Length``,
        ``Content-Type``, ``Content-MD5``). ``headers`` should be
        case-insensitive when it comes from a response.
        """
        return cls(
            last_modified=parse_http_date(headers.get("Last-Modified")),
            content_length=int(headers.get("Content-Length") or 0),
            content_type=headers.get("Content-Type") or "",
            content_md5=headers.get("Content-MD5") or "",
        )


@dataclass(frozen=True, slots=True)
class Blob:
    name: str
    properties: BlobProperties


@dataclass(frozen=True, slots=True)
class BlobPrefix:
    name: str


@dataclass(frozen=True, slots=True)
class ListBlobsResponseBody:
    blobs: list[Blob] = field(default_factory=list)
    blob_prefixes: list[BlobPrefix] = field(default_factory=list)
    next_marker: str = ""
    prefix: str = ""
    marker: str = ""
    delimiter: str = ""
    max_results: int | None = None


__all__ = [
    "BlobProperties",
    "Blob",
    "BlobPrefix",
    "ListBlobsResponseBody",
]
