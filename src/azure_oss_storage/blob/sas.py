"""Service shared access signatures for containers and blobs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from urllib.parse import quote, urlencode

from .._http.config import API_VERSION
from ..common.auth import StorageSharedKeyCredential
from ..common.sas import SasProtocol, format_sas_datetime

# (attribute, flag) in the order the service expects them in ``sp``.
_PERMISSION_FLAGS = (
    ("read", "r"),
    ("add", "a"),
    ("create", "c"),
    ("write", "w"),
    ("delete", "d"),
    ("delete_previous_version", "x"),
    ("permanent_delete", "y"),
    ("list", "l"),
    ("tag", "t"),
    ("move", "m"),
    ("execute", "e"),
    ("set_immutability_policy", "i"),
)


@dataclass(frozen=True, slots=True)
class BlobSasPermissions:
    read: bool = False
    add: bool = False
    create: bool = False
    write: bool = False
    delete: bool = False
    delete_previous_version: bool = False
    permanent_delete: bool = False
    list: bool = False
    tag: bool = False
    move: bool = False
    execute: bool = False
    set_immutability_policy: bool = False

    @classmethod
    def from_string(cls, permission: str) -> BlobSasPermissions:
        known = {flag: name for name, flag in _PERMISSION_FLAGS}
        unknown = set(permission) - set(known)
        if unknown:
            raise ValueError(f"Unknown SAS permission flags: {''.join(sorted(unknown))}")
        return cls(**{known[flag]: True for flag in permission})

    def __str__(self) -> str:
        return "".join(flag for name, flag in _PERMISSION_FLAGS if getattr(self, name))


@dataclass(frozen=True, slots=True)
class BlobSasBuilder:
    """Parameters of a service SAS.

    ``container_name`` and ``blob_name`` are normally filled in by the client
    that generates the SAS URI. Without ``blob_name`` the SAS covers the whole
    container (``sr=c``).
    """

    permissions: BlobSasPermissions | str | None = None
    expires_on: datetime | None = None
    starts_on: datetime | None = None
    protocol: SasProtocol | None = None
    ip_range: str | None = None
    identifier: str | None = None
    version: str = API_VERSION
    container_name: str = ""
    blob_name: str = ""
    encryption_scope: str | None = None
    cache_control: str | None = None
    content_disposition: str | None = None
    content_encoding: str | None = None
    content_language: str | None = None
    content_type: str | None = None

    @property
    def resource(self) -> str:
        return "b" if self.blob_name else "c"

    def _validate(self) -> None:
        if not self.container_name:
            raise ValueError("container_name is required to build a SAS")
        if self.identifier is None:
            if self.expires_on is None:
                raise ValueError("expires_on is required when no stored access policy is used")
            if not str(self.permissions or ""):
                raise ValueError("permissions are required when no stored access policy is used")

    def _canonicalized_resource(self, account_name: str) -> str:
        resource = f"/blob/{account_name}/{self.container_name}"
        if self.blob_name:
            resource += f"/{self.blob_name}"
        return resource

    def build_string_to_sign(self, account_name: str) -> str:
        self._validate()
        parts = [
            str(self.permissions or ""),
            format_sas_datetime(self.starts_on) if self.starts_on else "",
            format_sas_datetime(self.expires_on) if self.expires_on else "",
            self._canonicalized_resource(account_name),
            self.identifier or "",
            self.ip_range or "",
            self.protocol.value if self.protocol else "",
            self.version,
            self.resource,
            "",  # snapshot time
            self.encryption_scope or "",
            self.cache_control or "",
            self.content_disposition or "",
            self.content_encoding or "",
            self.content_language or "",
            self.content_type or "",
        ]
        return "\n".join(parts)

    def build(self, credential: StorageSharedKeyCredential) -> str:
        """Sign the builder's parameters and return the SAS query string (no leading ``?``)."""
        signature = credential.compute_hmac_sha256(
            self.build_string_to_sign(credential.account_name)
        )
        query = [
            ("sv", self.version),
            ("st", format_sas_datetime(self.starts_on) if self.starts_on else None),
            ("se", format_sas_datetime(self.expires_on) if self.expires_on else None),
            ("sp", str(self.permissions) if self.permissions else None),
            ("sip", self.ip_range),
            ("spr", self.protocol.value if self.protocol else None),
            ("sr", self.resource),
            ("si", self.identifier),
            ("ses", self.encryption_scope),
            ("rscc", self.cache_control),
            ("rscd", self.content_disposition),
            ("rsce", self.content_encoding),
            ("rscl", self.content_language),
            ("rsct", self.content_type),
            ("sig", signature),
        ]
        return urlencode([(k, v) for k, v in query if v], quote_via=quote, safe="")


__all__ = ["BlobSasPermissions", "BlobSasBuilder"]
