"""Credential and signing helpers shared by the storage clients."""

from .auth import AuthScheme, SharedKeyAuthScheme, StorageSharedKeyCredential
from .sas import SasProtocol

__all__ = [
    "AuthScheme",
    "SharedKeyAuthScheme",
    "StorageSharedKeyCredential",
    "SasProtocol",
]
