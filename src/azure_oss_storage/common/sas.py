from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum


class SasProtocol(str, Enum):
    """Protocols a shared access signature may be used over."""

    HTTPS = "https"
    HTTPS_AND_HTTP = "https,http"


def format_sas_datetime(value: datetime) -> str:
    """Format a datetime as the UTC ``YYYY-MM-DDThh:mm:ssZ`` form SAS tokens use.

    Naive datetimes are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


__all__ = ["SasProtocol", "format_sas_datetime"]
