"""HTTP configuration for storage API clients."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

DEFAULT_TIMEOUT = 60.0
API_VERSION = "2023-11-03"

try:
    VERSION = version("azure-oss-storage")
except PackageNotFoundError:
    VERSION = "0.0.0"

USER_AGENT = f"azure-oss-storage/{VERSION} (python)"


__all__ = ["DEFAULT_TIMEOUT", "API_VERSION", "VERSION", "USER_AGENT"]
