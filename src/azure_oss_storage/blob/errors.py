from __future__ import annotations

import httpx


class StorageError(Exception):
    """Error returned by, or raised while talking to, the storage service."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.response = response


class ContainerNotFoundError(StorageError):
    pass


class ContainerAlreadyExistsError(StorageError):
    pass


class BlobNotFoundError(StorageError):
    pass


class BlobAlreadyExistsError(StorageError):
    pass


class AuthenticationFailedError(StorageError):
    pass


class InvalidBlobUriError(StorageError):
    def __init__(self, uri: str, reason: str = "no container name in path") -> None:
        super().__init__(f"Invalid blob URI {uri!r}: {reason}")
        self.uri = uri


class UnableToGenerateSasError(StorageError):
    def __init__(self) -> None:
        super().__init__(
            "Unable to generate a SAS URI: the client has no shared key credential"
        )


__all__ = [
    "StorageError",
    "ContainerNotFoundError",
    "ContainerAlreadyExistsError",
    "BlobNotFoundError",
    "BlobAlreadyExistsError",
    "AuthenticationFailedError",
    "InvalidBlobUriError",
    "UnableToGenerateSasError",
]
