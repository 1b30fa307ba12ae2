"""Project-native typed exceptions for savepoint storage backends."""

from __future__ import annotations


class StorageBackendError(Exception):
    """Base exception for storage backend connection and listing failures.

    Attributes:
        uri: Storage URI the failing operation addressed.
    """

    def __init__(self, message: str, uri: str | None = None):
        super().__init__(message)
        self.uri = uri


class UnsupportedStorageSchemeError(StorageBackendError, ValueError):
    """URI scheme has no registered storage backend."""


class StorageListingError(StorageBackendError, ConnectionError):
    """Backend failed while enumerating entries."""
