"""Latest-savepoint lookup inside a storage-backend-agnostic directory."""

from __future__ import annotations

from datetime import datetime
from typing import Final

from flink_deployer.storage import LOCAL_STORAGE_SCHEME_PREFIX, StorageBackendFactory, storage_connect

from .operation_errors import SavepointNotFoundError

SAVEPOINT_METADATA_FILENAME: Final[str] = "_metadata"
_SAVEPOINT_METADATA_SUFFIX: Final[str] = f"/{SAVEPOINT_METADATA_FILENAME}"


class SavepointDirectoryResolver:
    """Locate the most recently written savepoint below a directory URI."""

    def __init__(self, connect: StorageBackendFactory | None = None):
        """Initialize resolver.

        Args:
            connect: Optional backend factory; defaults to the scheme registry.

        Returns:
            None: Initializer does not return a value.

        Raises:
            RuntimeError: This initializer does not raise runtime errors.
        """

        self._connect = connect or storage_connect

    def resolver_retrieve_latest(self, directory: str) -> str:
        """Return the path of the newest savepoint subdirectory.

        Savepoints are subdirectories holding a `_metadata` file. The newest one by
        modification time wins; the `file://` prefix is not part of the result.

        Args:
            directory: Local path or scheme-prefixed URI of the savepoint directory.

        Returns:
            str: Directory path joined with the newest savepoint subdirectory name.

        Raises:
            SavepointNotFoundError: Raised when no savepoint exists in the directory.
            UnsupportedStorageSchemeError: Raised when the URI scheme is unknown.
            ConnectionError: Raised when the directory cannot be listed.
        """

        if "://" not in directory:
            directory = LOCAL_STORAGE_SCHEME_PREFIX + directory
        backend = self._connect(directory)

        if directory.endswith("/"):
            directory = directory[:-1]
        display_directory = directory.removeprefix(LOCAL_STORAGE_SCHEME_PREFIX)

        newest_entry_name = ""
        newest_modified_at: datetime | None = None
        for entry in backend.storage_glob(f"*{_SAVEPOINT_METADATA_SUFFIX}"):
            if newest_modified_at is None or entry.modified_at >= newest_modified_at:
                newest_modified_at = entry.modified_at
                newest_entry_name = entry.name

        if not newest_entry_name:
            raise SavepointNotFoundError(f"no savepoints present in directory: {display_directory}")

        savepoint_name = newest_entry_name.removesuffix(_SAVEPOINT_METADATA_SUFFIX)
        return f"{display_directory}/{savepoint_name}"
