"""Local filesystem storage backend for `file://` URIs."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Final, Iterator

from .interfaces import StorageBackendPort, StorageEntry
from .storage_errors import StorageListingError

LOCAL_STORAGE_SCHEME_PREFIX: Final[str] = "file://"


class LocalStorageBackend(StorageBackendPort):
    """Storage backend listing files below one local directory."""

    def __init__(self, root_directory: Path):
        self._root_directory = root_directory

    def storage_glob(self, pattern: str) -> Iterator[StorageEntry]:
        """Iterate regular files below the root matching `pattern`.

        A missing root directory yields no entries.

        Args:
            pattern: Shell-style relative pattern.

        Returns:
            Iterator[StorageEntry]: Matching files with modification times.

        Raises:
            ConnectionError: Raised when the directory cannot be read.
        """

        if not self._root_directory.is_dir():
            return
        try:
            for matched_path in self._root_directory.glob(pattern):
                if not matched_path.is_file():
                    continue
                modified_at = datetime.fromtimestamp(matched_path.stat().st_mtime, tz=timezone.utc)
                yield StorageEntry(
                    name=matched_path.relative_to(self._root_directory).as_posix(),
                    modified_at=modified_at,
                )
        except OSError as error:
            raise StorageListingError(
                f"listing {self._root_directory} failed: {error}",
                uri=f"{LOCAL_STORAGE_SCHEME_PREFIX}{self._root_directory}",
            ) from error


def local_backend_connect(uri: str) -> LocalStorageBackend:
    """Connect a local backend rooted at the path of a `file://` URI.

    Args:
        uri: `file://` prefixed path; an empty path means the working directory.

    Returns:
        LocalStorageBackend: Backend rooted at the URI path.

    Raises:
        ValueError: Raised when the URI is not a `file://` URI.
    """

    if not uri.startswith(LOCAL_STORAGE_SCHEME_PREFIX):
        raise ValueError(f"local storage backend requires a {LOCAL_STORAGE_SCHEME_PREFIX} URI")
    local_path = uri[len(LOCAL_STORAGE_SCHEME_PREFIX):] or "."
    return LocalStorageBackend(root_directory=Path(local_path))
