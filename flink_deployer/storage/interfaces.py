"""Typed interfaces for savepoint storage backends."""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterator, Protocol


@dataclass(frozen=True)
class StorageEntry:
    """One listed storage entry.

    Attributes:
        name: Entry path relative to the connected root, `/`-separated.
        modified_at: Last modification time, timezone aware.
    """

    name: str
    modified_at: datetime


class StorageBackendPort(Protocol):
    """Port definition for listing entries under one connected storage root."""

    def storage_glob(self, pattern: str) -> Iterator[StorageEntry]:
        """Iterate entries whose relative path matches a shell-style pattern.

        Args:
            pattern: Pattern such as `*/_metadata`; `*` never crosses `/`.

        Returns:
            Iterator[StorageEntry]: Matching entries in backend-defined order.

        Raises:
            ConnectionError: Raised when the backend cannot be listed.
        """


StorageBackendFactory = Callable[[str], StorageBackendPort]
