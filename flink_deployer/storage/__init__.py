"""Storage layer package for savepoint directory listing backends."""

from .interfaces import StorageBackendFactory, StorageBackendPort, StorageEntry
from .local_backend import LOCAL_STORAGE_SCHEME_PREFIX, LocalStorageBackend
from .registry import storage_connect, storage_register_backend
from .s3_backend import S3StorageBackend
from .storage_errors import StorageBackendError, StorageListingError, UnsupportedStorageSchemeError

__all__ = [
	"LOCAL_STORAGE_SCHEME_PREFIX",
	"LocalStorageBackend",
	"S3StorageBackend",
	"StorageBackendError",
	"StorageBackendFactory",
	"StorageBackendPort",
	"StorageEntry",
	"StorageListingError",
	"UnsupportedStorageSchemeError",
	"storage_connect",
	"storage_register_backend",
]
