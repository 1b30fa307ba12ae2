"""Scheme registry resolving storage URIs to backend instances."""

from __future__ import annotations

from .interfaces import StorageBackendFactory, StorageBackendPort
from .local_backend import local_backend_connect
from .s3_backend import s3_backend_connect
from .storage_errors import UnsupportedStorageSchemeError

_STORAGE_BACKEND_FACTORIES: dict[str, StorageBackendFactory] = {
    "file": local_backend_connect,
    "s3": s3_backend_connect,
}


def storage_register_backend(scheme: str, factory: StorageBackendFactory) -> None:
    """Register or replace the backend factory for one URI scheme.

    Args:
        scheme: URI scheme without `://`.
        factory: Callable building a backend from a full URI.

    Returns:
        None: Registry is updated as side effect.

    Raises:
        ValueError: Raised when scheme is blank.
    """

    normalized_scheme = scheme.strip().lower()
    if not normalized_scheme:
        raise ValueError("scheme must not be blank")
    _STORAGE_BACKEND_FACTORIES[normalized_scheme] = factory


def storage_connect(uri: str) -> StorageBackendPort:
    """Connect the backend registered for the scheme of `uri`.

    Args:
        uri: Scheme-prefixed storage URI.

    Returns:
        StorageBackendPort: Connected backend.

    Raises:
        UnsupportedStorageSchemeError: Raised when no backend is registered for the scheme.
    """

    scheme = uri.split("://", maxsplit=1)[0] if "://" in uri else ""
    factory = _STORAGE_BACKEND_FACTORIES.get(scheme.lower())
    if factory is None:
        raise UnsupportedStorageSchemeError(f'unknown URL scheme "{scheme}"', uri=uri)
    return factory(uri)
