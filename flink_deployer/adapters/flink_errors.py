"""Project-native typed exceptions for Flink REST API adapter failures."""

from __future__ import annotations


class FlinkApiError(Exception):
    """Base exception for adapter-level Flink REST API failures.

    Attributes:
        status_code: Optional HTTP status code returned by the cluster.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class FlinkApiConnectionError(FlinkApiError, ConnectionError):
    """Transport-level connectivity failure during Flink REST API communication."""


class FlinkApiTimeoutError(FlinkApiError, TimeoutError):
    """Transport timeout while waiting for a Flink REST API response."""


class FlinkApiRequestError(FlinkApiError, ValueError):
    """Request could not be built from the provided inputs."""


class FlinkApiResponseError(FlinkApiError, RuntimeError):
    """Cluster rejected the request or returned a malformed response."""
