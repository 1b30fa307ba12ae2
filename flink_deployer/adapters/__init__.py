"""Adapter layer package for Flink cluster integration boundaries."""

from .flink_errors import (
	FlinkApiConnectionError,
	FlinkApiError,
	FlinkApiRequestError,
	FlinkApiResponseError,
	FlinkApiTimeoutError,
)
from .flink_rest_client import FlinkRestClient
from .interfaces import FlinkRestApiPort

__all__ = [
	"FlinkApiConnectionError",
	"FlinkApiError",
	"FlinkApiRequestError",
	"FlinkApiResponseError",
	"FlinkApiTimeoutError",
	"FlinkRestApiPort",
	"FlinkRestClient",
]
