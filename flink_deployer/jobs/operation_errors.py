"""Project-native typed exceptions for deploy, update and terminate operations."""

from __future__ import annotations


class DeployerOperationError(Exception):
    """Base exception for operation-level failures.

    Attributes:
        error_code: Stable error code for the failure category.
    """

    default_error_code = "OPERATION_ERROR"

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code or self.default_error_code


class OperationValidationError(DeployerOperationError, ValueError):
    """Required operation argument is missing or invalid."""

    default_error_code = "VALIDATION_ERROR"


class OperationRetrievalError(DeployerOperationError, ConnectionError):
    """Listing jobs or savepoint directory entries failed."""

    default_error_code = "RETRIEVAL_ERROR"


class SavepointNotFoundError(DeployerOperationError, LookupError):
    """No savepoint entries matched in the savepoint directory."""

    default_error_code = "SAVEPOINT_NOT_FOUND"


class JobAmbiguityError(DeployerOperationError, RuntimeError):
    """Zero or several running instances matched where exactly one was required."""

    default_error_code = "JOB_AMBIGUITY_ERROR"


class OperationFailedError(DeployerOperationError, RuntimeError):
    """Savepoint creation or job termination failed at the cluster."""

    default_error_code = "OPERATION_FAILED"


class SavepointTimeoutError(DeployerOperationError, TimeoutError):
    """Savepoint creation did not reach a terminal state within budget."""

    default_error_code = "SAVEPOINT_TIMEOUT"
