"""Job layer package for deploy, update and terminate workflow boundaries."""

from .interfaces import DeployerOperatorPort
from .job_matching import job_filter_running_jobs_by_name
from .operation_errors import (
	DeployerOperationError,
	JobAmbiguityError,
	OperationFailedError,
	OperationRetrievalError,
	OperationValidationError,
	SavepointNotFoundError,
	SavepointTimeoutError,
)
from .operator import DeployerOperator, DeployerOperatorConfig
from .savepoint_monitor import SavepointCreationMonitor
from .savepoint_resolver import SAVEPOINT_METADATA_FILENAME, SavepointDirectoryResolver

__all__ = [
	"DeployerOperationError",
	"DeployerOperator",
	"DeployerOperatorConfig",
	"DeployerOperatorPort",
	"JobAmbiguityError",
	"OperationFailedError",
	"OperationRetrievalError",
	"OperationValidationError",
	"SAVEPOINT_METADATA_FILENAME",
	"SavepointCreationMonitor",
	"SavepointDirectoryResolver",
	"SavepointNotFoundError",
	"SavepointTimeoutError",
	"job_filter_running_jobs_by_name",
]
