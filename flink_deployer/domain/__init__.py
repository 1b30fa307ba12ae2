"""Domain models used across application layer boundaries."""

from .models import (
	JOB_STATUS_RUNNING,
	SAVEPOINT_STATUS_COMPLETED,
	SAVEPOINT_STATUS_FAILED,
	SAVEPOINT_STATUS_IN_PROGRESS,
	SAVEPOINT_TERMINAL_STATUSES,
	DeployJobRequest,
	Job,
	RunJarRequest,
	SavepointCreationHandle,
	SavepointCreationState,
	TerminateJobRequest,
	UpdateJobRequest,
	UploadedJar,
)
from .timeline import (
	STAGE_STATUS_COMPLETED,
	STAGE_STATUS_FAILED,
	STAGE_STATUS_SKIPPED,
	STAGE_STATUS_STARTED,
	STAGE_STATUSES,
	domain_build_stage_event,
	domain_format_stage_details,
)

__all__ = [
	"JOB_STATUS_RUNNING",
	"SAVEPOINT_STATUS_COMPLETED",
	"SAVEPOINT_STATUS_FAILED",
	"SAVEPOINT_STATUS_IN_PROGRESS",
	"SAVEPOINT_TERMINAL_STATUSES",
	"STAGE_STATUS_COMPLETED",
	"STAGE_STATUS_FAILED",
	"STAGE_STATUS_SKIPPED",
	"STAGE_STATUS_STARTED",
	"STAGE_STATUSES",
	"DeployJobRequest",
	"Job",
	"RunJarRequest",
	"SavepointCreationHandle",
	"SavepointCreationState",
	"TerminateJobRequest",
	"UpdateJobRequest",
	"UploadedJar",
	"domain_build_stage_event",
	"domain_format_stage_details",
]
