"""Job-layer operator running deploy, update and terminate workflows against one cluster."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from flink_deployer.adapters import FlinkApiError, FlinkRestApiPort
from flink_deployer.domain import (
    STAGE_STATUS_COMPLETED,
    STAGE_STATUS_SKIPPED,
    STAGE_STATUS_STARTED,
    DeployJobRequest,
    Job,
    RunJarRequest,
    TerminateJobRequest,
    UpdateJobRequest,
    domain_build_stage_event,
)
from flink_deployer.storage import StorageBackendError

from .interfaces import DeployerOperatorPort
from .job_matching import job_filter_running_jobs_by_name
from .operation_errors import (
    JobAmbiguityError,
    OperationFailedError,
    OperationRetrievalError,
    OperationValidationError,
)
from .savepoint_monitor import SavepointCreationMonitor
from .savepoint_resolver import SavepointDirectoryResolver

logger = logging.getLogger(__name__)

_COLLABORATOR_ERRORS = (FlinkApiError, StorageBackendError, OSError, ValueError, LookupError, RuntimeError)
_SUPPORTED_TERMINATE_MODES = ("cancel", "stop")


@dataclass(frozen=True)
class DeployerOperatorConfig:
    """Configuration values for operation execution.

    Attributes:
        savepoint_timeout_seconds: Wait budget for savepoint creation during update.
    """

    savepoint_timeout_seconds: float = 60.0


class DeployerOperator(DeployerOperatorPort):
    """Concrete operator composing the cluster API, savepoint monitor and resolver."""

    def __init__(
        self,
        flink_api: FlinkRestApiPort,
        savepoint_monitor: SavepointCreationMonitor | None = None,
        savepoint_resolver: SavepointDirectoryResolver | None = None,
        config: DeployerOperatorConfig | None = None,
    ):
        """Initialize operator dependencies.

        Args:
            flink_api: Adapter for the cluster REST API.
            savepoint_monitor: Savepoint creation monitor; defaults to one polling `flink_api`.
            savepoint_resolver: Latest-savepoint resolver; defaults to the storage registry.
            config: Operation configuration.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if flink_api is None:
            raise ValueError("flink_api must not be None")
        resolved_config = config or DeployerOperatorConfig()
        if resolved_config.savepoint_timeout_seconds <= 0:
            raise ValueError("config.savepoint_timeout_seconds must be > 0")

        self._flink_api = flink_api
        self._savepoint_monitor = savepoint_monitor or SavepointCreationMonitor(flink_api=flink_api)
        self._savepoint_resolver = savepoint_resolver or SavepointDirectoryResolver()
        self._config = resolved_config

    def operator_retrieve_jobs(self) -> list[Job]:
        """Return a fresh snapshot of cluster jobs.

        Returns:
            list[Job]: Jobs known to the cluster.

        Raises:
            OperationRetrievalError: Raised when the cluster call fails.
        """

        try:
            return self._flink_api.rest_retrieve_jobs()
        except _COLLABORATOR_ERRORS as error:
            raise OperationRetrievalError(f"retrieving jobs failed: {error}") from error

    def operator_deploy(self, request: DeployJobRequest) -> None:
        """Upload (when local) and run one JAR, restoring from a savepoint when configured.

        A savepoint directory takes precedence over an explicit savepoint path.

        Args:
            request: Deploy parameters.

        Returns:
            None: Success is signalled by absence of an exception.

        Raises:
            OperationValidationError: Raised when neither local nor remote JAR is given.
            OperationRetrievalError: Raised when the latest savepoint cannot be resolved.
            FlinkApiError: Raised unchanged from upload and run calls.
        """

        if not _operator_has_text(request.local_filename) and not _operator_has_text(request.remote_filename):
            raise OperationValidationError("unspecified argument 'LocalFilename' or 'RemoteFilename'")

        savepoint_path = request.savepoint_path or None
        if _operator_has_text(request.savepoint_directory):
            savepoint_path = self._operator_resolve_latest_savepoint(str(request.savepoint_directory))

        self._operator_upload_and_run(request=request, savepoint_path=savepoint_path)

    def operator_update(self, request: UpdateJobRequest) -> None:
        """Savepoint, cancel and restart the single running job of a family.

        Every failing stage aborts the run; nothing is retried or rolled back.
        Once the old job is cancelled a later failure leaves no job running.

        Args:
            request: Update parameters.

        Returns:
            None: Success is signalled by absence of an exception.

        Raises:
            OperationValidationError: Raised when base name or savepoint directory is missing.
            OperationRetrievalError: Raised when jobs or the latest savepoint cannot be retrieved.
            JobAmbiguityError: Raised when zero (without fallback) or several instances are running.
            OperationFailedError: Raised when savepoint creation or cancellation fails.
            SavepointTimeoutError: Raised when the savepoint is not completed in time.
            FlinkApiError: Raised unchanged from upload and run calls.
        """

        if not _operator_has_text(request.job_name_base):
            raise OperationValidationError("unspecified argument 'JobNameBase'")
        if not _operator_has_text(request.savepoint_directory):
            raise OperationValidationError("unspecified argument 'SavepointDir'")

        job_name_base = request.job_name_base
        self._operator_log_stage(stage="update", status=STAGE_STATUS_STARTED, job_name_base=job_name_base)

        jobs = self.operator_retrieve_jobs()
        running_jobs = job_filter_running_jobs_by_name(jobs=jobs, job_name_base=job_name_base)

        if not running_jobs:
            if request.fallback_to_deploy:
                self._operator_log_stage(
                    stage="select_target",
                    status=STAGE_STATUS_SKIPPED,
                    job_name_base=job_name_base,
                    details={"fallback": "deploy"},
                )
                self.operator_deploy(
                    DeployJobRequest(
                        local_filename=request.local_filename,
                        remote_filename=request.remote_filename,
                        savepoint_directory=request.savepoint_directory,
                        entry_class=request.entry_class,
                        parallelism=request.parallelism,
                        program_args=request.program_args,
                        allow_non_restored_state=request.allow_non_restored_state,
                    )
                )
                return
            raise JobAmbiguityError(f'no instance running for job name base "{job_name_base}". Aborting update')
        if len(running_jobs) > 1:
            raise JobAmbiguityError(
                f'job name with base "{job_name_base}" has {len(running_jobs)} instances running. Aborting update'
            )

        target_job = running_jobs[0]
        self._operator_log_stage(
            stage="select_target",
            status=STAGE_STATUS_COMPLETED,
            job_id=target_job.job_id,
            job_name_base=job_name_base,
            details={"job_name": target_job.name},
        )

        try:
            savepoint_handle = self._flink_api.rest_create_savepoint(target_job.job_id, request.savepoint_directory)
        except _COLLABORATOR_ERRORS as error:
            raise OperationFailedError(
                f"failed to create savepoint for job {target_job.job_id} due to error: {error}"
            ) from error

        self._savepoint_monitor.monitor_await(
            job_id=savepoint_handle.job_id,
            request_id=savepoint_handle.request_id,
            timeout_seconds=self._config.savepoint_timeout_seconds,
        )

        try:
            self._flink_api.rest_terminate_job(target_job.job_id, "cancel")
        except _COLLABORATOR_ERRORS as error:
            raise OperationFailedError(f'job "{target_job.job_id}" failed to cancel due to: {error}') from error
        self._operator_log_stage(stage="cancel", status=STAGE_STATUS_COMPLETED, job_id=target_job.job_id)

        savepoint_path = self._operator_resolve_latest_savepoint(request.savepoint_directory)

        self._operator_upload_and_run(request=request, savepoint_path=savepoint_path)
        self._operator_log_stage(stage="update", status=STAGE_STATUS_COMPLETED, job_name_base=job_name_base)

    def operator_terminate(self, request: TerminateJobRequest) -> None:
        """Terminate one job selected by id or by its single running base-name match.

        `cancel` drops the job state. `stop` stops the job with a savepoint, written to
        `savepoint_directory` or to the cluster default directory when none is given.

        Args:
            request: Terminate parameters.

        Returns:
            None: Success is signalled by absence of an exception.

        Raises:
            OperationValidationError: Raised when no selector is given or mode is unsupported.
                A savepoint directory given with `cancel` is rejected too.
            OperationRetrievalError: Raised when jobs cannot be retrieved.
            JobAmbiguityError: Raised when zero or several instances match the base name.
            OperationFailedError: Raised when the cluster rejects termination.
        """

        if not _operator_has_text(request.job_id) and not _operator_has_text(request.job_name_base):
            raise OperationValidationError("unspecified argument 'JobNameBase' or 'JobID'")
        if request.mode not in _SUPPORTED_TERMINATE_MODES:
            raise OperationValidationError(f"unsupported terminate mode '{request.mode}'")
        target_directory = request.savepoint_directory if _operator_has_text(request.savepoint_directory) else None
        if target_directory is not None and request.mode != "stop":
            raise OperationValidationError("savepoint directory requires terminate mode 'stop'")

        if _operator_has_text(request.job_id):
            job_id = str(request.job_id)
        else:
            job_name_base = str(request.job_name_base)
            jobs = self.operator_retrieve_jobs()
            running_jobs = job_filter_running_jobs_by_name(jobs=jobs, job_name_base=job_name_base)
            if not running_jobs:
                raise JobAmbiguityError(
                    f'no instance running for job name base "{job_name_base}". Aborting termination'
                )
            if len(running_jobs) > 1:
                raise JobAmbiguityError(
                    f'job name with base "{job_name_base}" has {len(running_jobs)} instances running. '
                    "Aborting termination"
                )
            job_id = running_jobs[0].job_id

        try:
            self._flink_api.rest_terminate_job(job_id, request.mode, target_directory)
        except _COLLABORATOR_ERRORS as error:
            raise OperationFailedError(f'job "{job_id}" failed to {request.mode} due to: {error}') from error
        self._operator_log_stage(
            stage="terminate",
            status=STAGE_STATUS_COMPLETED,
            job_id=job_id,
            details={"mode": request.mode, "target_directory": target_directory},
        )

    def _operator_resolve_latest_savepoint(self, savepoint_directory: str) -> str:
        """Resolve the newest savepoint path and wrap lookup failures.

        Args:
            savepoint_directory: Directory path or URI.

        Returns:
            str: Resolved savepoint path.

        Raises:
            OperationRetrievalError: Raised when resolution fails for any reason.
        """

        try:
            savepoint_path = self._savepoint_resolver.resolver_retrieve_latest(savepoint_directory)
        except _COLLABORATOR_ERRORS as error:
            raise OperationRetrievalError(f"retrieving the latest savepoint failed: {error}") from error
        self._operator_log_stage(
            stage="resolve_savepoint",
            status=STAGE_STATUS_COMPLETED,
            details={"savepoint_path": savepoint_path},
        )
        return savepoint_path

    def _operator_upload_and_run(
        self,
        request: DeployJobRequest | UpdateJobRequest,
        savepoint_path: str | None,
    ) -> None:
        """Upload the local JAR unless only a remote JAR id is given, then run it.

        Args:
            request: Deploy or update parameters carrying JAR and run options.
            savepoint_path: Optional savepoint path to restore from.

        Returns:
            None: Run is acknowledged without payload.

        Raises:
            FlinkApiError: Raised unchanged from upload and run calls.
        """

        if _operator_has_text(request.local_filename) or not _operator_has_text(request.remote_filename):
            uploaded_jar = self._flink_api.rest_upload_jar(request.local_filename or "")
            jar_id = uploaded_jar.remote_filename
            self._operator_log_stage(
                stage="upload",
                status=STAGE_STATUS_COMPLETED,
                details={"remote_filename": jar_id},
            )
        else:
            jar_id = str(request.remote_filename)

        self._flink_api.rest_run_jar(
            RunJarRequest(
                remote_filename=jar_id,
                savepoint_path=savepoint_path,
                entry_class=request.entry_class,
                parallelism=request.parallelism,
                program_args=request.program_args,
                allow_non_restored_state=request.allow_non_restored_state,
            )
        )
        self._operator_log_stage(
            stage="run",
            status=STAGE_STATUS_COMPLETED,
            details={"remote_filename": jar_id, "savepoint_path": savepoint_path},
        )

    def _operator_log_stage(
        self,
        stage: str,
        status: str,
        job_id: str | None = None,
        job_name_base: str | None = None,
        details: dict[str, object] | None = None,
    ) -> None:
        """Log one structured stage event."""

        stage_event = domain_build_stage_event(
            stage=stage,
            status=status,
            job_id=job_id,
            job_name_base=job_name_base,
            details=details,
        )
        logger.info("%s %s", stage, status, extra={"stage_event": stage_event})


def _operator_has_text(value: str | None) -> bool:
    return value is not None and bool(value.strip())
