"""Regression tests for deploy and terminate operator workflows."""

from __future__ import annotations

from pathlib import Path

import pytest

from flink_deployer.domain import (
    DeployJobRequest,
    Job,
    RunJarRequest,
    SavepointCreationHandle,
    SavepointCreationState,
    TerminateJobRequest,
    UploadedJar,
)
from flink_deployer.jobs import (
    DeployerOperator,
    JobAmbiguityError,
    OperationFailedError,
    OperationRetrievalError,
    OperationValidationError,
)


class _FlinkApiStub:
    """Cluster API stub recording upload, run and terminate calls."""

    def __init__(self, jobs: list[Job] | None = None):
        self.jobs = list(jobs or [])
        self.retrieve_jobs_error: Exception | None = None
        self.terminate_error: Exception | None = None
        self.uploaded_filenames: list[str] = []
        self.run_requests: list[RunJarRequest] = []
        self.terminate_calls: list[tuple[str, str]] = []
        self.terminate_directories: list[str | None] = []

    def rest_retrieve_jobs(self) -> list[Job]:
        if self.retrieve_jobs_error is not None:
            raise self.retrieve_jobs_error
        return list(self.jobs)

    def rest_create_savepoint(self, job_id: str, target_directory: str) -> SavepointCreationHandle:
        raise AssertionError("deploy and terminate must not create savepoints")

    def rest_monitor_savepoint_creation(self, job_id: str, request_id: str) -> SavepointCreationState:
        raise AssertionError("deploy and terminate must not monitor savepoints")

    def rest_terminate_job(self, job_id: str, mode: str = "cancel", target_directory: str | None = None) -> None:
        self.terminate_calls.append((job_id, mode))
        self.terminate_directories.append(target_directory)
        if self.terminate_error is not None:
            raise self.terminate_error

    def rest_upload_jar(self, local_filename: str) -> UploadedJar:
        self.uploaded_filenames.append(local_filename)
        return UploadedJar(remote_filename="abc_sample.jar", status="success")

    def rest_run_jar(self, request: RunJarRequest) -> None:
        self.run_requests.append(request)


def _running_job(job_id: str, name: str = "WordCountStateful v1.0") -> Job:
    return Job(job_id=job_id, name=name, status="RUNNING")


def test_jobs_deploy_requires_local_or_remote_jar() -> None:
    """Reject deploy requests without any JAR reference.

    Returns:
        None: Assertions validate input validation.

    Raises:
        AssertionError: Raised when validation message differs.
    """

    api_stub = _FlinkApiStub()

    with pytest.raises(OperationValidationError) as error_info:
        DeployerOperator(flink_api=api_stub).operator_deploy(DeployJobRequest(local_filename=" ", remote_filename=None))

    assert str(error_info.value) == "unspecified argument 'LocalFilename' or 'RemoteFilename'"
    assert error_info.value.error_code == "VALIDATION_ERROR"
    assert api_stub.uploaded_filenames == []


def test_jobs_deploy_uploads_and_runs_with_explicit_savepoint_path() -> None:
    """Upload a local JAR and run it from the given savepoint path.

    Returns:
        None: Assertions validate upload and run parameters.

    Raises:
        AssertionError: Raised when run request differs.
    """

    api_stub = _FlinkApiStub()

    DeployerOperator(flink_api=api_stub).operator_deploy(
        DeployJobRequest(
            local_filename="testdata/sample.jar",
            savepoint_path="/data/flink/savepoint-1",
            program_args="--input /data/in",
            allow_non_restored_state=True,
        )
    )

    assert api_stub.uploaded_filenames == ["testdata/sample.jar"]
    assert api_stub.run_requests == [
        RunJarRequest(
            remote_filename="abc_sample.jar",
            savepoint_path="/data/flink/savepoint-1",
            program_args="--input /data/in",
            allow_non_restored_state=True,
        )
    ]


def test_jobs_deploy_resolves_latest_savepoint_from_directory(tmp_path: Path) -> None:
    """Prefer the newest savepoint of a directory over an explicit path.

    Args:
        tmp_path: Pytest temporary directory fixture.

    Returns:
        None: Assertions validate resolved savepoint path.

    Raises:
        AssertionError: Raised when the explicit path wins.
    """

    metadata_path = tmp_path / "savepoint-1" / "_metadata"
    metadata_path.parent.mkdir()
    metadata_path.write_bytes(b"metadata")
    api_stub = _FlinkApiStub()

    DeployerOperator(flink_api=api_stub).operator_deploy(
        DeployJobRequest(
            remote_filename="existing_sample.jar",
            savepoint_directory=str(tmp_path),
            savepoint_path="/ignored/savepoint",
        )
    )

    assert api_stub.uploaded_filenames == []
    assert api_stub.run_requests[0].remote_filename == "existing_sample.jar"
    assert api_stub.run_requests[0].savepoint_path == f"{tmp_path}/savepoint-1"


def test_jobs_deploy_wraps_missing_savepoint(tmp_path: Path) -> None:
    """Wrap savepoint lookup failures before any upload.

    Args:
        tmp_path: Pytest temporary directory fixture.

    Returns:
        None: Assertions validate wrapped error.

    Raises:
        AssertionError: Raised when upload happens.
    """

    api_stub = _FlinkApiStub()

    with pytest.raises(OperationRetrievalError) as error_info:
        DeployerOperator(flink_api=api_stub).operator_deploy(
            DeployJobRequest(local_filename="sample.jar", savepoint_directory=str(tmp_path))
        )

    assert str(error_info.value) == (
        f"retrieving the latest savepoint failed: no savepoints present in directory: {tmp_path}"
    )
    assert api_stub.uploaded_filenames == []


def test_jobs_deploy_runs_without_savepoint() -> None:
    """Run a fresh job when no savepoint option is given.

    Returns:
        None: Assertions validate run request.

    Raises:
        AssertionError: Raised when a savepoint path is sent.
    """

    api_stub = _FlinkApiStub()

    DeployerOperator(flink_api=api_stub).operator_deploy(DeployJobRequest(local_filename="sample.jar"))

    assert api_stub.run_requests[0].savepoint_path is None


def test_jobs_terminate_requires_selector() -> None:
    """Reject terminate requests without job id or base name.

    Returns:
        None: Assertions validate input validation.

    Raises:
        AssertionError: Raised when validation message differs.
    """

    with pytest.raises(OperationValidationError) as error_info:
        DeployerOperator(flink_api=_FlinkApiStub()).operator_terminate(TerminateJobRequest())

    assert str(error_info.value) == "unspecified argument 'JobNameBase' or 'JobID'"


def test_jobs_terminate_rejects_unknown_mode() -> None:
    """Reject modes other than cancel and stop.

    Returns:
        None: Assertions validate mode validation.

    Raises:
        AssertionError: Raised when unknown mode is accepted.
    """

    api_stub = _FlinkApiStub()

    with pytest.raises(OperationValidationError) as error_info:
        DeployerOperator(flink_api=api_stub).operator_terminate(TerminateJobRequest(job_id="Job-A", mode="kill"))

    assert str(error_info.value) == "unsupported terminate mode 'kill'"
    assert api_stub.terminate_calls == []


def test_jobs_terminate_by_job_id_skips_job_listing() -> None:
    """Terminate the given job id directly with the requested mode.

    Returns:
        None: Assertions validate terminate call.

    Raises:
        AssertionError: Raised when jobs are listed.
    """

    api_stub = _FlinkApiStub()
    api_stub.retrieve_jobs_error = AssertionError("jobs must not be listed")

    DeployerOperator(flink_api=api_stub).operator_terminate(
        TerminateJobRequest(job_id="Job-A", job_name_base="WordCount", mode="stop")
    )

    assert api_stub.terminate_calls == [("Job-A", "stop")]


def test_jobs_terminate_stop_passes_savepoint_directory() -> None:
    """Stop with a savepoint written to the requested directory.

    Returns:
        None: Assertions validate terminate mode and target directory.

    Raises:
        AssertionError: Raised when the directory is dropped.
    """

    api_stub = _FlinkApiStub()

    DeployerOperator(flink_api=api_stub).operator_terminate(
        TerminateJobRequest(job_id="Job-A", mode="stop", savepoint_directory="s3://bucket/savepoints")
    )

    assert api_stub.terminate_calls == [("Job-A", "stop")]
    assert api_stub.terminate_directories == ["s3://bucket/savepoints"]


def test_jobs_terminate_cancel_rejects_savepoint_directory() -> None:
    """Reject a savepoint directory for cancel, which takes no savepoint.

    Returns:
        None: Assertions validate input validation.

    Raises:
        AssertionError: Raised when the cluster is called.
    """

    api_stub = _FlinkApiStub()

    with pytest.raises(OperationValidationError) as error_info:
        DeployerOperator(flink_api=api_stub).operator_terminate(
            TerminateJobRequest(job_id="Job-A", mode="cancel", savepoint_directory="/data/flink")
        )

    assert str(error_info.value) == "savepoint directory requires terminate mode 'stop'"
    assert api_stub.terminate_calls == []


def test_jobs_terminate_by_base_name_selects_single_running_job() -> None:
    """Terminate the single running job matching the base name.

    Returns:
        None: Assertions validate selected job.

    Raises:
        AssertionError: Raised when another job is terminated.
    """

    api_stub = _FlinkApiStub(
        jobs=[
            Job(job_id="Job-Old", name="WordCountStateful v0.9", status="CANCELED"),
            _running_job("Job-A"),
            _running_job("Job-Z", name="TopSpeedWindowing"),
        ]
    )

    DeployerOperator(flink_api=api_stub).operator_terminate(TerminateJobRequest(job_name_base="WordCountStateful"))

    assert api_stub.terminate_calls == [("Job-A", "cancel")]


def test_jobs_terminate_aborts_without_running_instance() -> None:
    """Refuse to terminate when no running job matches.

    Returns:
        None: Assertions validate ambiguity message.

    Raises:
        AssertionError: Raised when termination happens.
    """

    api_stub = _FlinkApiStub(jobs=[])

    with pytest.raises(JobAmbiguityError) as error_info:
        DeployerOperator(flink_api=api_stub).operator_terminate(TerminateJobRequest(job_name_base="WordCount"))

    assert str(error_info.value) == 'no instance running for job name base "WordCount". Aborting termination'
    assert api_stub.terminate_calls == []


def test_jobs_terminate_aborts_with_multiple_running_instances() -> None:
    """Refuse to terminate when several running jobs match.

    Returns:
        None: Assertions validate ambiguity message.

    Raises:
        AssertionError: Raised when termination happens.
    """

    api_stub = _FlinkApiStub(jobs=[_running_job("Job-A"), _running_job("Job-B")])

    with pytest.raises(JobAmbiguityError) as error_info:
        DeployerOperator(flink_api=api_stub).operator_terminate(TerminateJobRequest(job_name_base="WordCount"))

    assert str(error_info.value) == (
        'job name with base "WordCount" has 2 instances running. Aborting termination'
    )
    assert api_stub.terminate_calls == []


def test_jobs_terminate_wraps_cluster_failure() -> None:
    """Wrap termination failures with job id and mode.

    Returns:
        None: Assertions validate wrapped message.

    Raises:
        AssertionError: Raised when message differs.
    """

    api_stub = _FlinkApiStub()
    api_stub.terminate_error = RuntimeError("failed")

    with pytest.raises(OperationFailedError) as error_info:
        DeployerOperator(flink_api=api_stub).operator_terminate(TerminateJobRequest(job_id="Job-A", mode="stop"))

    assert str(error_info.value) == 'job "Job-A" failed to stop due to: failed'


def test_jobs_retrieve_jobs_wraps_cluster_failure() -> None:
    """Wrap listing failures with retrieval context.

    Returns:
        None: Assertions validate wrapped message and code.

    Raises:
        AssertionError: Raised when message differs.
    """

    api_stub = _FlinkApiStub()
    api_stub.retrieve_jobs_error = ConnectionError("connection refused")

    with pytest.raises(OperationRetrievalError) as error_info:
        DeployerOperator(flink_api=api_stub).operator_retrieve_jobs()

    assert str(error_info.value) == "retrieving jobs failed: connection refused"
    assert error_info.value.error_code == "RETRIEVAL_ERROR"
