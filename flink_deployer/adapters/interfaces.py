"""Typed interfaces for adapter-layer responsibilities."""

from typing import Protocol

from flink_deployer.domain import (
    Job,
    RunJarRequest,
    SavepointCreationHandle,
    SavepointCreationState,
    UploadedJar,
)


class FlinkRestApiPort(Protocol):
    """Port definition for the Flink cluster control-plane API."""

    def rest_retrieve_jobs(self) -> list[Job]:
        """Return a fresh snapshot of all jobs known to the cluster.

        Returns:
            list[Job]: Jobs in cluster-reported order.

        Raises:
            ConnectionError: Raised when the cluster cannot be reached.
        """

    def rest_create_savepoint(self, job_id: str, target_directory: str) -> SavepointCreationHandle:
        """Trigger an asynchronous savepoint for one job.

        Args:
            job_id: Cluster job identifier.
            target_directory: Directory the cluster writes the savepoint into.

        Returns:
            SavepointCreationHandle: Handle used to poll the operation.

        Raises:
            RuntimeError: Raised when the cluster rejects the request.
        """

    def rest_monitor_savepoint_creation(self, job_id: str, request_id: str) -> SavepointCreationState:
        """Return the current state of one savepoint operation.

        Args:
            job_id: Cluster job identifier.
            request_id: Savepoint trigger id.

        Returns:
            SavepointCreationState: Observed operation state.

        Raises:
            RuntimeError: Raised when the status cannot be read.
        """

    def rest_terminate_job(self, job_id: str, mode: str = "cancel", target_directory: str | None = None) -> None:
        """Terminate one job.

        Args:
            job_id: Cluster job identifier.
            mode: `cancel`, or `stop` to stop with a savepoint.
            target_directory: Savepoint directory for `stop`; cluster default when `None`.

        Returns:
            None: Termination is acknowledged without payload.

        Raises:
            RuntimeError: Raised when the cluster rejects termination.
        """

    def rest_upload_jar(self, local_filename: str) -> UploadedJar:
        """Upload a local JAR to the cluster.

        Args:
            local_filename: Local JAR path.

        Returns:
            UploadedJar: Remote JAR id and upload status.

        Raises:
            ValueError: Raised when the local file cannot be read.
        """

    def rest_run_jar(self, request: RunJarRequest) -> None:
        """Start an uploaded JAR, optionally restoring from a savepoint.

        Args:
            request: Run parameters.

        Returns:
            None: Run is acknowledged without payload.

        Raises:
            RuntimeError: Raised when the cluster rejects the run.
        """
