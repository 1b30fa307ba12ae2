"""Typed interfaces for job-layer operation responsibilities."""

from typing import Protocol

from flink_deployer.domain import DeployJobRequest, Job, TerminateJobRequest, UpdateJobRequest


class DeployerOperatorPort(Protocol):
    """Port definition for the deploy, update, terminate and list operations."""

    def operator_retrieve_jobs(self) -> list[Job]:
        """Return a fresh snapshot of cluster jobs.

        Returns:
            list[Job]: Jobs known to the cluster.

        Raises:
            ConnectionError: Raised when jobs cannot be retrieved.
        """

    def operator_deploy(self, request: DeployJobRequest) -> None:
        """Deploy one job, optionally restoring from a savepoint.

        Args:
            request: Deploy parameters.

        Returns:
            None: Success is signalled by absence of an exception.

        Raises:
            ValueError: Raised when required arguments are missing.
        """

    def operator_update(self, request: UpdateJobRequest) -> None:
        """Replace the single running job of a family with a new version.

        Args:
            request: Update parameters.

        Returns:
            None: Success is signalled by absence of an exception.

        Raises:
            RuntimeError: Raised when any update stage fails.
        """

    def operator_terminate(self, request: TerminateJobRequest) -> None:
        """Terminate one running job.

        Args:
            request: Terminate parameters.

        Returns:
            None: Success is signalled by absence of an exception.

        Raises:
            RuntimeError: Raised when termination fails.
        """
