"""Typed domain models shared across runtime layers.

This module provides immutable data contracts for jobs read from the cluster,
operation requests accepted from callers, and savepoint creation tracking.
"""

from dataclasses import dataclass
from typing import Final

JOB_STATUS_RUNNING: Final[str] = "RUNNING"

SAVEPOINT_STATUS_IN_PROGRESS: Final[str] = "IN_PROGRESS"
SAVEPOINT_STATUS_COMPLETED: Final[str] = "COMPLETED"
SAVEPOINT_STATUS_FAILED: Final[str] = "FAILED"
SAVEPOINT_TERMINAL_STATUSES: Final[frozenset[str]] = frozenset({SAVEPOINT_STATUS_COMPLETED, SAVEPOINT_STATUS_FAILED})


@dataclass(frozen=True)
class Job:
    """Snapshot of one job as reported by the cluster.

    Attributes:
        job_id: Opaque cluster job identifier.
        name: Display name of the job.
        status: Raw cluster job state, for example `RUNNING` or `CANCELED`.
    """

    job_id: str
    name: str
    status: str


@dataclass(frozen=True)
class UpdateJobRequest:
    """Input contract for one update orchestration run.

    Attributes:
        job_name_base: Stable base name shared by all versions of the job.
        local_filename: Local JAR path uploaded before restart.
        savepoint_directory: Directory or URI where savepoints are written.
        fallback_to_deploy: Deploy instead of failing when no instance is running.
        remote_filename: Already uploaded JAR id used when no local file is given.
        entry_class: Optional entry class override.
        parallelism: Optional parallelism override.
        program_args: Optional program arguments string.
        allow_non_restored_state: Allow skipping savepoint state that cannot be mapped.
    """

    job_name_base: str
    local_filename: str
    savepoint_directory: str
    fallback_to_deploy: bool = False
    remote_filename: str | None = None
    entry_class: str | None = None
    parallelism: int | None = None
    program_args: str | None = None
    allow_non_restored_state: bool = False


@dataclass(frozen=True)
class DeployJobRequest:
    """Input contract for one deploy run.

    Attributes:
        local_filename: Local JAR path to upload.
        remote_filename: Already uploaded JAR id.
        savepoint_directory: Directory to resolve the latest savepoint from.
        savepoint_path: Explicit savepoint path used when no directory is given.
        entry_class: Optional entry class override.
        parallelism: Optional parallelism override.
        program_args: Optional program arguments string.
        allow_non_restored_state: Allow skipping savepoint state that cannot be mapped.
    """

    local_filename: str | None = None
    remote_filename: str | None = None
    savepoint_directory: str | None = None
    savepoint_path: str | None = None
    entry_class: str | None = None
    parallelism: int | None = None
    program_args: str | None = None
    allow_non_restored_state: bool = False


@dataclass(frozen=True)
class TerminateJobRequest:
    """Input contract for one terminate run.

    Attributes:
        job_name_base: Base name used to find the single running instance.
        job_id: Explicit job id, takes precedence over the base name.
        mode: Termination mode. `cancel` drops state, `stop` stops with a savepoint.
        savepoint_directory: Savepoint target for `stop`; the cluster default is used when unset.
    """

    job_name_base: str | None = None
    job_id: str | None = None
    mode: str = "cancel"
    savepoint_directory: str | None = None


@dataclass(frozen=True)
class RunJarRequest:
    """Adapter-facing contract for starting an uploaded JAR.

    Attributes:
        remote_filename: JAR id assigned by the cluster on upload.
        savepoint_path: Optional savepoint path to restore from.
        entry_class: Optional entry class override.
        parallelism: Optional parallelism override.
        program_args: Optional program arguments string.
        allow_non_restored_state: Allow skipping savepoint state that cannot be mapped.
    """

    remote_filename: str
    savepoint_path: str | None = None
    entry_class: str | None = None
    parallelism: int | None = None
    program_args: str | None = None
    allow_non_restored_state: bool = False


@dataclass(frozen=True)
class UploadedJar:
    """Upload response contract.

    Attributes:
        remote_filename: JAR id usable in run requests.
        status: Upload status reported by the cluster.
    """

    remote_filename: str
    status: str


@dataclass(frozen=True)
class SavepointCreationHandle:
    """Correlates an asynchronous savepoint request with its status endpoint.

    Attributes:
        job_id: Job the savepoint was requested for.
        request_id: Cluster trigger id of the savepoint operation.
    """

    job_id: str
    request_id: str


@dataclass(frozen=True)
class SavepointCreationState:
    """One observed state of a savepoint creation operation.

    Attributes:
        status: One of `IN_PROGRESS`, `COMPLETED`, `FAILED`.
        location: Savepoint location once completed.
        failure_cause: Failure description reported by the cluster.
    """

    status: str
    location: str | None = None
    failure_cause: str | None = None

    def savepoint_state_is_terminal(self) -> bool:
        """Return whether no further polling is needed for this operation.

        Returns:
            bool: True when status is `COMPLETED` or `FAILED`.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return self.status in SAVEPOINT_TERMINAL_STATUSES
