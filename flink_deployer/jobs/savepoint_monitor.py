"""Deadline-bounded polling of asynchronous savepoint creation."""

from __future__ import annotations

import logging
import time
from typing import Callable

from flink_deployer.adapters import FlinkRestApiPort
from flink_deployer.domain import (
    SAVEPOINT_STATUS_COMPLETED,
    SAVEPOINT_STATUS_FAILED,
    STAGE_STATUS_COMPLETED,
    SavepointCreationState,
    domain_build_stage_event,
)

from .operation_errors import OperationFailedError, SavepointTimeoutError

logger = logging.getLogger(__name__)


class SavepointCreationMonitor:
    """Poll savepoint status on a fixed interval until a terminal state or deadline."""

    def __init__(
        self,
        flink_api: FlinkRestApiPort,
        poll_interval_seconds: float = 0.1,
        clock: Callable[[], float] | None = None,
        sleep_function: Callable[[float], None] | None = None,
    ):
        """Initialize savepoint creation monitor.

        Args:
            flink_api: Cluster API used for status polling.
            poll_interval_seconds: Fixed delay between poll attempts.
            clock: Optional monotonic clock provider.
            sleep_function: Optional sleep implementation.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when the poll interval is not positive.
        """

        if flink_api is None:
            raise ValueError("flink_api must not be None")
        if poll_interval_seconds <= 0:
            raise ValueError("poll_interval_seconds must be > 0")

        self._flink_api = flink_api
        self._poll_interval_seconds = poll_interval_seconds
        self._clock = clock or time.monotonic
        self._sleep_function = sleep_function or time.sleep

    def monitor_await(self, job_id: str, request_id: str, timeout_seconds: float) -> SavepointCreationState:
        """Block until the savepoint operation completes.

        Errors raised by the status call propagate unchanged and end polling.

        Args:
            job_id: Job the savepoint belongs to.
            request_id: Savepoint trigger id.
            timeout_seconds: Total wait budget in seconds.

        Returns:
            SavepointCreationState: Completed operation state.

        Raises:
            OperationFailedError: Raised when the cluster reports `FAILED`.
            SavepointTimeoutError: Raised when no terminal state is seen within budget.
        """

        deadline = self._clock() + timeout_seconds
        poll_attempt = 0
        while True:
            poll_attempt += 1
            state = self._flink_api.rest_monitor_savepoint_creation(job_id, request_id)
            if state.status == SAVEPOINT_STATUS_COMPLETED:
                logger.info(
                    "savepoint completed for job %s",
                    job_id,
                    extra={
                        "stage_event": domain_build_stage_event(
                            stage="await_savepoint",
                            status=STAGE_STATUS_COMPLETED,
                            job_id=job_id,
                            details={"poll_attempt": poll_attempt, "location": state.location},
                        )
                    },
                )
                return state
            if state.status == SAVEPOINT_STATUS_FAILED:
                raise OperationFailedError(
                    f"savepoint creation for job {job_id} failed: {state.failure_cause or 'unknown cause'}"
                )

            remaining_seconds = deadline - self._clock()
            if remaining_seconds <= 0:
                budget = _monitor_format_seconds(timeout_seconds)
                raise SavepointTimeoutError(f'failed to create savepoint for job "{job_id}" within {budget} seconds')
            self._sleep_function(min(self._poll_interval_seconds, remaining_seconds))


def _monitor_format_seconds(seconds: float) -> str:
    """Render a budget without loss: whole values as integers, others as their full repr."""

    if float(seconds).is_integer():
        return str(int(seconds))
    return repr(float(seconds))
