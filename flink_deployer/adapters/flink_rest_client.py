"""Flink REST API adapter implementation backed by `httpx`."""

from __future__ import annotations

import os
from typing import Any, Final

import httpx

from flink_deployer.domain import (
    SAVEPOINT_STATUS_COMPLETED,
    SAVEPOINT_STATUS_FAILED,
    SAVEPOINT_STATUS_IN_PROGRESS,
    Job,
    RunJarRequest,
    SavepointCreationHandle,
    SavepointCreationState,
    UploadedJar,
)

from .flink_errors import (
    FlinkApiConnectionError,
    FlinkApiRequestError,
    FlinkApiResponseError,
    FlinkApiTimeoutError,
)
from .interfaces import FlinkRestApiPort


class FlinkRestClient(FlinkRestApiPort):
    """Adapter implementation for the Flink JobManager REST endpoints used by the deployer."""

    _USER_AGENT: Final[str] = "flink-deployer/1.0 (Python/httpx)"
    _JAR_CONTENT_TYPE: Final[str] = "application/x-java-archive"
    _SUPPORTED_TERMINATE_MODES: Final[frozenset[str]] = frozenset({"cancel", "stop"})
    _KNOWN_SAVEPOINT_STATUSES: Final[frozenset[str]] = frozenset(
        {SAVEPOINT_STATUS_IN_PROGRESS, SAVEPOINT_STATUS_COMPLETED, SAVEPOINT_STATUS_FAILED}
    )

    def __init__(
        self,
        base_url: str,
        request_timeout_seconds: float = 30.0,
        basic_auth_username: str | None = None,
        basic_auth_password: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize Flink REST API adapter.

        Args:
            base_url: JobManager REST endpoint, for example `http://localhost:8081`.
            request_timeout_seconds: HTTP request timeout in seconds.
            basic_auth_username: Optional basic auth username.
            basic_auth_password: Optional basic auth password.
            transport: Optional `httpx` transport override, used by tests.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_base_url = base_url.strip()
        if not normalized_base_url:
            raise ValueError("base_url must not be blank")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")
        if (basic_auth_username is None) != (basic_auth_password is None):
            raise ValueError("basic_auth_username and basic_auth_password must be set together")

        auth = None
        if basic_auth_username is not None and basic_auth_password is not None:
            auth = httpx.BasicAuth(basic_auth_username, basic_auth_password)

        self._base_url = normalized_base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=request_timeout_seconds,
            auth=auth,
            headers={"User-Agent": self._USER_AGENT},
            transport=transport,
        )

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""

        self._client.close()

    def __enter__(self) -> "FlinkRestClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def rest_retrieve_jobs(self) -> list[Job]:
        """Return all jobs from `GET /jobs/overview`.

        Returns:
            list[Job]: Jobs in cluster-reported order.

        Raises:
            ConnectionError: Raised for transport failures.
            RuntimeError: Raised when the response contract is invalid.
        """

        payload = self._client_request_json("GET", "/jobs/overview")
        raw_jobs = payload.get("jobs")
        if not isinstance(raw_jobs, list):
            raise FlinkApiResponseError("Flink jobs overview response missing jobs list")

        jobs: list[Job] = []
        for raw_job in raw_jobs:
            if not isinstance(raw_job, dict):
                raise FlinkApiResponseError("Flink jobs overview entry is not an object")
            jobs.append(
                Job(
                    job_id=str(raw_job.get("jid", "")),
                    name=str(raw_job.get("name", "")),
                    status=str(raw_job.get("state", "")),
                )
            )
        return jobs

    def rest_create_savepoint(self, job_id: str, target_directory: str) -> SavepointCreationHandle:
        """Trigger a savepoint through `POST /jobs/{job_id}/savepoints`.

        Args:
            job_id: Cluster job identifier.
            target_directory: Directory the cluster writes the savepoint into.

        Returns:
            SavepointCreationHandle: Handle carrying the trigger request id.

        Raises:
            ConnectionError: Raised for transport failures.
            RuntimeError: Raised when the cluster rejects the request.
        """

        payload = self._client_request_json(
            "POST",
            f"/jobs/{job_id}/savepoints",
            json={"target-directory": target_directory, "cancel-job": False},
        )
        request_id = str(payload.get("request-id") or "").strip()
        if not request_id:
            raise FlinkApiResponseError("Flink savepoint trigger response missing request-id")
        return SavepointCreationHandle(job_id=job_id, request_id=request_id)

    def rest_monitor_savepoint_creation(self, job_id: str, request_id: str) -> SavepointCreationState:
        """Read savepoint operation state from `GET /jobs/{job_id}/savepoints/{request_id}`.

        A `COMPLETED` status that carries a failure cause is reported as `FAILED`.

        Args:
            job_id: Cluster job identifier.
            request_id: Savepoint trigger id.

        Returns:
            SavepointCreationState: Normalized operation state.

        Raises:
            ConnectionError: Raised for transport failures.
            RuntimeError: Raised when the status payload is invalid.
        """

        payload = self._client_request_json("GET", f"/jobs/{job_id}/savepoints/{request_id}")
        status_payload = payload.get("status")
        status_id = ""
        if isinstance(status_payload, dict):
            status_id = str(status_payload.get("id") or "").strip().upper()
        if status_id not in self._KNOWN_SAVEPOINT_STATUSES:
            raise FlinkApiResponseError(
                f"Flink savepoint status response has unknown status id={status_id or 'MISSING'}"
            )

        operation_payload = payload.get("operation")
        if not isinstance(operation_payload, dict):
            operation_payload = {}
        location = operation_payload.get("location")
        failure_cause = self._client_describe_failure_cause(operation_payload.get("failure-cause"))

        if status_id == SAVEPOINT_STATUS_COMPLETED and failure_cause is not None:
            status_id = SAVEPOINT_STATUS_FAILED
        return SavepointCreationState(
            status=status_id,
            location=str(location) if location is not None else None,
            failure_cause=failure_cause,
        )

    def rest_terminate_job(self, job_id: str, mode: str = "cancel", target_directory: str | None = None) -> None:
        """Terminate one job.

        `cancel` sends `PATCH /jobs/{job_id}?mode=cancel`. `stop` sends
        `POST /jobs/{job_id}/stop`, which stops the job with a savepoint.

        Args:
            job_id: Cluster job identifier.
            mode: `cancel` or `stop`.
            target_directory: Savepoint directory for `stop`; the cluster default is used when `None`.

        Returns:
            None: Termination is acknowledged; the stop savepoint completes asynchronously.

        Raises:
            ValueError: Raised when mode is unsupported.
            ConnectionError: Raised for transport failures.
            RuntimeError: Raised when the cluster rejects termination.
        """

        if mode not in self._SUPPORTED_TERMINATE_MODES:
            raise FlinkApiRequestError(f"unsupported terminate mode '{mode}'")
        if mode == "cancel":
            if target_directory is not None:
                raise FlinkApiRequestError("target_directory is only supported for terminate mode 'stop'")
            self._client_request("PATCH", f"/jobs/{job_id}", params={"mode": "cancel"})
            return

        stop_body: dict[str, Any] = {"drain": False}
        if target_directory is not None:
            stop_body["targetDirectory"] = target_directory
        self._client_request("POST", f"/jobs/{job_id}/stop", json=stop_body)

    def rest_upload_jar(self, local_filename: str) -> UploadedJar:
        """Upload a local JAR through multipart `POST /jars/upload`.

        Args:
            local_filename: Local JAR path.

        Returns:
            UploadedJar: JAR id (basename of the stored file) and upload status.

        Raises:
            ValueError: Raised when the local file cannot be read.
            ConnectionError: Raised for transport failures.
            RuntimeError: Raised when the upload is rejected.
        """

        try:
            with open(local_filename, "rb") as jar_file:
                jar_bytes = jar_file.read()
        except OSError as error:
            raise FlinkApiRequestError(f"jar file {local_filename} could not be read") from error

        payload = self._client_request_json(
            "POST",
            "/jars/upload",
            files={"jarfile": (os.path.basename(local_filename), jar_bytes, self._JAR_CONTENT_TYPE)},
        )
        stored_filename = str(payload.get("filename") or "").strip()
        upload_status = str(payload.get("status") or "").strip()
        if not stored_filename:
            raise FlinkApiResponseError("Flink jar upload response missing filename")
        if upload_status.lower() != "success":
            raise FlinkApiResponseError(f"Flink jar upload failed with status={upload_status or 'UNKNOWN'}")
        return UploadedJar(remote_filename=os.path.basename(stored_filename), status=upload_status)

    def rest_run_jar(self, request: RunJarRequest) -> None:
        """Start an uploaded JAR through `POST /jars/{jar_id}/run`.

        Args:
            request: Run parameters.

        Returns:
            None: Run is acknowledged without payload.

        Raises:
            ValueError: Raised when the JAR id is blank.
            ConnectionError: Raised for transport failures.
            RuntimeError: Raised when the cluster rejects the run.
        """

        jar_id = request.remote_filename.strip()
        if not jar_id:
            raise FlinkApiRequestError("remote_filename must not be blank")

        body: dict[str, Any] = {"allowNonRestoredState": request.allow_non_restored_state}
        if request.entry_class:
            body["entryClass"] = request.entry_class
        if request.program_args:
            body["programArgs"] = request.program_args
        if request.parallelism is not None:
            body["parallelism"] = request.parallelism
        if request.savepoint_path:
            body["savepointPath"] = request.savepoint_path
        self._client_request_json("POST", f"/jars/{jar_id}/run", json=body)

    def _client_request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Execute one HTTP request and map transport and status failures.

        Args:
            method: HTTP method.
            path: Path relative to the configured base URL.
            **kwargs: Extra `httpx` request arguments.

        Returns:
            httpx.Response: Successful response.

        Raises:
            TimeoutError: Raised when the request times out.
            ConnectionError: Raised for network failures.
            RuntimeError: Raised for HTTP status >= 400.
        """

        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as error:
            raise FlinkApiTimeoutError(f"Flink request {method} {path} timed out") from error
        except httpx.HTTPError as error:
            raise FlinkApiConnectionError(f"Flink request {method} {path} failed: {error}") from error

        if response.status_code >= 400:
            raise FlinkApiResponseError(
                f"Flink upstream returned HTTP {response.status_code} for {method} {path}: "
                f"{self._client_describe_error_body(response)}",
                status_code=response.status_code,
            )
        return response

    def _client_request_json(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """Execute one HTTP request and decode a JSON object response body.

        An empty body decodes to an empty dictionary.
        """

        response = self._client_request(method, path, **kwargs)
        if not response.content:
            return {}
        try:
            payload = response.json()
        except ValueError as error:
            raise FlinkApiResponseError(f"Flink response for {method} {path} is not valid JSON") from error
        if not isinstance(payload, dict):
            raise FlinkApiResponseError(f"Flink response for {method} {path} is not a JSON object")
        return payload

    def _client_describe_error_body(self, response: httpx.Response) -> str:
        """Return the Flink `errors` list joined into one line, or the raw body text."""

        try:
            payload = response.json()
        except ValueError:
            return response.text.strip() or "empty response body"
        if isinstance(payload, dict) and isinstance(payload.get("errors"), list):
            return "; ".join(str(item).strip().splitlines()[0] for item in payload["errors"] if str(item).strip())
        return response.text.strip()

    def _client_describe_failure_cause(self, failure_cause: object) -> str | None:
        if failure_cause is None:
            return None
        if isinstance(failure_cause, dict):
            stack_trace = str(failure_cause.get("stack-trace") or "").strip()
            if stack_trace:
                return stack_trace.splitlines()[0]
            return str(failure_cause.get("class") or "unknown failure")
        return str(failure_cause)
