"""Stage events emitted while a deploy, update or terminate run advances."""

from __future__ import annotations

from typing import Any, Final

STAGE_STATUS_STARTED: Final[str] = "started"
STAGE_STATUS_COMPLETED: Final[str] = "completed"
STAGE_STATUS_FAILED: Final[str] = "failed"
STAGE_STATUS_SKIPPED: Final[str] = "skipped"
STAGE_STATUSES: Final[frozenset[str]] = frozenset(
    {STAGE_STATUS_STARTED, STAGE_STATUS_COMPLETED, STAGE_STATUS_FAILED, STAGE_STATUS_SKIPPED}
)


def domain_build_stage_event(
    stage: str,
    status: str,
    job_id: str | None = None,
    job_name_base: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, object]:
    """Build one stage event scoped to the job it concerns.

    The job context comes first in `details`, followed by stage-specific values.
    Values that are `None` are left out.

    Args:
        stage: Stage name, for example `create_savepoint` or `cancel`.
        status: One of `started`, `completed`, `failed`, `skipped`.
        job_id: Cluster job the stage acted on, when known.
        job_name_base: Job family the run targets, when known.
        details: Optional stage-specific values such as a savepoint path.

    Returns:
        dict[str, object]: Event with `stage`, `status` and, when any value is set, `details`.

    Raises:
        ValueError: Raised when status is not a known stage status.
    """

    if status not in STAGE_STATUSES:
        raise ValueError(f"unknown stage status={status}")

    event_details: dict[str, object] = {}
    if job_name_base is not None:
        event_details["job_name_base"] = job_name_base
    if job_id is not None:
        event_details["job_id"] = job_id
    for key, value in (details or {}).items():
        if value is not None:
            event_details[key] = value

    event_payload: dict[str, object] = {"stage": stage, "status": status}
    if event_details:
        event_payload["details"] = event_details
    return event_payload


def domain_format_stage_details(stage_event: dict[str, object]) -> str:
    """Render event details as space separated `key=value` pairs in insertion order."""

    details = stage_event.get("details")
    if not isinstance(details, dict):
        return ""
    return " ".join(f"{key}={value}" for key, value in details.items())
