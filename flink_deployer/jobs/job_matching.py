"""Running-job selection by logical base name."""

from __future__ import annotations

from collections.abc import Iterable

from flink_deployer.domain import JOB_STATUS_RUNNING, Job


# FSN[2026-10-19]: ALWAYS match base names as a plain prefix without a separator guard.
# Context: versioned display names like `jobA v1.1` must track the `jobA` family.
# Guard: `job` also matches `jobXYZ`; callers choose base names that are not prefixes of other families.
# Test: test_jobs_job_matching_prefix_matches_without_separator
def job_filter_running_jobs_by_name(jobs: Iterable[Job], job_name_base: str) -> list[Job]:
    """Return running jobs whose name starts with the base name.

    Args:
        jobs: Job snapshot fetched from the cluster.
        job_name_base: Logical base name of the job family.

    Returns:
        list[Job]: Matching running jobs in input order.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return [job for job in jobs if job.status == JOB_STATUS_RUNNING and job.name.startswith(job_name_base)]
