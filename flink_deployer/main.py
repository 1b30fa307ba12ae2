"""Main module entrypoint for command-line execution.

This module validates startup configuration, wires the operator and runs one
deploy, update, terminate or list command against the configured cluster.
"""

from __future__ import annotations

import argparse
import logging
import sys

from flink_deployer.adapters import FlinkApiError
from flink_deployer.bootstrap import bootstrap_create_flink_client, bootstrap_create_operator
from flink_deployer.config import SettingsLoadError, config_configure_logging, config_load_settings
from flink_deployer.domain import (
    STAGE_STATUS_FAILED,
    DeployJobRequest,
    TerminateJobRequest,
    UpdateJobRequest,
    domain_build_stage_event,
)
from flink_deployer.jobs import DeployerOperationError, DeployerOperatorPort
from flink_deployer.storage import StorageBackendError

logger = logging.getLogger(__name__)

_MAIN_HANDLED_ERRORS = (DeployerOperationError, FlinkApiError, StorageBackendError, OSError, ValueError, RuntimeError)


def main_build_argument_parser() -> argparse.ArgumentParser:
    """Build the command-line parser with one sub-command per operation.

    Returns:
        argparse.ArgumentParser: Configured parser.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    argument_parser = argparse.ArgumentParser(
        prog="flink-deployer",
        description="Deploy, update and terminate jobs on a Flink cluster",
    )
    subparsers = argument_parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List jobs known to the cluster")

    deploy_parser = subparsers.add_parser("deploy", help="Deploy a job, optionally restoring from a savepoint")
    _main_add_artifact_arguments(deploy_parser)
    deploy_parser.add_argument(
        "--savepoint-dir",
        dest="savepoint_dir",
        type=str,
        help="Restore from the latest savepoint in this directory",
    )
    deploy_parser.add_argument("--savepoint-path", dest="savepoint_path", type=str, help="Restore from this savepoint")

    update_parser = subparsers.add_parser("update", help="Savepoint, cancel and restart a running job with a new JAR")
    update_parser.add_argument(
        "--job-name-base",
        dest="job_name_base",
        type=str,
        default="",
        help="Base name of the job family to update",
    )
    _main_add_artifact_arguments(update_parser)
    update_parser.add_argument(
        "--savepoint-dir",
        dest="savepoint_dir",
        type=str,
        default="",
        help="Directory savepoints are written to",
    )
    update_parser.add_argument(
        "--fallback-to-deploy",
        dest="fallback_to_deploy",
        action="store_true",
        help="Deploy instead of failing when no instance is running",
    )

    terminate_parser = subparsers.add_parser("terminate", help="Terminate a running job")
    terminate_parser.add_argument("--job-name-base", dest="job_name_base", type=str, help="Base name of the job")
    terminate_parser.add_argument("--job-id", dest="job_id", type=str, help="Id of the job to terminate")
    terminate_parser.add_argument(
        "--mode",
        dest="mode",
        choices=("cancel", "stop"),
        default="cancel",
        help="Termination mode; stop takes a savepoint first",
    )
    terminate_parser.add_argument(
        "--savepoint-dir",
        dest="savepoint_dir",
        type=str,
        help="Savepoint directory for stop mode; the cluster default is used when omitted",
    )
    return argument_parser


def _main_add_artifact_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--file-name", dest="file_name", type=str, default="", help="Local JAR to upload")
    parser.add_argument("--remote-file-name", dest="remote_file_name", type=str, help="Already uploaded JAR id")
    parser.add_argument("--entry-class", dest="entry_class", type=str, help="Entry class override")
    parser.add_argument("--parallelism", dest="parallelism", type=int, help="Parallelism override")
    parser.add_argument("--program-args", dest="program_args", type=str, help="Program arguments")
    parser.add_argument(
        "--allow-non-restored-state",
        dest="allow_non_restored_state",
        action="store_true",
        help="Skip savepoint state that cannot be mapped to the new program",
    )


def main_run_command(operator: DeployerOperatorPort, parsed_arguments: argparse.Namespace) -> None:
    """Dispatch parsed arguments to one operator call.

    Args:
        operator: Wired operator.
        parsed_arguments: Parsed command-line arguments.

    Returns:
        None: Command output is printed to stdout as side effect.

    Raises:
        DeployerOperationError: Raised when the operation fails.
        ValueError: Raised when the command is unknown.
    """

    if parsed_arguments.command == "list":
        for job in operator.operator_retrieve_jobs():
            print(f"{job.job_id}\t{job.status}\t{job.name}")
        return

    if parsed_arguments.command == "deploy":
        operator.operator_deploy(
            DeployJobRequest(
                local_filename=parsed_arguments.file_name,
                remote_filename=parsed_arguments.remote_file_name,
                savepoint_directory=parsed_arguments.savepoint_dir,
                savepoint_path=parsed_arguments.savepoint_path,
                entry_class=parsed_arguments.entry_class,
                parallelism=parsed_arguments.parallelism,
                program_args=parsed_arguments.program_args,
                allow_non_restored_state=parsed_arguments.allow_non_restored_state,
            )
        )
        return

    if parsed_arguments.command == "update":
        operator.operator_update(
            UpdateJobRequest(
                job_name_base=parsed_arguments.job_name_base,
                local_filename=parsed_arguments.file_name,
                savepoint_directory=parsed_arguments.savepoint_dir,
                fallback_to_deploy=parsed_arguments.fallback_to_deploy,
                remote_filename=parsed_arguments.remote_file_name,
                entry_class=parsed_arguments.entry_class,
                parallelism=parsed_arguments.parallelism,
                program_args=parsed_arguments.program_args,
                allow_non_restored_state=parsed_arguments.allow_non_restored_state,
            )
        )
        return

    if parsed_arguments.command == "terminate":
        operator.operator_terminate(
            TerminateJobRequest(
                job_name_base=parsed_arguments.job_name_base,
                job_id=parsed_arguments.job_id,
                mode=parsed_arguments.mode,
                savepoint_directory=parsed_arguments.savepoint_dir,
            )
        )
        return

    raise ValueError(f"unsupported command={parsed_arguments.command}")


def main(argv: list[str] | None = None) -> None:
    """Run the selected command with validated startup configuration.

    Args:
        argv: Optional argument list; defaults to `sys.argv[1:]`.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SystemExit: Raised with status 1 when configuration or the operation fails.
    """

    parsed_arguments = main_build_argument_parser().parse_args(argv)

    try:
        settings = config_load_settings()
    except SettingsLoadError as error:
        print(f"error: {error}", file=sys.stderr)
        raise SystemExit(1) from error

    config_configure_logging(level=settings.log_level)

    try:
        with bootstrap_create_flink_client(settings) as flink_client:
            operator = bootstrap_create_operator(flink_client=flink_client, settings=settings)
            main_run_command(operator=operator, parsed_arguments=parsed_arguments)
    except _MAIN_HANDLED_ERRORS as error:
        logger.error(
            "%s failed",
            parsed_arguments.command,
            extra={
                "stage_event": domain_build_stage_event(
                    stage=parsed_arguments.command,
                    status=STAGE_STATUS_FAILED,
                    details={
                        "error_type": type(error).__name__,
                        "error_code": getattr(error, "error_code", None),
                    },
                )
            },
        )
        print(f"error: {error}", file=sys.stderr)
        raise SystemExit(1) from error


if __name__ == "__main__":
    main()
