"""Application bootstrap wiring for startup validation and dependency assembly."""

from flink_deployer.adapters import FlinkRestClient
from flink_deployer.config import AppSettings, config_load_settings
from flink_deployer.jobs import (
    DeployerOperator,
    DeployerOperatorConfig,
    SavepointCreationMonitor,
    SavepointDirectoryResolver,
)


def bootstrap_create_flink_client(settings: AppSettings) -> FlinkRestClient:
    """Build the REST adapter from validated settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        FlinkRestClient: Adapter owning one HTTP connection pool.

    Raises:
        ValueError: Raised when adapter config values are invalid.
    """

    return FlinkRestClient(
        base_url=settings.flink_base_url,
        request_timeout_seconds=settings.flink_api_timeout_seconds,
        basic_auth_username=settings.flink_basic_auth_username,
        basic_auth_password=settings.flink_basic_auth_password,
    )


def bootstrap_create_operator(
    flink_client: FlinkRestClient,
    settings: AppSettings | None = None,
) -> DeployerOperator:
    """Assemble the operator around an existing REST adapter.

    Args:
        flink_client: REST adapter; the caller owns and closes it.
        settings: Optional settings; loaded from the environment when omitted.

    Returns:
        DeployerOperator: Fully wired operator instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    return DeployerOperator(
        flink_api=flink_client,
        savepoint_monitor=SavepointCreationMonitor(
            flink_api=flink_client,
            poll_interval_seconds=resolved_settings.savepoint_poll_interval_seconds,
        ),
        savepoint_resolver=SavepointDirectoryResolver(),
        config=DeployerOperatorConfig(savepoint_timeout_seconds=resolved_settings.savepoint_timeout_seconds),
    )
