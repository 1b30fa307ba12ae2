"""Regression tests for runtime settings validation and logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from flink_deployer.config import (
    AppSettings,
    SettingsLoadError,
    StageEventFormatter,
    config_load_settings,
)
from flink_deployer.domain import domain_build_stage_event

_SETTINGS_ENV_NAMES = (
    "FLINK_BASE_URL",
    "FLINK_API_TIMEOUT_SECONDS",
    "FLINK_BASIC_AUTH_USERNAME",
    "FLINK_BASIC_AUTH_PASSWORD",
    "SAVEPOINT_TIMEOUT_SECONDS",
    "SAVEPOINT_POLL_INTERVAL_SECONDS",
    "LOG_LEVEL",
)


@pytest.fixture(name="clean_environment")
def _clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> pytest.MonkeyPatch:
    """Isolate settings from process environment and working-directory dotenv files.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        tmp_path: Pytest temporary directory fixture.

    Returns:
        pytest.MonkeyPatch: Monkeypatch fixture for further env overrides.

    Raises:
        RuntimeError: This fixture does not raise runtime errors.
    """

    monkeypatch.chdir(tmp_path)
    for env_name in _SETTINGS_ENV_NAMES:
        monkeypatch.delenv(env_name, raising=False)
    return monkeypatch


def test_config_settings_defaults(clean_environment: pytest.MonkeyPatch) -> None:
    """Load documented defaults when nothing is configured.

    Args:
        clean_environment: Isolated environment fixture.

    Returns:
        None: Assertions validate default values.

    Raises:
        AssertionError: Raised when defaults differ.
    """

    settings = config_load_settings()

    assert settings.flink_base_url == "http://localhost:8081"
    assert settings.flink_api_timeout_seconds == 30.0
    assert settings.savepoint_timeout_seconds == 60.0
    assert settings.savepoint_poll_interval_seconds == 0.1
    assert settings.log_level == "INFO"
    assert settings.flink_basic_auth_username is None


def test_config_settings_reads_dotenv_file(clean_environment: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Read values from a `.env` file in the working directory.

    Args:
        clean_environment: Isolated environment fixture.
        tmp_path: Pytest temporary directory fixture.

    Returns:
        None: Assertions validate dotenv values.

    Raises:
        AssertionError: Raised when dotenv values are ignored.
    """

    (tmp_path / ".env").write_text(
        "FLINK_BASE_URL=http://jobmanager:8081\nSAVEPOINT_TIMEOUT_SECONDS=120\n",
        encoding="utf-8",
    )

    settings = config_load_settings()

    assert settings.flink_base_url == "http://jobmanager:8081"
    assert settings.savepoint_timeout_seconds == 120.0


def test_config_settings_normalizes_log_level(clean_environment: pytest.MonkeyPatch) -> None:
    """Upper-case known log level names.

    Args:
        clean_environment: Isolated environment fixture.

    Returns:
        None: Assertions validate normalization.

    Raises:
        AssertionError: Raised when level is not normalized.
    """

    clean_environment.setenv("LOG_LEVEL", " debug ")

    assert config_load_settings().log_level == "DEBUG"


@pytest.mark.parametrize(
    ("env_name", "env_value"),
    [
        ("FLINK_BASE_URL", "   "),
        ("LOG_LEVEL", "chatty"),
        ("SAVEPOINT_TIMEOUT_SECONDS", "0"),
        ("SAVEPOINT_POLL_INTERVAL_SECONDS", "1"),
        ("FLINK_BASIC_AUTH_USERNAME", "deployer"),
    ],
)
def test_config_settings_rejects_invalid_values(
    clean_environment: pytest.MonkeyPatch,
    env_name: str,
    env_value: str,
) -> None:
    """Wrap validation failures in one startup error.

    Args:
        clean_environment: Isolated environment fixture.
        env_name: Environment variable to override.
        env_value: Invalid value.

    Returns:
        None: Assertions validate wrapped error.

    Raises:
        AssertionError: Raised when invalid settings load.
    """

    clean_environment.setenv(env_name, env_value)

    with pytest.raises(SettingsLoadError, match="Startup configuration validation failed"):
        config_load_settings()


def test_config_settings_accepts_complete_basic_auth_pair(clean_environment: pytest.MonkeyPatch) -> None:
    """Accept basic auth when both halves are configured.

    Args:
        clean_environment: Isolated environment fixture.

    Returns:
        None: Assertions validate loaded credentials.

    Raises:
        AssertionError: Raised when the pair is rejected.
    """

    clean_environment.setenv("FLINK_BASIC_AUTH_USERNAME", "deployer")
    clean_environment.setenv("FLINK_BASIC_AUTH_PASSWORD", "secret")

    settings = AppSettings()

    assert settings.flink_basic_auth_username == "deployer"
    assert settings.flink_basic_auth_password == "secret"


def test_config_stage_event_formatter_appends_details() -> None:
    """Append stage event details to the formatted message.

    Returns:
        None: Assertions validate formatted output.

    Raises:
        AssertionError: Raised when details are missing.
    """

    formatter = StageEventFormatter("%(levelname)s %(message)s")
    record = logging.LogRecord("flink_deployer", logging.INFO, __file__, 1, "terminate completed", None, None)
    record.stage_event = domain_build_stage_event(
        stage="terminate",
        status="completed",
        job_id="Job-A",
        details={"mode": "stop"},
    )

    assert formatter.format(record) == "INFO terminate completed job_id=Job-A mode=stop"
