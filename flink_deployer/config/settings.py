"""Typed runtime settings with dotenv support and startup validation."""

import logging

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Deployer settings for cluster access and savepoint handling.

    Environment variable names map directly to field names in uppercase.
    Example: `flink_base_url` reads from `FLINK_BASE_URL`.

    Attributes:
        flink_base_url: JobManager REST endpoint.
        flink_api_timeout_seconds: HTTP request timeout for REST calls.
        flink_basic_auth_username: Optional basic auth username.
        flink_basic_auth_password: Optional basic auth password.
        savepoint_timeout_seconds: Wait budget for savepoint creation during update.
        savepoint_poll_interval_seconds: Fixed delay between savepoint status polls.
        log_level: Root log level name.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    flink_base_url: str = Field(default="http://localhost:8081")
    flink_api_timeout_seconds: float = Field(default=30.0, gt=0)
    flink_basic_auth_username: str | None = Field(default=None)
    flink_basic_auth_password: str | None = Field(default=None)
    savepoint_timeout_seconds: float = Field(default=60.0, gt=0)
    savepoint_poll_interval_seconds: float = Field(default=0.1, gt=0, lt=1)
    log_level: str = Field(default="INFO")

    @field_validator("flink_base_url")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in logging.getLevelNamesMapping():
            raise ValueError(f"log_level must be a logging level name, got {value!r}")
        return normalized_value

    @model_validator(mode="after")
    def _validate_basic_auth_pair(self) -> "AppSettings":
        if (self.flink_basic_auth_username is None) != (self.flink_basic_auth_password is None):
            raise ValueError("flink_basic_auth_username and flink_basic_auth_password must be set together")
        return self


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when required settings are missing or invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
