"""Process-wide logging configuration for CLI runs."""

from __future__ import annotations

import logging
import logging.config

from flink_deployer.domain import domain_format_stage_details


class StageEventFormatter(logging.Formatter):
    """Formatter appending the structured stage event carried on a record, when present."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        stage_event = getattr(record, "stage_event", None)
        if isinstance(stage_event, dict):
            rendered_details = domain_format_stage_details(stage_event)
            if rendered_details:
                message = f"{message} {rendered_details}"
        return message


def config_configure_logging(level: str = "INFO") -> None:
    """Configure root logging to stderr with stage event details.

    Args:
        level: Root log level name.

    Returns:
        None: Logging is configured as side effect.

    Raises:
        ValueError: Raised when the level name is unknown.
    """

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "stage_event": {
                    "()": StageEventFormatter,
                    "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
                }
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "formatter": "stage_event",
                    "stream": "ext://sys.stderr",
                }
            },
            "root": {"level": level.upper(), "handlers": ["stderr"]},
        }
    )
