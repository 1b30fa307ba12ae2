"""Configuration package for runtime settings, logging and startup validation."""

from .logging_setup import StageEventFormatter, config_configure_logging
from .settings import AppSettings, SettingsLoadError, config_load_settings

__all__ = [
	"AppSettings",
	"SettingsLoadError",
	"StageEventFormatter",
	"config_configure_logging",
	"config_load_settings",
]
