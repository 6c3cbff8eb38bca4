"""Settings and logging configuration."""

from sprintpulse.config.logging_config import configure_logging
from sprintpulse.config.settings import EngineSettings, get_settings

__all__ = [
    "EngineSettings",
    "configure_logging",
    "get_settings",
]
