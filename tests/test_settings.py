"""Tests for engine settings and logging setup."""

from datetime import date

import pytest
import structlog
from pydantic import ValidationError

from sprintpulse.config.logging_config import configure_logging
from sprintpulse.config.settings import EngineSettings, get_settings
from sprintpulse.domain.models import WorkWeekDefinition


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove any engine settings from the environment."""
    for name in (
        "SPRINTPULSE_WORKING_DAYS",
        "SPRINTPULSE_HOURS_PER_DAY",
        "SPRINTPULSE_MANAGER_HOURS_PER_DAY",
        "SPRINTPULSE_SPRINT_LENGTH_WEEKS",
        "SPRINTPULSE_FIRST_SPRINT_START",
        "SPRINTPULSE_LOG_LEVEL",
        "SPRINTPULSE_LOG_JSON",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestEngineSettings:
    """Tests for EngineSettings."""

    def test_defaults(self):
        """Defaults describe a Sunday-Thursday week of 7-hour days."""
        settings = EngineSettings(_env_file=None)
        assert settings.work_week() == WorkWeekDefinition()
        assert settings.manager_hours_per_day == 3.5
        assert settings.sprint_length_weeks == 2
        assert settings.first_sprint_start is None
        assert settings.log_level == "INFO"
        assert settings.log_json is False

    def test_from_environment(self, monkeypatch):
        """Values are read from SPRINTPULSE_* variables."""
        monkeypatch.setenv("SPRINTPULSE_WORKING_DAYS", "1,2,3,4,5")
        monkeypatch.setenv("SPRINTPULSE_HOURS_PER_DAY", "8")
        monkeypatch.setenv("SPRINTPULSE_FIRST_SPRINT_START", "2024-01-07")
        monkeypatch.setenv("SPRINTPULSE_LOG_JSON", "true")

        settings = EngineSettings(_env_file=None)

        assert settings.work_week() == WorkWeekDefinition(
            working_days=frozenset({1, 2, 3, 4, 5}), hours_per_day=8
        )
        assert settings.first_sprint_start == date(2024, 1, 7)
        assert settings.log_json is True

    def test_rejects_bad_weekday(self, monkeypatch):
        """Weekday indices outside 0..6 fail at load time."""
        monkeypatch.setenv("SPRINTPULSE_WORKING_DAYS", "0,7")
        with pytest.raises(ValidationError):
            EngineSettings(_env_file=None)

    def test_rejects_empty_working_days(self, monkeypatch):
        """A work week needs at least one working day."""
        monkeypatch.setenv("SPRINTPULSE_WORKING_DAYS", "")
        with pytest.raises(ValidationError):
            EngineSettings(_env_file=None)

        monkeypatch.setenv("SPRINTPULSE_WORKING_DAYS", " , ")
        with pytest.raises(ValidationError):
            EngineSettings(_env_file=None)

    def test_rejects_non_positive_hours(self, monkeypatch):
        """Hours per day must be positive."""
        monkeypatch.setenv("SPRINTPULSE_HOURS_PER_DAY", "0")
        with pytest.raises(ValidationError):
            EngineSettings(_env_file=None)

    def test_get_settings_is_cached(self):
        """get_settings returns the same instance."""
        assert get_settings() is get_settings()


class TestLogging:
    """Tests for configure_logging."""

    def test_configures_structlog(self):
        """After configuration, loggers bind and log without error."""
        configure_logging("DEBUG", json=True)
        logger = structlog.get_logger("sprintpulse.test")
        logger.info("configured", check=True)
        assert structlog.is_configured()
