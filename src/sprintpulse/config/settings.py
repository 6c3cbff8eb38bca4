"""
Engine settings and configuration.
"""

from datetime import date
from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sprintpulse.domain.models import WorkWeekDefinition


class EngineSettings(BaseSettings):
    """Engine configuration, read from ``SPRINTPULSE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SPRINTPULSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Work week: comma-separated weekday indices, Sunday=0 ... Saturday=6
    working_days: str = "0,1,2,3,4"
    hours_per_day: float = 7.0
    manager_hours_per_day: float = 3.5

    # Sprint detection
    sprint_length_weeks: int = 2
    first_sprint_start: Optional[date] = None

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @field_validator("working_days")
    @classmethod
    def _check_working_days(cls, value: str) -> str:
        parts = [part.strip() for part in value.split(",") if part.strip()]
        if not parts:
            raise ValueError("at least one working day is required")
        for part in parts:
            if not part.isdigit() or not 0 <= int(part) <= 6:
                raise ValueError(f"working day {part!r} must be an index within 0..6")
        return value

    @field_validator("hours_per_day", "manager_hours_per_day")
    @classmethod
    def _check_positive_hours(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("hours must be positive")
        return value

    @field_validator("sprint_length_weeks")
    @classmethod
    def _check_sprint_length(cls, value: int) -> int:
        if value < 1:
            raise ValueError("sprint length must be at least one week")
        return value

    @property
    def working_day_indices(self) -> frozenset[int]:
        return frozenset(
            int(part) for part in self.working_days.split(",") if part.strip()
        )

    def work_week(self) -> WorkWeekDefinition:
        """Build the immutable work week described by these settings."""
        return WorkWeekDefinition(
            working_days=self.working_day_indices,
            hours_per_day=self.hours_per_day,
        )


@lru_cache()
def get_settings() -> EngineSettings:
    """Returns a cached instance of the engine settings."""
    return EngineSettings()
