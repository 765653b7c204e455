"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from datetime import date, time
from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import WorkCalendar

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "slacalc.yaml"

# Yearly public-holiday calendar shipped with the ticket form
DEFAULT_HOLIDAYS: List[date] = [
    date(2025, 1, 1), date(2025, 2, 12), date(2025, 4, 6),
    date(2025, 4, 13), date(2025, 4, 14), date(2025, 4, 15),
    date(2025, 5, 1), date(2025, 5, 5), date(2025, 5, 12),
    date(2025, 6, 3), date(2025, 7, 10), date(2025, 7, 28),
    date(2025, 8, 12), date(2025, 10, 13), date(2025, 10, 23),
    date(2025, 12, 5), date(2025, 12, 10), date(2025, 12, 31),
]


class WorkHoursConfig(BaseModel):
    """Daily work window."""
    start: time = time(9, 0)
    end: time = time(18, 0)

    @field_validator("start", "end", mode="before")
    @classmethod
    def parse_sexagesimal(cls, value):
        """
        Accept YAML's base-60 integers.

        PyYAML reads an unquoted ``18:00`` as the integer 1080, which is
        exactly the minute offset from midnight.
        """
        if isinstance(value, int) and not isinstance(value, bool):
            if not 0 <= value < 24 * 60:
                raise ValueError(f"Time must be within one day, got {value} minutes")
            return time(hour=value // 60, minute=value % 60)
        return value

    @model_validator(mode="after")
    def validate_hours_order(self) -> "WorkHoursConfig":
        """Ensure the configured window opens before it closes."""
        if self.end <= self.start:
            raise ValueError("work_hours.end must be later than work_hours.start")
        return self


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Asia/Bangkok"
    work_hours: WorkHoursConfig = Field(default_factory=WorkHoursConfig)
    work_days: List[int] = Field(default_factory=lambda: [0, 1, 2, 3, 4])  # Monday - Friday
    holidays: List[date] = Field(default_factory=lambda: list(DEFAULT_HOLIDAYS))

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except (ValueError, KeyError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("work_days")
    @classmethod
    def validate_work_days(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        if not value:
            raise ValueError("work_days must contain at least one weekday")
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"work_days must be between 0 and 6, got {invalid_days}")
        # Preserve order while removing duplicates
        seen: set[int] = set()
        deduped: List[int] = []
        for day in value:
            if day not in seen:
                deduped.append(day)
                seen.add(day)
        return deduped

    @field_validator("holidays")
    @classmethod
    def validate_holidays(cls, value: List[date]) -> List[date]:
        return sorted(set(value))

    def build_calendar(self) -> WorkCalendar:
        """Create the immutable work calendar described by this config."""
        return WorkCalendar.from_times(
            start=self.work_hours.start,
            end=self.work_hours.end,
            work_days=self.work_days,
            holidays=self.holidays,
            timezone=self.timezone,
        )

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a {CONFIG_FILENAME} file. See slacalc.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for slacalc.yaml in current directory
    config_path = Path.cwd() / CONFIG_FILENAME

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / CONFIG_FILENAME

    return config_path


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load the configuration, falling back to built-in defaults.

    An explicitly given path must exist. When no path is given and no
    default config file is found, the defaults are used.
    """
    if config_path is not None:
        return AppConfig.load_from_yaml(config_path)

    default_path = get_default_config_path()
    if not default_path.exists():
        logger.info("No %s found, using built-in defaults", CONFIG_FILENAME)
        return AppConfig()

    return AppConfig.load_from_yaml(default_path)
