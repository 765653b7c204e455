"""
Tests for configuration loading.
"""

from datetime import date, time

import pytest
from pydantic import ValidationError

from slacalc.config import DEFAULT_HOLIDAYS, AppConfig, WorkHoursConfig, load_config


class TestWorkHoursConfig:
    """Tests for WorkHoursConfig."""

    def test_parses_strings(self):
        """HH:MM strings become time objects."""
        hours = WorkHoursConfig(start="08:30", end="17:15")

        assert hours.start == time(8, 30)
        assert hours.end == time(17, 15)

    def test_accepts_yaml_base60_integers(self):
        """PyYAML turns an unquoted 18:00 into 1080."""
        hours = WorkHoursConfig(start="09:00", end=1080)

        assert hours.end == time(18, 0)

    def test_end_must_follow_start(self):
        """The window must open before it closes."""
        with pytest.raises(ValidationError, match="must be later"):
            WorkHoursConfig(start="18:00", end="09:00")


class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults(self):
        """Defaults mirror the ticket form."""
        config = AppConfig()

        assert config.timezone == "Asia/Bangkok"
        assert config.work_days == [0, 1, 2, 3, 4]
        assert config.holidays == DEFAULT_HOLIDAYS

    def test_work_days_are_deduplicated(self):
        """Duplicates are removed while keeping order."""
        config = AppConfig(work_days=[4, 0, 4, 1])

        assert config.work_days == [4, 0, 1]

    @pytest.mark.parametrize("work_days", [[], [7], [-1, 2]])
    def test_invalid_work_days(self, work_days):
        """Empty or out-of-range weekdays are rejected."""
        with pytest.raises(ValidationError):
            AppConfig(work_days=work_days)

    def test_unknown_timezone(self):
        """Timezones are checked against the tz database."""
        with pytest.raises(ValidationError, match="Unknown timezone"):
            AppConfig(timezone="Mars/Olympus_Mons")

    def test_holidays_sorted_and_deduplicated(self):
        """Holidays are normalised to a sorted list of unique dates."""
        config = AppConfig(holidays=["2025-12-31", "2025-01-01", "2025-12-31"])

        assert config.holidays == [date(2025, 1, 1), date(2025, 12, 31)]

    def test_build_calendar(self):
        """The config produces an equivalent work calendar."""
        config = AppConfig(
            timezone="Europe/Berlin",
            work_hours={"start": "08:00", "end": "16:30"},
            work_days=[0, 2],
            holidays=["2025-01-01"],
        )

        calendar = config.build_calendar()

        assert calendar.day_start_minute == 480
        assert calendar.day_end_minute == 990
        assert calendar.work_days == frozenset({0, 2})
        assert calendar.holidays == frozenset({date(2025, 1, 1)})
        assert calendar.timezone == "Europe/Berlin"


class TestLoadFromYaml:
    """Tests for reading YAML files."""

    def test_load(self, tmp_path):
        """A complete file is loaded, unquoted times included."""
        config_path = tmp_path / "slacalc.yaml"
        config_path.write_text(
            "timezone: UTC\n"
            "work_hours:\n"
            "  start: '09:30'\n"
            "  end: 17:00\n"
            "work_days: [0, 1, 2, 3, 4, 5]\n"
            "holidays:\n"
            "  - 2025-04-14\n",
            encoding="utf-8",
        )

        config = AppConfig.load_from_yaml(config_path)

        assert config.timezone == "UTC"
        assert config.work_hours.start == time(9, 30)
        assert config.work_hours.end == time(17, 0)
        assert config.work_days == [0, 1, 2, 3, 4, 5]
        assert config.holidays == [date(2025, 4, 14)]

    def test_empty_file_gives_defaults(self, tmp_path):
        """An empty file is the same as no settings."""
        config_path = tmp_path / "slacalc.yaml"
        config_path.write_text("", encoding="utf-8")

        assert AppConfig.load_from_yaml(config_path) == AppConfig()

    def test_missing_file(self, tmp_path):
        """A missing file is reported."""
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Broken YAML is reported as a ValueError."""
        config_path = tmp_path / "slacalc.yaml"
        config_path.write_text("work_days: [0, 1\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(config_path)

    def test_root_must_be_mapping(self, tmp_path):
        """A list at the root is rejected."""
        config_path = tmp_path / "slacalc.yaml"
        config_path.write_text("- 1\n- 2\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(config_path)


class TestLoadConfig:
    """Tests for load_config fallbacks."""

    def test_explicit_path_must_exist(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        """Without any config file the built-in defaults are used."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(
            "slacalc.config.get_default_config_path", lambda: tmp_path / "slacalc.yaml"
        )

        assert load_config() == AppConfig()

    def test_default_path_is_read(self, tmp_path, monkeypatch):
        """A slacalc.yaml at the default location is picked up."""
        config_path = tmp_path / "slacalc.yaml"
        config_path.write_text("timezone: UTC\n", encoding="utf-8")
        monkeypatch.setattr("slacalc.config.get_default_config_path", lambda: config_path)

        assert load_config().timezone == "UTC"
