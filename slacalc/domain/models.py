"""
Domain models for work calendars and time ranges.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from typing import FrozenSet, Iterable, Optional, Union

import pendulum

from .exceptions import CalendarConfigurationError

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must be before end.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> float:
        """Return the duration in minutes, keeping fractions of a minute."""
        return (self.end - self.start).total_seconds() / 60

    def clip(self, lower: datetime, upper: datetime) -> "TimeRange | None":
        """
        Clip the range to fit within bounds.
        Returns None if the range is completely outside bounds.
        """
        if self.end <= lower or self.start >= upper:
            return None

        return TimeRange(start=max(self.start, lower), end=min(self.end, upper))


def normalize_holidays(dates: Iterable[Union[date, str]]) -> FrozenSet[date]:
    """
    Reduce holidays to a set of plain calendar dates.

    Accepts dates, datetimes (time of day is dropped) and ISO 8601 strings.

    Raises:
        CalendarConfigurationError: If a value is none of these
    """
    normalized = set()
    for value in dates:
        if isinstance(value, str):
            try:
                value = pendulum.parse(value.strip())
            except ValueError as exc:
                raise CalendarConfigurationError(f"Invalid holiday date {value!r}: {exc}") from exc
        # datetime is a subclass of date, so it has to be checked first
        if isinstance(value, datetime):
            value = value.date()
        if not isinstance(value, date):
            raise CalendarConfigurationError(f"Holiday must be a date, got {value!r}")
        normalized.add(date(value.year, value.month, value.day))
    return frozenset(normalized)


def minute_of_day(value: time) -> int:
    """Offset of a wall-clock time from midnight, in whole minutes."""
    return value.hour * 60 + value.minute


@dataclass(frozen=True)
class WorkCalendar:
    """
    Work days, the daily work window and the holidays excluded from business time.

    Weekdays follow ``date.weekday()``: 0=Monday, 6=Sunday. The daily window is
    half-open, ``[day_start_minute, day_end_minute)``.
    """
    work_days: FrozenSet[int] = frozenset(range(5))
    day_start_minute: int = 9 * 60
    day_end_minute: int = 18 * 60
    holidays: FrozenSet[date] = field(default_factory=frozenset)
    timezone: Optional[str] = None

    def __post_init__(self):
        work_days = frozenset(self.work_days)
        if not work_days:
            raise CalendarConfigurationError("work_days must contain at least one weekday")
        invalid_days = sorted(day for day in work_days if day not in range(7))
        if invalid_days:
            raise CalendarConfigurationError(f"work_days must be between 0 and 6, got {invalid_days}")
        for name in ("day_start_minute", "day_end_minute"):
            value = getattr(self, name)
            if not 0 <= value <= MINUTES_PER_DAY:
                raise CalendarConfigurationError(
                    f"{name} must be between 0 and {MINUTES_PER_DAY}, got {value}"
                )
        if self.day_start_minute >= self.day_end_minute:
            raise CalendarConfigurationError(
                f"day_start_minute ({self.day_start_minute}) must be earlier than "
                f"day_end_minute ({self.day_end_minute})"
            )

        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "work_days", work_days)
        object.__setattr__(self, "holidays", normalize_holidays(self.holidays))

    @classmethod
    def from_times(
        cls,
        start: time,
        end: time,
        work_days: Iterable[int] = range(5),
        holidays: Iterable[date] = (),
        timezone: Optional[str] = None,
    ) -> "WorkCalendar":
        """Build a calendar from wall-clock start and end times."""
        return cls(
            work_days=frozenset(work_days),
            day_start_minute=minute_of_day(start),
            day_end_minute=minute_of_day(end),
            holidays=frozenset(holidays),
            timezone=timezone,
        )

    @property
    def business_minutes_per_day(self) -> int:
        return self.day_end_minute - self.day_start_minute

    def with_holidays(self, dates: Iterable[date]) -> "WorkCalendar":
        """Return a copy of this calendar with the holiday set replaced."""
        return replace(self, holidays=normalize_holidays(dates))

    def is_business_day(self, day: date) -> bool:
        """Check if a date is a work day that is not a holiday."""
        if isinstance(day, datetime):
            day = day.date()
        return day.weekday() in self.work_days and day not in self.holidays

    def window_for(self, day: date) -> TimeRange | None:
        """
        Get the work window for a specific date as naive wall-clock datetimes.
        Returns None if it's not a business day.
        """
        if isinstance(day, datetime):
            day = day.date()
        if not self.is_business_day(day):
            return None

        # add() rather than set(): the window may close at 24:00
        midnight = pendulum.naive(day.year, day.month, day.day)
        return TimeRange(
            start=midnight.add(minutes=self.day_start_minute),
            end=midnight.add(minutes=self.day_end_minute),
        )
