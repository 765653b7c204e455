"""
Core business logic for measuring elapsed business time.

Pure domain logic without any external dependencies (no API calls, no
database, no I/O). The only state is the work calendar, which is replaced
as a whole whenever the holidays change.
"""

import logging
from datetime import date, datetime
from typing import FrozenSet, Iterable, List

import pendulum

from .models import TimeRange, WorkCalendar

logger = logging.getLogger(__name__)


class BusinessHoursCalculator:
    """
    Calculates elapsed business minutes between two instants.

    Algorithm:
    1. Read both instants as wall-clock times in the calendar's timezone
    2. Walk every calendar date the interval touches
    3. Take that date's work window (skipped for non-work days and holidays)
    4. Clip the window to the interval and sum the remaining durations
    """

    def __init__(self, calendar: WorkCalendar | None = None):
        self._calendar = calendar or WorkCalendar()

    @property
    def calendar(self) -> WorkCalendar:
        return self._calendar

    @property
    def holidays(self) -> FrozenSet[date]:
        return self._calendar.holidays

    def set_holidays(self, dates: Iterable[date]) -> None:
        """
        Replace the holiday set wholesale.

        A new calendar is built first and then swapped in with a single
        assignment, so a calculation running at the same time sees either the
        old or the new holidays, never a mix.
        """
        self._calendar = self._calendar.with_holidays(dates)
        logger.debug("Holiday set replaced with %d date(s)", len(self._calendar.holidays))

    def calculate_business_minutes(self, start: datetime, end: datetime) -> float:
        """
        Elapsed business time between two instants.

        Args:
            start: Beginning of the interval
            end: End of the interval (exclusive)

        Returns:
            Business minutes, possibly fractional. 0 when end is not after start.
        """
        return sum(window.duration_minutes() for window in self.business_windows(start, end))

    def calculate_estimate_time(self, open_date: datetime, close_estimate_date: datetime) -> float:
        """Business minutes allotted to resolve a ticket: open to estimated close."""
        return self.calculate_business_minutes(open_date, close_estimate_date)

    def calculate_lead_time(self, open_date: datetime, due_date: datetime) -> float:
        """Business minutes from ticket open to its due date."""
        return self.calculate_business_minutes(open_date, due_date)

    def business_windows(self, start: datetime, end: datetime) -> List[TimeRange]:
        """
        The per-day business slices of ``[start, end)``.

        Each slice is a naive wall-clock TimeRange in the calendar's timezone.
        Their durations add up to ``calculate_business_minutes(start, end)``.
        """
        if start >= end:
            return []

        # Take one snapshot so a concurrent set_holidays() cannot split the walk
        calendar = self._calendar
        local_start, local_end = self._to_wall_clock(calendar, start, end)
        if local_start >= local_end:
            # wall clock can run backwards across a DST fall-back
            return []

        windows: List[TimeRange] = []
        first_day = local_start.start_of("day")
        # count the days instead of stepping past the last one
        day_count = local_end.toordinal() - first_day.toordinal() + 1

        for offset in range(day_count):
            window = calendar.window_for(first_day.add(days=offset))
            if window:
                clipped = window.clip(local_start, local_end)
                if clipped:
                    windows.append(clipped)

        return windows

    @staticmethod
    def _to_wall_clock(calendar: WorkCalendar, start: datetime, end: datetime):
        """
        Convert both instants to naive local datetimes.

        Aware instants are moved into the calendar timezone, or into the zone
        of ``start`` when the calendar has none. Naive instants are taken as
        already being local.
        """
        if start.tzinfo is not None and end.tzinfo is not None:
            if calendar.timezone:
                start = pendulum.instance(start).in_timezone(calendar.timezone)
                end = pendulum.instance(end).in_timezone(calendar.timezone)
            else:
                end = end.astimezone(start.tzinfo)

        return pendulum.instance(start).naive(), pendulum.instance(end).naive()
