"""
Domain layer - Pure business logic without external dependencies.
"""

from .business_hours import BusinessHoursCalculator
from .exceptions import CalendarConfigurationError, SlaCalcError, TicketDataError
from .models import TimeRange, WorkCalendar

__all__ = [
    "BusinessHoursCalculator",
    "CalendarConfigurationError",
    "SlaCalcError",
    "TicketDataError",
    "TimeRange",
    "WorkCalendar",
]
