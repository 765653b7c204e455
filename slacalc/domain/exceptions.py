"""
Domain-specific exception hierarchy for the SLA calculator.
"""


class SlaCalcError(Exception):
    """Base class for all application-level errors."""


class CalendarConfigurationError(SlaCalcError, ValueError):
    """Raised when a work calendar is built from inconsistent settings."""


class TicketDataError(SlaCalcError, ValueError):
    """Raised when a ticket payload does not have the expected structure."""
