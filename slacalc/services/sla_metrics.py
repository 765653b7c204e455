"""
Application service deriving the SLA figures of a ticket.

The ticket form knows a ticket's status history and two user-entered target
instants (the estimated close and the due date). This service finds the
moment the ticket was opened, parses the targets, and delegates the actual
arithmetic to the domain-level ``BusinessHoursCalculator``. Anything that
cannot be parsed yet is reported as "not computable" instead of failing.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pendulum
from pendulum import DateTime

from ..domain.business_hours import BusinessHoursCalculator
from ..domain.exceptions import TicketDataError

logger = logging.getLogger(__name__)

OPEN_TICKET_STATUS_ID = 2


@dataclass(frozen=True)
class StatusChange:
    """One entry of a ticket's status history."""
    status_id: int
    create_date: Optional[DateTime] = None


@dataclass
class TicketSchedule:
    """The parts of a ticket the SLA figures are computed from."""
    status_history: List[StatusChange] = field(default_factory=list)
    close_estimate: Optional[DateTime] = None
    due_date: Optional[DateTime] = None


def round_minutes(value: float) -> int:
    """Round half away from zero, the way the ticket form stores minutes."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class SlaMetrics:
    """
    Business-minute SLA figures of a ticket.

    ``None`` means the figure cannot be computed yet, e.g. the ticket was
    never opened or the target date is still empty.
    """
    estimate_time: Optional[float] = None
    lead_time: Optional[float] = None

    def as_form_values(self) -> Dict[str, int]:
        """Rounded figures for display, 0 where not computable."""
        return {
            "estimate_time": round_minutes(self.estimate_time or 0),
            "lead_time": round_minutes(self.lead_time or 0),
        }

    def as_payload(self) -> Dict[str, int]:
        """Rounded figures for submission, leaving out anything not positive."""
        payload: Dict[str, int] = {}
        if self.estimate_time and self.estimate_time > 0:
            payload["estimate_time"] = round_minutes(self.estimate_time)
        if self.lead_time and self.lead_time > 0:
            payload["lead_time"] = round_minutes(self.lead_time)
        return payload


class SlaMetricsService:
    """
    Computes estimate_time and lead_time for tickets.

    Args:
        calculator: Calculator holding the work calendar
        timezone: Zone used for date strings and naive datetimes
    """

    def __init__(self, calculator: BusinessHoursCalculator, timezone: str = "UTC") -> None:
        self._calculator = calculator
        self._timezone = timezone

    def parse_instant(self, value: Any) -> Optional[DateTime]:
        """
        Turn a form value into an aware instant.

        Returns None for empty or unparseable values.
        """
        if value is None:
            return None

        if isinstance(value, datetime):
            return pendulum.instance(value, tz=self._timezone)

        if not isinstance(value, str):
            logger.warning("Ignoring non-date value %r", value)
            return None

        if not value.strip():
            return None

        try:
            parsed = pendulum.parse(value.strip(), tz=self._timezone)
        except ValueError as exc:
            logger.warning("Could not parse date %r: %s", value, exc)
            return None

        if not isinstance(parsed, DateTime):
            logger.warning("Value %r is not a date-time", value)
            return None
        return parsed

    def parse_ticket(self, payload: Mapping[str, Any]) -> TicketSchedule:
        """
        Build a TicketSchedule from a ticket document.

        The target dates are read from a nested ``ticket`` mapping when
        present, otherwise from the top level.

        Raises:
            TicketDataError: If the status history is malformed
        """
        if not isinstance(payload, Mapping):
            raise TicketDataError("Ticket data must be a mapping.")

        raw_history = payload.get("status_history") or []
        if not isinstance(raw_history, list):
            raise TicketDataError("status_history must be a list.")

        history: List[StatusChange] = []
        for index, entry in enumerate(raw_history):
            if not isinstance(entry, Mapping):
                raise TicketDataError(f"status_history[{index}] must be a mapping.")
            status_id = entry.get("status_id")
            if isinstance(status_id, bool) or not isinstance(status_id, int):
                raise TicketDataError(f"status_history[{index}].status_id must be an integer.")
            history.append(
                StatusChange(
                    status_id=status_id,
                    create_date=self.parse_instant(entry.get("create_date")),
                )
            )

        ticket = payload.get("ticket")
        if not isinstance(ticket, Mapping):
            ticket = payload

        return TicketSchedule(
            status_history=history,
            close_estimate=self.parse_instant(ticket.get("close_estimate")),
            due_date=self.parse_instant(ticket.get("due_date")),
        )

    @staticmethod
    def find_open_date(status_history: Sequence[StatusChange]) -> Optional[DateTime]:
        """Timestamp at which the ticket first moved to the open status."""
        for change in status_history:
            if change.status_id == OPEN_TICKET_STATUS_ID:
                return change.create_date
        return None

    def estimate_time(self, ticket: TicketSchedule) -> Optional[float]:
        """Business minutes from ticket open to the estimated close."""
        open_date = self.find_open_date(ticket.status_history)
        if open_date is None or ticket.close_estimate is None:
            return None
        return self._calculator.calculate_estimate_time(open_date, ticket.close_estimate)

    def lead_time(self, ticket: TicketSchedule) -> Optional[float]:
        """Business minutes from ticket open to the due date."""
        open_date = self.find_open_date(ticket.status_history)
        if open_date is None or ticket.due_date is None:
            return None
        return self._calculator.calculate_lead_time(open_date, ticket.due_date)

    def calculate(self, ticket: TicketSchedule) -> SlaMetrics:
        """Compute both SLA figures for a ticket."""
        metrics = SlaMetrics(
            estimate_time=self.estimate_time(ticket),
            lead_time=self.lead_time(ticket),
        )
        logger.debug("SLA metrics computed: %s", metrics)
        return metrics
