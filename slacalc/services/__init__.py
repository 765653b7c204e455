"""
Service layer helpers that orchestrate domain logic for tickets.
"""

from .sla_metrics import (
    OPEN_TICKET_STATUS_ID,
    SlaMetrics,
    SlaMetricsService,
    StatusChange,
    TicketSchedule,
)

__all__ = [
    "OPEN_TICKET_STATUS_ID",
    "SlaMetrics",
    "SlaMetricsService",
    "StatusChange",
    "TicketSchedule",
]
