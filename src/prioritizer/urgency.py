"""Urgency status and priority bands for the kitchen display."""

from collections.abc import Iterable
from datetime import datetime
from enum import Enum

from src.prioritizer.clock import minutes_between
from src.prioritizer.constants import CRITICAL_MINUTES, DEFAULT_LATE_THRESHOLD_MINUTES
from src.prioritizer.models import PrioritizedTicket, PriorityLevel, Ticket


class UrgencyStatus(str, Enum):
    """Display status of a ticket's timer."""

    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"
    LATE = "late"


def urgency_status(
    ticket: Ticket,
    now: datetime,
    late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES,
) -> UrgencyStatus:
    """Classify a ticket's timer for display.

    Args:
        ticket: Ticket to classify.
        now: Reference time.
        late_threshold_minutes: Minutes in the kitchen after which a ticket
            is flagged as a warning.

    Returns:
        LATE past the promise, CRITICAL within 5 minutes of it, WARNING once
        the ticket has waited longer than the threshold, otherwise OK.
    """
    mins_remaining = minutes_between(now, ticket.promised_at)
    if mins_remaining < 0:
        return UrgencyStatus.LATE
    if mins_remaining <= CRITICAL_MINUTES:
        return UrgencyStatus.CRITICAL
    if ticket.created_at is not None:
        elapsed = minutes_between(ticket.created_at, now)
        if elapsed > late_threshold_minutes:
            return UrgencyStatus.WARNING
    return UrgencyStatus.OK


def group_by_level(
    tickets: Iterable[PrioritizedTicket],
) -> dict[PriorityLevel, list[PrioritizedTicket]]:
    """Group ranked tickets into high/medium/low bands.

    Args:
        tickets: Prioritized tickets, usually already ranked.

    Returns:
        Mapping with every level (high first), each preserving input order.
    """
    bands: dict[PriorityLevel, list[PrioritizedTicket]] = {
        PriorityLevel.HIGH: [],
        PriorityLevel.MEDIUM: [],
        PriorityLevel.LOW: [],
    }
    for ticket in tickets:
        bands[ticket.priority.level].append(ticket)
    return bands
