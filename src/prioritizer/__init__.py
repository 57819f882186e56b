"""Kitchen ticket prioritizer.

This module scores in-flight kitchen tickets by urgency, combining time
pressure, order complexity and cross-station coordination under the current
kitchen load, and orders the kitchen's work queue by that score.
"""

from src.prioritizer.catalog import ComplexityLookup, MenuCatalog, load_menu_catalog
from src.prioritizer.clock import Clock, FixedClock, SystemClock
from src.prioritizer.errors import (
    CatalogLoadError,
    InvalidTicketError,
    PrioritizerError,
    TicketFileError,
)
from src.prioritizer.models import (
    MenuItem,
    PrioritizedTicket,
    PriorityFactors,
    PriorityLevel,
    PriorityScore,
    Ticket,
    TicketItem,
    TicketStatus,
)
from src.prioritizer.parsing import load_tickets, parse_ticket, parse_tickets
from src.prioritizer.ranker import TicketRanker, sort_tickets_by_priority
from src.prioritizer.scorer import ScorerConfig, TicketScorer, calculate_priority
from src.prioritizer.urgency import UrgencyStatus, group_by_level, urgency_status


__all__ = [
    "CatalogLoadError",
    "Clock",
    "ComplexityLookup",
    "FixedClock",
    "InvalidTicketError",
    "MenuCatalog",
    "MenuItem",
    "PrioritizedTicket",
    "PrioritizerError",
    "PriorityFactors",
    "PriorityLevel",
    "PriorityScore",
    "ScorerConfig",
    "SystemClock",
    "Ticket",
    "TicketFileError",
    "TicketItem",
    "TicketRanker",
    "TicketScorer",
    "TicketStatus",
    "UrgencyStatus",
    "calculate_priority",
    "group_by_level",
    "load_menu_catalog",
    "load_tickets",
    "parse_ticket",
    "parse_tickets",
    "sort_tickets_by_priority",
    "urgency_status",
]
