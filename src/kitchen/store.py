"""Ticket store interface and the kitchen work queue built on it."""

from collections.abc import Iterable
from threading import Lock
from typing import Protocol, runtime_checkable

import structlog

from src.prioritizer.constants import DEFAULT_KITCHEN_LOAD
from src.prioritizer.metrics import PrioritizerMetrics
from src.prioritizer.models import PrioritizedTicket, Ticket, TicketStatus
from src.prioritizer.ranker import TicketRanker
from src.prioritizer.scorer import ScorerConfig


logger = structlog.get_logger()

# Statuses still on the kitchen's plate
ACTIVE_STATUSES: frozenset[TicketStatus] = frozenset(
    {TicketStatus.NEW, TicketStatus.IN_PROGRESS, TicketStatus.RECALLED}
)


class TicketNotFoundError(KeyError):
    """Raised when a ticket id is not present in the store."""

    def __init__(self, ticket_id: str) -> None:
        """Initialize the error with the missing ticket id.

        Args:
            ticket_id: The ticket id that was not found.
        """
        self.ticket_id = ticket_id
        super().__init__(f"Ticket not found: {ticket_id}")


@runtime_checkable
class TicketStore(Protocol):
    """Repository of tickets owned by the order/kitchen system."""

    def list_tickets(self) -> list[Ticket]:
        """Return every ticket in insertion order."""
        ...

    def list_active(self) -> list[Ticket]:
        """Return tickets still being worked on, in insertion order."""
        ...

    def get(self, ticket_id: str) -> Ticket:
        """Return a ticket by id.

        Raises:
            TicketNotFoundError: If the id is unknown.
        """
        ...

    def upsert(self, ticket: Ticket) -> None:
        """Insert or replace a ticket (keyed by id)."""
        ...

    def remove(self, ticket_id: str) -> None:
        """Delete a ticket by id.

        Raises:
            TicketNotFoundError: If the id is unknown.
        """
        ...


class InMemoryTicketStore:
    """Thread-safe in-memory TicketStore.

    Replacing a ticket keeps its original position, so queue order is
    stable across status updates.
    """

    def __init__(self, tickets: Iterable[Ticket] = ()) -> None:
        """Initialize the store.

        Args:
            tickets: Initial tickets; each must carry an id.
        """
        self._lock = Lock()
        self._tickets: dict[str, Ticket] = {}
        for ticket in tickets:
            self.upsert(ticket)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tickets)

    def list_tickets(self) -> list[Ticket]:
        with self._lock:
            return list(self._tickets.values())

    def list_active(self) -> list[Ticket]:
        with self._lock:
            return [t for t in self._tickets.values() if t.status in ACTIVE_STATUSES]

    def get(self, ticket_id: str) -> Ticket:
        with self._lock:
            ticket = self._tickets.get(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(ticket_id)
        return ticket

    def upsert(self, ticket: Ticket) -> None:
        if not ticket.id:
            msg = "Tickets must have an id to be stored"
            raise ValueError(msg)
        with self._lock:
            self._tickets[ticket.id] = ticket

    def remove(self, ticket_id: str) -> None:
        with self._lock:
            if ticket_id not in self._tickets:
                raise TicketNotFoundError(ticket_id)
            del self._tickets[ticket_id]


class KitchenQueue:
    """Ranks the active tickets of an injected store.

    The queue never writes priorities back to the store: each call returns
    a fresh ranking for the current clock reading and load snapshot.
    """

    def __init__(
        self,
        store: TicketStore,
        config: ScorerConfig | None = None,
        run_id: str = "kds",
        metrics: PrioritizerMetrics | None = None,
    ) -> None:
        """Initialize the queue.

        Args:
            store: Ticket repository.
            config: Scorer configuration bundle (catalog and clock).
            run_id: Run identifier for logging.
            metrics: Metrics instance (defaults to the shared one).
        """
        self._store = store
        self._ranker = TicketRanker(run_id=run_id, config=config, metrics=metrics)
        self._log = logger.bind(component="kitchen", run_id=run_id)

    def ranked(self, kitchen_load: float = DEFAULT_KITCHEN_LOAD) -> list[PrioritizedTicket]:
        """Rank active tickets, most urgent first.

        Args:
            kitchen_load: Kitchen utilization snapshot.

        Returns:
            Prioritized active tickets.
        """
        active = self._store.list_active()
        self._log.debug("queue_snapshot", active_tickets=len(active))
        return self._ranker.sort_tickets_by_priority(active, kitchen_load)

    def next_ticket(self, kitchen_load: float = DEFAULT_KITCHEN_LOAD) -> PrioritizedTicket | None:
        """Return the most urgent active ticket, if any."""
        ranked = self.ranked(kitchen_load)
        return ranked[0] if ranked else None
