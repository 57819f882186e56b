"""Kitchen work-queue ranker."""

import time
from collections import Counter
from collections.abc import Sequence

import structlog

from src.prioritizer.constants import DEFAULT_KITCHEN_LOAD, LATE_TIME_SCORE
from src.prioritizer.metrics import PrioritizerMetrics
from src.prioritizer.models import PrioritizedTicket, Ticket
from src.prioritizer.scorer import ScorerConfig, TicketScorer


logger = structlog.get_logger()


class TicketRanker:
    """Orders in-flight tickets by descending priority.

    Every ticket in a batch is scored against the same clock reading and
    the same kitchen-load snapshot. Tickets with equal scores keep their
    input order.
    """

    def __init__(
        self,
        run_id: str = "kds",
        config: ScorerConfig | None = None,
        metrics: PrioritizerMetrics | None = None,
    ) -> None:
        """Initialize the ranker.

        Args:
            run_id: Run identifier for logging.
            config: Scorer configuration bundle (catalog and clock).
            metrics: Optional metrics instance.
        """
        self._run_id = run_id
        self._scorer = TicketScorer(config)
        self._metrics = metrics or PrioritizerMetrics.get_instance()
        self._log = logger.bind(component="prioritizer", run_id=run_id)

    @property
    def scorer(self) -> TicketScorer:
        """Scorer used for each ticket."""
        return self._scorer

    def sort_tickets_by_priority(
        self,
        tickets: Sequence[Ticket],
        kitchen_load: float = DEFAULT_KITCHEN_LOAD,
    ) -> list[PrioritizedTicket]:
        """Score and order a batch of tickets.

        Args:
            tickets: Tickets to rank. The sequence is not modified.
            kitchen_load: Kitchen utilization snapshot for the whole batch.

        Returns:
            New list of prioritized tickets, highest score first.
        """
        start = time.perf_counter()
        now = self._scorer.clock.now()

        prioritized = [
            PrioritizedTicket.from_ticket(
                ticket, self._scorer.score_at(ticket, kitchen_load, now)
            )
            for ticket in tickets
        ]
        # sorted() is stable: equal scores keep their input order
        ranked = sorted(prioritized, key=lambda t: -t.priority.score)

        duration_ms = (time.perf_counter() - start) * 1000
        self._metrics.record_pass(len(ranked), duration_ms)
        for ticket in ranked:
            self._metrics.record_score(
                ticket.priority.level,
                ticket.priority.score,
                late=ticket.priority.factors.time_to_promise == LATE_TIME_SCORE,
            )

        self._log.info(
            "ranking_complete",
            tickets_in=len(ranked),
            kitchen_load=kitchen_load,
            levels=dict(Counter(t.priority.level.value for t in ranked)),
            min_score=min((t.priority.score for t in ranked), default=0),
            max_score=max((t.priority.score for t in ranked), default=0),
            duration_ms=round(duration_ms, 3),
        )
        return ranked


def sort_tickets_by_priority(
    tickets: Sequence[Ticket],
    kitchen_load: float = DEFAULT_KITCHEN_LOAD,
    config: ScorerConfig | None = None,
    run_id: str = "pure",
) -> list[PrioritizedTicket]:
    """Pure function API for ranking tickets.

    Args:
        tickets: Tickets to rank.
        kitchen_load: Kitchen utilization snapshot.
        config: Scorer configuration bundle (catalog and clock).
        run_id: Run identifier.

    Returns:
        New list of prioritized tickets, highest score first.
    """
    ranker = TicketRanker(run_id=run_id, config=config)
    return ranker.sort_tickets_by_priority(tickets, kitchen_load)
