"""Unit tests for the ticket queue ranker."""

from datetime import datetime, timedelta

import pytest

from src.prioritizer.clock import FixedClock
from src.prioritizer.metrics import PrioritizerMetrics
from src.prioritizer.models import PrioritizedTicket, Ticket, TicketItem, TicketStatus
from src.prioritizer.parsing import parse_ticket
from src.prioritizer.ranker import TicketRanker, sort_tickets_by_priority
from src.prioritizer.scorer import ScorerConfig
from tests.helpers.time import FIXED_NOW


def _make_ticket(
    ticket_id: str,
    promised_in_minutes: int = 30,
    stations: list[str] | None = None,
    quantity: int = 1,
) -> Ticket:
    """Create a test Ticket promised relative to FIXED_NOW."""
    return Ticket(
        id=ticket_id,
        order_number=f"#{ticket_id.upper()}",
        status=TicketStatus.IN_PROGRESS,
        promised_at=FIXED_NOW + timedelta(minutes=promised_in_minutes),
        items=[TicketItem(menu_item_id="burger", quantity=quantity)],
        station_assignments=stations if stations is not None else ["grill"],
    )


class _SteppingClock:
    """Clock that advances ten minutes on every reading."""

    def __init__(self, start: datetime) -> None:
        self.readings = 0
        self._start = start

    def now(self) -> datetime:
        instant = self._start + timedelta(minutes=10 * self.readings)
        self.readings += 1
        return instant


@pytest.fixture
def metrics() -> PrioritizerMetrics:
    """Fresh metrics instance per test."""
    return PrioritizerMetrics()


@pytest.fixture
def ranker(metrics: PrioritizerMetrics) -> TicketRanker:
    """Ranker pinned to FIXED_NOW."""
    return TicketRanker(
        run_id="test",
        config=ScorerConfig(clock=FixedClock(FIXED_NOW)),
        metrics=metrics,
    )


class TestOrdering:
    """Tests for queue ordering."""

    def test_sorted_by_descending_score(self, ranker: TicketRanker) -> None:
        """The most urgent ticket comes first."""
        tickets = [
            _make_ticket("relaxed", promised_in_minutes=45),
            _make_ticket("late", promised_in_minutes=-5),
            _make_ticket("soon", promised_in_minutes=4),
        ]

        ranked = ranker.sort_tickets_by_priority(tickets)

        assert [t.id for t in ranked] == ["late", "soon", "relaxed"]
        scores = [t.priority.score for t in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_equal_scores_keep_input_order(self, ranker: TicketRanker) -> None:
        """Ties retain their original relative order."""
        tickets = [
            _make_ticket("a", promised_in_minutes=40),
            _make_ticket("b", promised_in_minutes=40),
            _make_ticket("urgent", promised_in_minutes=-1),
            _make_ticket("c", promised_in_minutes=40),
            _make_ticket("d", promised_in_minutes=40),
        ]

        ranked = ranker.sort_tickets_by_priority(tickets)

        assert [t.id for t in ranked] == ["urgent", "a", "b", "c", "d"]

    def test_empty_batch(self, ranker: TicketRanker) -> None:
        """No tickets yields an empty queue."""
        assert ranker.sort_tickets_by_priority([]) == []

    def test_load_applies_to_whole_batch(self, ranker: TicketRanker) -> None:
        """Every ticket is scored with the same load snapshot."""
        tickets = [_make_ticket("x", promised_in_minutes=-20), _make_ticket("y")]
        idle = ranker.sort_tickets_by_priority(tickets, kitchen_load=0)
        slammed = ranker.sort_tickets_by_priority(tickets, kitchen_load=100)
        assert idle[0].priority.score == 53
        assert slammed[0].priority.score == 80


class TestOutput:
    """Tests for the shape of the ranked output."""

    def test_output_carries_ticket_fields(self, ranker: TicketRanker) -> None:
        """Each element is the ticket plus its priority."""
        ticket = _make_ticket("t1", promised_in_minutes=-20)

        (ranked,) = ranker.sort_tickets_by_priority([ticket])

        assert isinstance(ranked, PrioritizedTicket)
        assert ranked.id == "t1"
        assert ranked.order_number == "#T1"
        assert ranked.status == TicketStatus.IN_PROGRESS
        assert ranked.items == ticket.items
        assert ranked.priority.score == 67

    def test_input_not_mutated(self, ranker: TicketRanker) -> None:
        """The argument list and its tickets are left as they were."""
        tickets = [_make_ticket("a", 40), _make_ticket("b", -3)]
        snapshot = list(tickets)

        ranked = ranker.sort_tickets_by_priority(tickets)

        assert tickets == snapshot
        assert ranked is not tickets
        assert not hasattr(tickets[0], "priority")

    def test_reranking_replaces_priority(self, ranker: TicketRanker) -> None:
        """Ranking an already-prioritized ticket attaches a fresh score."""
        first = ranker.sort_tickets_by_priority([_make_ticket("a", -20)], kitchen_load=0)
        again = ranker.sort_tickets_by_priority(first, kitchen_load=100)
        assert first[0].priority.score == 53
        assert again[0].priority.score == 80

    def test_json_dict_uses_external_names(self, ranker: TicketRanker) -> None:
        """Serialized output keeps the camelCase field names."""
        (ranked,) = ranker.sort_tickets_by_priority([_make_ticket("a", -20)])
        data = ranked.to_json_dict()
        assert data["stationAssignments"] == ["grill"]
        assert data["priority"]["level"] == "medium"
        assert data["priority"]["factors"]["timeToPromise"] == 100


    def test_store_fields_carried_through(self, ranker: TicketRanker) -> None:
        """Fields the model does not declare are emitted again on output."""
        ticket = Ticket.model_validate(
            {
                **_make_ticket("a", -20).to_json_dict(),
                "channel": "phone",
                "tableNumber": "7",
            }
        )

        (ranked,) = ranker.sort_tickets_by_priority([ticket])
        data = ranked.to_json_dict()

        assert data["channel"] == "phone"
        assert data["tableNumber"] == "7"
        assert data["priority"]["score"] == 67

    def test_serialized_output_can_be_reranked(self, ranker: TicketRanker) -> None:
        """Serialized ranked tickets parse and rank again with a fresh score."""
        first = ranker.sort_tickets_by_priority(
            [_make_ticket("a", -20), _make_ticket("b", 40)], kitchen_load=0
        )
        reparsed = [parse_ticket(t.to_json_dict()) for t in first]

        again = ranker.sort_tickets_by_priority(reparsed, kitchen_load=100)

        assert [t.id for t in again] == ["a", "b"]
        assert again[0].priority.score == 80
        assert "priority" not in (again[0].model_extra or {})
        assert again[0].to_json_dict()["priority"]["score"] == 80


class TestClockSnapshot:
    """Tests for the single clock reading per batch."""

    def test_clock_read_once_per_batch(self) -> None:
        """All tickets are measured against the same instant."""
        clock = _SteppingClock(FIXED_NOW)
        ranker = TicketRanker(
            config=ScorerConfig(clock=clock), metrics=PrioritizerMetrics()
        )
        tickets = [_make_ticket(f"t{i}", promised_in_minutes=25) for i in range(4)]

        ranked = ranker.sort_tickets_by_priority(tickets)

        assert clock.readings == 1
        assert {t.priority.factors.time_to_promise for t in ranked} == {10}


class TestMetrics:
    """Tests for metrics recording."""

    def test_pass_recorded(
        self, ranker: TicketRanker, metrics: PrioritizerMetrics
    ) -> None:
        """Ranking records counts, levels and lateness."""
        tickets = [
            _make_ticket("late", -20),
            _make_ticket("ok", 40),
            _make_ticket("busy", 3, stations=["grill", "fry", "prep", "bar"], quantity=8),
        ]

        ranker.sort_tickets_by_priority(tickets)

        assert metrics.ranking_passes == 1
        assert metrics.tickets_ranked == 3
        assert metrics.late_tickets == 1
        assert sum(metrics.level_counts.values()) == 3
        assert metrics.to_dict()["score_percentiles"]["p50"] > 0


class TestPureFunction:
    """Tests for the pure function API."""

    def test_matches_ranker(self) -> None:
        """The function API ranks like the class."""
        config = ScorerConfig(clock=FixedClock(FIXED_NOW))
        tickets = [_make_ticket("a", 30), _make_ticket("b", -1)]
        ranked = sort_tickets_by_priority(tickets, 50, config=config)
        assert [t.id for t in ranked] == ["b", "a"]
