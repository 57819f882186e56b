"""Scoring engine for kitchen ticket priority."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime

import structlog

from src.prioritizer.catalog import ComplexityLookup, MenuCatalog
from src.prioritizer.clock import Clock, SystemClock, minutes_between
from src.prioritizer.constants import (
    AVG_COMPLEXITY_POINTS,
    COMPLEXITY_SCALE,
    COMPLEXITY_WEIGHT,
    COORDINATION_WEIGHT,
    DEFAULT_KITCHEN_LOAD,
    EXPLAIN_COMPLEXITY_AVG,
    EXPLAIN_ITEM_COUNT,
    EXPLAIN_MODIFIER_COUNT,
    EXPLAIN_SOON_MINUTES,
    EXPLAIN_STATION_COUNT,
    FALLBACK_TIME_SCORE,
    HIGH_THRESHOLD,
    ITEM_COUNT_CAP,
    ITEM_COUNT_POINTS,
    LATE_TIME_SCORE,
    LOAD_DIVISOR,
    MAX_SCORE,
    MEDIUM_THRESHOLD,
    MIN_SCORE,
    MODIFIER_CAP,
    MODIFIER_POINTS,
    POINTS_PER_STATION,
    TIME_SCORE_STEPS,
    TIME_WEIGHT,
)
from src.prioritizer.models import (
    PriorityFactors,
    PriorityLevel,
    PriorityScore,
    Ticket,
)


logger = structlog.get_logger()


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity.

    Python's round() uses banker's rounding; kitchen scores round .5 up.
    """
    return math.floor(value + 0.5)


def level_for_score(score: int) -> PriorityLevel:
    """Map a final score to its priority level.

    Args:
        score: Final clamped score.

    Returns:
        HIGH at 70+, MEDIUM at 40+, LOW otherwise.
    """
    if score >= HIGH_THRESHOLD:
        return PriorityLevel.HIGH
    if score >= MEDIUM_THRESHOLD:
        return PriorityLevel.MEDIUM
    return PriorityLevel.LOW


def load_multiplier(kitchen_load: float) -> float:
    """Return the kitchen-load multiplier (1.0 idle, 1.5 at 100%, unclamped)."""
    return 1 + kitchen_load / LOAD_DIVISOR


@dataclass
class ScorerConfig:
    """Configuration bundle for TicketScorer.

    Attributes:
        catalog: Menu complexity lookup. Defaults to an empty catalog, which
            scores every item at the default complexity.
        clock: Source of the current time.
    """

    catalog: ComplexityLookup = field(default_factory=MenuCatalog)
    clock: Clock = field(default_factory=SystemClock)


@dataclass(frozen=True)
class TicketLoad:
    """Raw measurements of a ticket that drive its factors.

    Attributes:
        mins_to_promise: Whole minutes until the promise (negative when late).
        total_items: Sum of line-item quantities.
        avg_complexity: Quantity-weighted mean complexity.
        total_modifiers: Modifiers plus add-ons across all lines.
        station_count: Number of station assignments.
    """

    mins_to_promise: int
    total_items: int
    avg_complexity: float
    total_modifiers: int
    station_count: int

    @property
    def is_late(self) -> bool:
        """Whether the promised time has passed."""
        return self.mins_to_promise < 0


class TicketScorer:
    """Computes priority scores for kitchen tickets.

    Scoring formula:
        raw = (time * 0.4 + complexity * 0.3 + coordination * 0.3)
              * (1 + kitchen_load / 200)
        score = min(round(raw), 100)

    Where:
        - time: Step function of minutes left until the promised time
        - complexity: Item complexity, item count and modifier count,
          each saturating independently
        - coordination: 25 points per station involved, capped at 100
    """

    def __init__(self, config: ScorerConfig | None = None) -> None:
        """Initialize the scorer.

        Args:
            config: Scorer configuration bundle.
        """
        config = config or ScorerConfig()
        self._catalog = config.catalog
        self._clock = config.clock
        self._log = logger.bind(component="prioritizer", subcomponent="scorer")

    @property
    def clock(self) -> Clock:
        """Clock used for time-to-promise."""
        return self._clock

    def calculate_priority(
        self,
        ticket: Ticket,
        kitchen_load: float = DEFAULT_KITCHEN_LOAD,
    ) -> PriorityScore:
        """Compute the priority of a single ticket against the clock's now.

        Args:
            ticket: Ticket to score.
            kitchen_load: Kitchen utilization percentage. Not validated;
                values outside 0-100 just scale the multiplier.

        Returns:
            PriorityScore for the ticket.
        """
        return self.score_at(ticket, kitchen_load, self._clock.now())

    def score_at(
        self,
        ticket: Ticket,
        kitchen_load: float,
        now: datetime,
    ) -> PriorityScore:
        """Compute the priority of a ticket at a given instant.

        Batch callers read the clock once and pass the same instant for
        every ticket.

        Args:
            ticket: Ticket to score.
            kitchen_load: Kitchen utilization percentage.
            now: Timezone-aware reference time.

        Returns:
            PriorityScore for the ticket.
        """
        measured = self.measure(ticket, now)

        time_score = self._compute_time_score(measured)
        complexity_score = self._compute_complexity_score(measured)
        coordination_score = self._compute_coordination_score(measured)

        raw_score = (
            time_score * TIME_WEIGHT
            + complexity_score * COMPLEXITY_WEIGHT
            + coordination_score * COORDINATION_WEIGHT
        ) * load_multiplier(kitchen_load)
        score = max(min(round_half_up(raw_score), MAX_SCORE), MIN_SCORE)
        level = level_for_score(score)

        priority = PriorityScore(
            level=level,
            score=score,
            explanation=self._explain(level, measured),
            factors=PriorityFactors(
                time_to_promise=round_half_up(time_score),
                complexity=round_half_up(complexity_score),
                coordination=round_half_up(coordination_score),
            ),
        )

        self._log.debug(
            "ticket_scored",
            ticket_id=ticket.id,
            score=score,
            level=level.value,
            mins_to_promise=measured.mins_to_promise,
        )
        return priority

    def measure(self, ticket: Ticket, now: datetime) -> TicketLoad:
        """Extract the raw measurements that drive the factors.

        Args:
            ticket: Ticket to measure.
            now: Reference time.

        Returns:
            TicketLoad measurements.
        """
        total_items = sum(item.quantity for item in ticket.items)
        weighted = sum(
            self._catalog.lookup_complexity(item.menu_item_id) * item.quantity
            for item in ticket.items
        )
        total_modifiers = sum(
            len(item.modifiers) + len(item.add_ons) for item in ticket.items
        )
        return TicketLoad(
            mins_to_promise=minutes_between(now, ticket.promised_at),
            total_items=total_items,
            avg_complexity=weighted / max(total_items, 1),
            total_modifiers=total_modifiers,
            station_count=len(ticket.station_assignments),
        )

    def _compute_time_score(self, measured: TicketLoad) -> int:
        """Compute the time-to-promise factor.

        Args:
            measured: Ticket measurements.

        Returns:
            100 when late, then 90/70/50/30 by inclusive thresholds, else 10.
        """
        if measured.is_late:
            return LATE_TIME_SCORE
        for upper_bound, step_score in TIME_SCORE_STEPS:
            if measured.mins_to_promise <= upper_bound:
                return step_score
        return FALLBACK_TIME_SCORE

    def _compute_complexity_score(self, measured: TicketLoad) -> float:
        """Compute the complexity factor.

        Item count saturates at 8 and modifier count at 10 before the
        sub-terms are summed.

        Args:
            measured: Ticket measurements.

        Returns:
            Complexity factor clamped to [0, 100].
        """
        score = (
            (measured.avg_complexity / COMPLEXITY_SCALE) * AVG_COMPLEXITY_POINTS
            + min(measured.total_items, ITEM_COUNT_CAP) / ITEM_COUNT_CAP * ITEM_COUNT_POINTS
            + min(measured.total_modifiers, MODIFIER_CAP) / MODIFIER_CAP * MODIFIER_POINTS
        )
        return max(min(score, MAX_SCORE), MIN_SCORE)

    def _compute_coordination_score(self, measured: TicketLoad) -> int:
        """Compute the coordination factor (25 per station, capped at 100)."""
        return min(measured.station_count * POINTS_PER_STATION, MAX_SCORE)

    @staticmethod
    def _explain(level: PriorityLevel, measured: TicketLoad) -> str:
        """Build the human-readable explanation.

        Args:
            level: Final priority level.
            measured: Ticket measurements.

        Returns:
            "LEVEL: clause, clause" or "LEVEL priority" when nothing stands out.
        """
        parts: list[str] = []

        if measured.is_late:
            parts.append(f"{abs(measured.mins_to_promise)}min late")
        elif measured.mins_to_promise <= EXPLAIN_SOON_MINUTES:
            parts.append(f"promised in {measured.mins_to_promise}min")

        if (
            measured.avg_complexity >= EXPLAIN_COMPLEXITY_AVG
            or measured.total_items >= EXPLAIN_ITEM_COUNT
        ):
            parts.append(f"{measured.total_items} complex items")

        if measured.station_count >= EXPLAIN_STATION_COUNT:
            parts.append(f"{measured.station_count} stations coordinating")

        if measured.total_modifiers >= EXPLAIN_MODIFIER_COUNT:
            parts.append(f"{measured.total_modifiers} modifiers")

        label = level.value.upper()
        if not parts:
            return f"{label} priority"
        return f"{label}: {', '.join(parts)}"


def calculate_priority(
    ticket: Ticket,
    kitchen_load: float = DEFAULT_KITCHEN_LOAD,
    config: ScorerConfig | None = None,
) -> PriorityScore:
    """Pure function API for scoring a ticket.

    Args:
        ticket: Ticket to score.
        kitchen_load: Kitchen utilization percentage.
        config: Scorer configuration bundle (catalog and clock).

    Returns:
        PriorityScore for the ticket.
    """
    return TicketScorer(config).calculate_priority(ticket, kitchen_load)
