"""Metrics collection for the prioritizer module."""

from collections import deque
from dataclasses import dataclass, field
from threading import Lock
from typing import ClassVar

from src.prioritizer.models import PriorityLevel


# Score samples kept for percentiles; older samples are dropped
MAX_SCORE_SAMPLES = 1000


@dataclass
class PrioritizerMetrics:
    """Metrics for ranking passes.

    Safe to share between threads. Percentiles cover the most recent
    ``MAX_SCORE_SAMPLES`` scores, so a queue that is polled indefinitely
    keeps a fixed footprint.

    Attributes:
        ranking_passes: Number of ranking passes executed.
        tickets_ranked: Total tickets scored across passes.
        level_counts: Tickets per priority level.
        late_tickets: Tickets whose promise had already passed.
        invalid_tickets: Ticket records rejected at parse time.
        score_values: Recent scores for percentile calculation.
        ranking_duration_ms: Duration of the last ranking pass.
    """

    ranking_passes: int = 0
    tickets_ranked: int = 0
    level_counts: dict[str, int] = field(default_factory=dict)
    late_tickets: int = 0
    invalid_tickets: int = 0
    score_values: deque[int] = field(
        default_factory=lambda: deque(maxlen=MAX_SCORE_SAMPLES)
    )
    ranking_duration_ms: float = 0.0
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    _instance: ClassVar["PrioritizerMetrics | None"] = None
    _instance_lock: ClassVar[Lock] = Lock()

    @classmethod
    def get_instance(cls) -> "PrioritizerMetrics":
        """Get singleton metrics instance."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        with cls._instance_lock:
            cls._instance = None

    def record_pass(self, ticket_count: int, duration_ms: float) -> None:
        """Record a completed ranking pass.

        Args:
            ticket_count: Tickets ranked in the pass.
            duration_ms: Duration in milliseconds.
        """
        with self._lock:
            self.ranking_passes += 1
            self.tickets_ranked += ticket_count
            self.ranking_duration_ms = duration_ms

    def record_score(self, level: PriorityLevel, score: int, late: bool) -> None:
        """Record a single ticket's score.

        Args:
            level: Priority level assigned.
            score: Final score.
            late: Whether the ticket was already late.
        """
        with self._lock:
            self.level_counts[level.value] = self.level_counts.get(level.value, 0) + 1
            self.score_values.append(score)
            if late:
                self.late_tickets += 1

    def record_invalid(self) -> None:
        """Record a rejected ticket record."""
        with self._lock:
            self.invalid_tickets += 1

    def get_score_percentiles(self) -> dict[str, float]:
        """Calculate score percentiles (p50/p90/p99).

        Returns:
            Dictionary with p50, p90, p99 values.
        """
        with self._lock:
            sorted_scores = sorted(self.score_values)
        if not sorted_scores:
            return {"p50": 0.0, "p90": 0.0, "p99": 0.0}

        n = len(sorted_scores)

        def percentile(p: float) -> float:
            idx = int(p * n / 100)
            return float(sorted_scores[min(idx, n - 1)])

        return {
            "p50": percentile(50),
            "p90": percentile(90),
            "p99": percentile(99),
        }

    def to_dict(self) -> dict[str, object]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        with self._lock:
            data: dict[str, object] = {
                "ranking_passes": self.ranking_passes,
                "tickets_ranked": self.tickets_ranked,
                "level_counts": dict(self.level_counts),
                "late_tickets": self.late_tickets,
                "invalid_tickets": self.invalid_tickets,
                "ranking_duration_ms": self.ranking_duration_ms,
            }
        data["score_percentiles"] = self.get_score_percentiles()
        return data
