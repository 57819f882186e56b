"""Unit tests for prioritizer metrics."""

from concurrent.futures import ThreadPoolExecutor

from src.prioritizer.metrics import MAX_SCORE_SAMPLES, PrioritizerMetrics
from src.prioritizer.models import PriorityLevel


class TestPrioritizerMetrics:
    """Tests for metrics recording and reporting."""

    def setup_method(self) -> None:
        """Reset the singleton between tests."""
        PrioritizerMetrics.reset()

    def test_singleton(self) -> None:
        """get_instance returns the same object until reset."""
        first = PrioritizerMetrics.get_instance()
        assert PrioritizerMetrics.get_instance() is first
        PrioritizerMetrics.reset()
        assert PrioritizerMetrics.get_instance() is not first

    def test_record_scores(self) -> None:
        """Scores update level counts, lateness and percentiles."""
        metrics = PrioritizerMetrics()
        metrics.record_score(PriorityLevel.HIGH, 90, late=True)
        metrics.record_score(PriorityLevel.LOW, 10, late=False)
        metrics.record_score(PriorityLevel.MEDIUM, 50, late=False)

        assert metrics.level_counts == {"high": 1, "low": 1, "medium": 1}
        assert metrics.late_tickets == 1
        assert metrics.get_score_percentiles() == {"p50": 50.0, "p90": 90.0, "p99": 90.0}

    def test_empty_percentiles(self) -> None:
        """No scores reports zeros."""
        assert PrioritizerMetrics().get_score_percentiles() == {
            "p50": 0.0,
            "p90": 0.0,
            "p99": 0.0,
        }

    def test_to_dict(self) -> None:
        """Passes and invalid records are reported."""
        metrics = PrioritizerMetrics()
        metrics.record_pass(4, 1.5)
        metrics.record_pass(2, 0.5)
        metrics.record_invalid()

        data = metrics.to_dict()

        assert data["ranking_passes"] == 2
        assert data["tickets_ranked"] == 6
        assert data["ranking_duration_ms"] == 0.5
        assert data["invalid_tickets"] == 1

    def test_score_samples_bounded(self) -> None:
        """Only the most recent scores are kept for percentiles."""
        metrics = PrioritizerMetrics()
        for _ in range(MAX_SCORE_SAMPLES):
            metrics.record_score(PriorityLevel.LOW, 10, late=False)
        for _ in range(MAX_SCORE_SAMPLES):
            metrics.record_score(PriorityLevel.HIGH, 90, late=False)

        assert len(metrics.score_values) == MAX_SCORE_SAMPLES
        assert metrics.get_score_percentiles()["p50"] == 90.0
        assert metrics.level_counts == {
            "low": MAX_SCORE_SAMPLES,
            "high": MAX_SCORE_SAMPLES,
        }

    def test_concurrent_recording(self) -> None:
        """Counters stay exact when several threads record at once."""
        metrics = PrioritizerMetrics()

        def record(_: int) -> None:
            for _ in range(500):
                metrics.record_score(PriorityLevel.MEDIUM, 50, late=True)
                metrics.record_pass(1, 0.1)

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(record, range(8)))

        assert metrics.level_counts == {"medium": 4000}
        assert metrics.late_tickets == 4000
        assert metrics.ranking_passes == 4000
        assert metrics.tickets_ranked == 4000
