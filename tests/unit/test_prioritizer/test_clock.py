"""Unit tests for clock helpers."""

from datetime import UTC, timedelta

from src.prioritizer.clock import Clock, FixedClock, SystemClock, minutes_between
from tests.helpers.time import FIXED_NOW


class TestClocks:
    """Tests for clock implementations."""

    def test_fixed_clock(self) -> None:
        """FixedClock always returns its instant."""
        clock = FixedClock(FIXED_NOW)
        assert clock.now() == FIXED_NOW
        assert clock.now() == FIXED_NOW

    def test_system_clock_is_aware(self) -> None:
        """SystemClock returns UTC times."""
        assert SystemClock().now().tzinfo == UTC

    def test_protocol(self) -> None:
        """Both implementations satisfy Clock."""
        assert isinstance(FixedClock(FIXED_NOW), Clock)
        assert isinstance(SystemClock(), Clock)


class TestMinutesBetween:
    """Tests for floored minute differences."""

    def test_whole_minutes(self) -> None:
        """Exact minutes pass through."""
        assert minutes_between(FIXED_NOW, FIXED_NOW + timedelta(minutes=12)) == 12

    def test_floors_towards_negative(self) -> None:
        """Partial minutes floor, so any lateness is at least -1."""
        assert minutes_between(FIXED_NOW, FIXED_NOW + timedelta(seconds=59)) == 0
        assert minutes_between(FIXED_NOW, FIXED_NOW - timedelta(seconds=1)) == -1
        assert minutes_between(FIXED_NOW, FIXED_NOW - timedelta(minutes=20)) == -20
