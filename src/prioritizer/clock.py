"""Clock capability for time-dependent scoring."""

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Source of the current wall-clock time.

    Scores depend on time-to-promise, so every component that reads the
    current time takes a Clock instead of calling ``datetime.now``.
    """

    def now(self) -> datetime:
        """Return the current timezone-aware time."""
        ...


class SystemClock:
    """Clock backed by the system time in UTC."""

    def now(self) -> datetime:
        """Return the current UTC time."""
        return datetime.now(UTC)


@dataclass(frozen=True)
class FixedClock:
    """Clock frozen at a single instant (tests, replays, batch snapshots)."""

    instant: datetime

    def now(self) -> datetime:
        """Return the frozen instant."""
        return self.instant


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, floored (negative if end is earlier).

    Args:
        start: Reference time.
        end: Target time.

    Returns:
        Floor of the difference in minutes.
    """
    return math.floor((end - start).total_seconds() / 60)
