"""Data models for kitchen station monitoring."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


# Stations monitored by the bottleneck detector, in display order
KITCHEN_STATIONS: tuple[str, ...] = ("grill", "fry", "pizza", "bar", "prep")


def station_name(station: str) -> str:
    """Human-readable station name."""
    return station.replace("_", " ").title()


class AlertSeverity(str, Enum):
    """Severity of a station bottleneck."""

    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class StationStats:
    """Throughput snapshot of one station.

    Attributes:
        station: Station identifier.
        ticket_count: Completed plus queued tickets.
        avg_time_minutes: Mean prep time of completed tickets (rounded).
        late_count: Active tickets past their promise.
        backlog: Tickets queued (new, in progress or recalled).
    """

    station: str
    ticket_count: int
    avg_time_minutes: int
    late_count: int
    backlog: int

    @property
    def late_rate(self) -> float:
        """Share of the station's tickets that are late."""
        if self.ticket_count == 0:
            return 0.0
        return self.late_count / self.ticket_count


class BottleneckThresholds(BaseModel):
    """Warning and critical thresholds before load adjustment.

    Attributes:
        backlog_warning: Queued tickets for a warning.
        backlog_critical: Queued tickets for a critical alert.
        avg_time_warning: Average prep minutes for a warning.
        avg_time_critical: Average prep minutes for a critical alert.
        late_rate_warning: Late share (0-1) for a warning.
        late_rate_critical: Late share (0-1) for a critical alert.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    backlog_warning: Annotated[int, Field(ge=0)] = 4
    backlog_critical: Annotated[int, Field(ge=0)] = 7
    avg_time_warning: Annotated[float, Field(ge=0.0)] = 12.0
    avg_time_critical: Annotated[float, Field(ge=0.0)] = 18.0
    late_rate_warning: Annotated[float, Field(ge=0.0, le=1.0)] = 0.2
    late_rate_critical: Annotated[float, Field(ge=0.0, le=1.0)] = 0.4


class AlertMetrics(BaseModel):
    """Figures quoted in a bottleneck alert."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    backlog: int
    avg_time: int
    late_rate: int


class BottleneckAlert(BaseModel):
    """A detected station bottleneck.

    Attributes:
        id: Alert identifier.
        station: Affected station.
        severity: Warning or critical.
        message: Headline for the display.
        suggestion: Suggested action for the expo or kitchen lead.
        detected_at: Detection time.
        metrics: Backlog, average time and late rate (percent).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    station: str
    severity: AlertSeverity
    message: str
    suggestion: str
    detected_at: datetime
    metrics: AlertMetrics
