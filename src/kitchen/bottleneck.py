"""Station bottleneck detection.

Reads the same ticket records as the prioritizer and flags stations whose
backlog, average prep time or late share crosses a load-adjusted threshold.
"""

import uuid
from collections.abc import Sequence

import structlog

from src.kitchen.models import (
    KITCHEN_STATIONS,
    AlertMetrics,
    AlertSeverity,
    BottleneckAlert,
    BottleneckThresholds,
    StationStats,
    station_name,
)
from src.prioritizer.clock import Clock, SystemClock
from src.prioritizer.constants import DEFAULT_KITCHEN_LOAD
from src.prioritizer.models import Ticket, TicketStatus
from src.prioritizer.scorer import round_half_up


logger = structlog.get_logger()

_QUEUED_STATUSES = frozenset(
    {TicketStatus.NEW, TicketStatus.IN_PROGRESS, TicketStatus.RECALLED}
)
_ACTIVE_STATUSES = frozenset({TicketStatus.NEW, TicketStatus.IN_PROGRESS})

# Busier kitchens tolerate smaller backlogs and longer prep times
_BACKLOG_LOAD_FACTOR = 0.3
_TIME_LOAD_FACTOR = 0.2
_MIN_BACKLOG_WARNING = 2
_MIN_BACKLOG_CRITICAL = 3

_CRITICAL_SUGGESTIONS: dict[str, str] = {
    "fry": "Pause fried sides for 10 minutes. Consider reassigning staff to {name}.",
    "grill": "Pause new steak orders for 15 minutes. Add support staff to grill station.",
    "pizza": "Pause specialty pizzas. Focus on standard items first.",
    "bar": "Skip cocktails temporarily, prioritize simple drinks.",
}


def calculate_station_stats(
    tickets: Sequence[Ticket],
    clock: Clock | None = None,
) -> list[StationStats]:
    """Compute per-station throughput for the monitored stations.

    Args:
        tickets: All tickets known to the kitchen, any status.
        clock: Source of the current time for lateness.

    Returns:
        One StationStats per monitored station, in display order.
    """
    now = (clock or SystemClock()).now()
    queued: dict[str, int] = dict.fromkeys(KITCHEN_STATIONS, 0)
    total_minutes: dict[str, float] = dict.fromkeys(KITCHEN_STATIONS, 0.0)
    late: dict[str, int] = dict.fromkeys(KITCHEN_STATIONS, 0)
    completed: dict[str, int] = dict.fromkeys(KITCHEN_STATIONS, 0)

    for ticket in tickets:
        for station in ticket.station_assignments:
            if station not in queued:
                continue

            if ticket.status in _QUEUED_STATUSES:
                queued[station] += 1

            if ticket.status == TicketStatus.COMPLETED:
                completed[station] += 1

            if ticket.completed_at and ticket.started_at:
                duration = ticket.completed_at - ticket.started_at
                total_minutes[station] += duration.total_seconds() / 60

            if now > ticket.promised_at and ticket.status in _ACTIVE_STATUSES:
                late[station] += 1

    return [
        StationStats(
            station=station,
            ticket_count=completed[station] + queued[station],
            avg_time_minutes=(
                round_half_up(total_minutes[station] / completed[station])
                if completed[station] > 0
                else 0
            ),
            late_count=late[station],
            backlog=queued[station],
        )
        for station in KITCHEN_STATIONS
    ]


def adjust_thresholds(
    thresholds: BottleneckThresholds,
    kitchen_load: float,
) -> BottleneckThresholds:
    """Scale thresholds for the current kitchen load.

    Backlog limits shrink by up to 30% (never below 2 and 3) and prep-time
    limits grow by up to 20% as the load rises. Late-rate limits are fixed.

    Args:
        thresholds: Base thresholds.
        kitchen_load: Kitchen utilization percentage.

    Returns:
        Load-adjusted thresholds.
    """
    load_factor = kitchen_load / 100
    backlog_scale = 1 - load_factor * _BACKLOG_LOAD_FACTOR
    time_scale = 1 + load_factor * _TIME_LOAD_FACTOR
    return thresholds.model_copy(
        update={
            "backlog_warning": max(
                _MIN_BACKLOG_WARNING,
                round_half_up(thresholds.backlog_warning * backlog_scale),
            ),
            "backlog_critical": max(
                _MIN_BACKLOG_CRITICAL,
                round_half_up(thresholds.backlog_critical * backlog_scale),
            ),
            "avg_time_warning": thresholds.avg_time_warning * time_scale,
            "avg_time_critical": thresholds.avg_time_critical * time_scale,
        }
    )


def suggest_action(stats: StationStats, severity: AlertSeverity) -> str:
    """Suggest an action for a bottlenecked station.

    Args:
        stats: Station snapshot.
        severity: Alert severity.

    Returns:
        Suggested action text.
    """
    name = station_name(stats.station)

    if severity == AlertSeverity.CRITICAL:
        template = _CRITICAL_SUGGESTIONS.get(
            stats.station,
            "Add additional staff to {name}. Consider pausing complex items.",
        )
        return template.format(name=name)

    if stats.backlog >= 4:
        return (
            f"{name} has {stats.backlog} tickets queued. "
            "Consider prioritizing or adding help."
        )
    if stats.late_count >= 2:
        return f"{stats.late_count} late tickets at {name}. Focus on oldest tickets first."
    return f"Monitor {name} closely. Average time is {stats.avg_time_minutes}min."


def _classify(
    stats: StationStats,
    limits: BottleneckThresholds,
) -> AlertSeverity | None:
    late_rate = stats.late_rate
    if (
        stats.backlog >= limits.backlog_critical
        or stats.avg_time_minutes >= limits.avg_time_critical
        or late_rate >= limits.late_rate_critical
    ):
        return AlertSeverity.CRITICAL
    if (
        stats.backlog >= limits.backlog_warning
        or stats.avg_time_minutes >= limits.avg_time_warning
        or late_rate >= limits.late_rate_warning
    ):
        return AlertSeverity.WARNING
    return None


def detect_bottlenecks(
    tickets: Sequence[Ticket],
    kitchen_load: float = DEFAULT_KITCHEN_LOAD,
    thresholds: BottleneckThresholds | None = None,
    clock: Clock | None = None,
) -> list[BottleneckAlert]:
    """Flag stations that are falling behind.

    Args:
        tickets: All tickets known to the kitchen, any status.
        kitchen_load: Kitchen utilization percentage.
        thresholds: Base thresholds (defaults apply when omitted).
        clock: Source of the current time.

    Returns:
        At most one alert per station, in station display order.
    """
    clock = clock or SystemClock()
    now = clock.now()
    limits = adjust_thresholds(thresholds or BottleneckThresholds(), kitchen_load)
    alerts: list[BottleneckAlert] = []

    for stats in calculate_station_stats(tickets, clock):
        severity = _classify(stats, limits)
        if severity is None:
            continue

        name = station_name(stats.station)
        message = (
            f"Critical bottleneck at {name}"
            if severity == AlertSeverity.CRITICAL
            else f"{name} station slowing down"
        )
        alert = BottleneckAlert(
            id=f"bn-{uuid.uuid4().hex[:12]}",
            station=stats.station,
            severity=severity,
            message=message,
            suggestion=suggest_action(stats, severity),
            detected_at=now,
            metrics=AlertMetrics(
                backlog=stats.backlog,
                avg_time=stats.avg_time_minutes,
                late_rate=round_half_up(stats.late_rate * 100),
            ),
        )
        alerts.append(alert)
        logger.info(
            "bottleneck_detected",
            component="kitchen",
            station=stats.station,
            severity=severity.value,
            backlog=stats.backlog,
            avg_time_minutes=stats.avg_time_minutes,
            late_count=stats.late_count,
        )

    return alerts
