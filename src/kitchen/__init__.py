"""Kitchen-side collaborators of the prioritizer: ticket store and station monitoring."""

from src.kitchen.bottleneck import (
    adjust_thresholds,
    calculate_station_stats,
    detect_bottlenecks,
)
from src.kitchen.models import (
    KITCHEN_STATIONS,
    AlertSeverity,
    BottleneckAlert,
    BottleneckThresholds,
    StationStats,
)
from src.kitchen.store import (
    InMemoryTicketStore,
    KitchenQueue,
    TicketNotFoundError,
    TicketStore,
)


__all__ = [
    "KITCHEN_STATIONS",
    "AlertSeverity",
    "BottleneckAlert",
    "BottleneckThresholds",
    "InMemoryTicketStore",
    "KitchenQueue",
    "StationStats",
    "TicketNotFoundError",
    "TicketStore",
    "adjust_thresholds",
    "calculate_station_stats",
    "detect_bottlenecks",
]
