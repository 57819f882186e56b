"""Constants for the prioritizer module."""

# Kitchen load snapshot used when the caller does not supply one (0-100)
DEFAULT_KITCHEN_LOAD: int = 50

# Complexity assumed for menu items missing from the catalog
DEFAULT_COMPLEXITY: float = 2.0

# Factor weights for the blended score
TIME_WEIGHT: float = 0.4
COMPLEXITY_WEIGHT: float = 0.3
COORDINATION_WEIGHT: float = 0.3

# Time-to-promise step function: (inclusive upper bound in minutes, score).
# Evaluated in ascending order after the late check; first match wins.
LATE_TIME_SCORE: int = 100
TIME_SCORE_STEPS: tuple[tuple[int, int], ...] = (
    (5, 90),
    (10, 70),
    (15, 50),
    (20, 30),
)
FALLBACK_TIME_SCORE: int = 10

# Complexity sub-term contributions and saturation caps
COMPLEXITY_SCALE: float = 5.0
AVG_COMPLEXITY_POINTS: float = 40.0
ITEM_COUNT_POINTS: float = 30.0
ITEM_COUNT_CAP: int = 8
MODIFIER_POINTS: float = 30.0
MODIFIER_CAP: int = 10

# Coordination points per assigned station
POINTS_PER_STATION: int = 25

# Load multiplier is 1 + load / LOAD_DIVISOR (1.0 at idle, 1.5 at 100%)
LOAD_DIVISOR: float = 200.0

MAX_SCORE: int = 100
MIN_SCORE: int = 0

# Level thresholds on the final score
HIGH_THRESHOLD: int = 70
MEDIUM_THRESHOLD: int = 40

# Explanation clause triggers
EXPLAIN_SOON_MINUTES: int = 10
EXPLAIN_COMPLEXITY_AVG: float = 3.0
EXPLAIN_ITEM_COUNT: int = 4
EXPLAIN_STATION_COUNT: int = 3
EXPLAIN_MODIFIER_COUNT: int = 4

# Urgency status (display bands)
CRITICAL_MINUTES: int = 5
DEFAULT_LATE_THRESHOLD_MINUTES: int = 15
