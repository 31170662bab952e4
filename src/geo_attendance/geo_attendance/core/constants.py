"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code. The
geofence thresholds below are the tuning surface for the trade-off between
false rejects (poor indoor GPS) and false accepts.
"""

EARTH_RADIUS_METERS = 6_371_000

# GPS accuracy tiers (meters)
GPS_ACCURACY_EXCELLENT = 5
GPS_ACCURACY_GOOD = 20
GPS_ACCURACY_FAIR = 100
GPS_ACCURACY_POOR = 1000

# Base confidence per quality tier
CONFIDENCE_EXCELLENT = 0.9
CONFIDENCE_GOOD = 0.8
CONFIDENCE_FAIR = 0.7
CONFIDENCE_POOR = 0.5
CONFIDENCE_FLOOR = 0.1

SOURCE_ADJUSTMENT_NETWORK = -0.1
SOURCE_ADJUSTMENT_PASSIVE = -0.2

# Samples lose confidence linearly with age, capped
AGE_PENALTY_WINDOW_SECONDS = 30
AGE_PENALTY_MAX = 0.3

# Effective radius compensation (fraction of reported accuracy added to R)
RADIUS_COMPENSATION_POOR = 0.5
RADIUS_COMPENSATION_FAIR = 0.3
RADIUS_COMPENSATION_GOOD = 0.2

# Indoor leniency override
INDOOR_LENIENCY_RADIUS_FACTOR = 1.5
INDOOR_LENIENCY_MAX_ACCURACY = 10_000
VALID_CONFIDENCE_MIN = 0.6

# Multi-office ranking
RANK_EFFECTIVE_BAND_FLOOR = 0.6
RANK_OUTER_BAND_START = 0.3
RANK_OUTER_BAND_METERS = 100
RANK_MAX_ALTERNATIVES = 2

# Anomaly detection
SPEED_HIGH_RISK_KMH = 300
SPEED_MEDIUM_RISK_KMH = 150
ACCURACY_JUMP_PREVIOUS_MIN = 500
ACCURACY_JUMP_CURRENT_MAX = 10
PATTERN_MIN_HISTORY = 3
PATTERN_DISTANCE_FACTOR = 10
PATTERN_MIN_DISTANCE_METERS = 1000

DEFAULT_LOCATION_HISTORY_SIZE = 10
DEFAULT_LOCATION_HISTORY_MAX_AGE_MINUTES = 60

# Attendance session rules
DEFAULT_LATE_GRACE_MINUTES = 15
DEFAULT_OVERTIME_THRESHOLD_MINUTES = 30
DEFAULT_AUTO_CHECKOUT_AFTER_MINUTES = 120
DEFAULT_HALF_DAY_MINUTES = 240
DEFAULT_OFFSITE_CHECKOUT_DISTANCE_METERS = 500
DEFAULT_DAY_END_CUTOFF = "23:55"
DEFAULT_EARLIEST_CHECK_IN = "06:00"
DEFAULT_HISTORY_LIMIT = 30

# Cache TTL tiers (seconds)
TTL_LIVE_ROSTER = 15
TTL_USER_TODAY = 30
TTL_ATTENDANCE_LIST = 60
TTL_DEPARTMENT_STATS = 120
TTL_USER_PROFILE = 300
TTL_DEPARTMENT_TIMING = 600
