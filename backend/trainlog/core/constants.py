"""Shared constants.

Centralizes the fixed tables and product heuristics used by the parsers
and the analytics so they can be documented and adjusted in one place.
"""

# FIT positions are stored as semicircles
SEMICIRCLE_TO_DEGREES = 180.0 / 2**31

# m/s -> km/h
MPS_TO_KMH = 3.6

# Karvonen heart-rate-reserve fractions, one (low, high) pair per zone.
# Z1: [0.50, 0.60], Z2: [0.60, 0.70], ..., Z5: [0.90, 1.00]
HR_RESERVE_ZONE_BOUNDS = [
    (0.5, 0.6),
    (0.6, 0.7),
    (0.7, 0.8),
    (0.8, 0.9),
    (0.9, 1.0),
]

# Edwards TRIMP ladder: (minimum % of heart rate reserve, coefficient)
TRIMP_COEFFICIENTS = [
    (90, 5),
    (80, 4),
    (70, 3),
    (60, 2),
]
TRIMP_BASE_COEFFICIENT = 1

# Synthetic distribution used when only an average heart rate is known.
# Product heuristics, not physiology: tune here.
AVERAGE_DOMINANT_SHARE = 0.60
AVERAGE_BELOW_SHARE = 0.20
AVERAGE_ABOVE_SHARE = 0.15
AVERAGE_REMAINDER_SHARE = 0.05

# Polarized 80/10/10 intensity target (percent of time)
POLARIZATION_TARGET = {"low": 80.0, "moderate": 10.0, "high": 10.0}
POLARIZATION_PENALTY = 0.8

# Device sport codes -> activity type value
SPORT_MAP = {
    "cycling": "Cycling",
    "running": "Running",
    "walking": "Walking",
    "rowing": "Rowing",
    "swimming": "Swimming",
    "hiking": "Hiking",
    "fitness_equipment": "Fitness",
    "yoga": "Fitness",
    "training": "Training",
    "strength_training": "Training",
    "transition": "Transition",
}
DEFAULT_ACTIVITY_TYPE = "Cycling"

# Device sub-sport codes -> display label; unknown codes pass through
SUB_SPORT_MAP = {
    # cycling
    "road": "Road",
    "mountain": "Mountain bike",
    "track": "Track",
    "gravel": "Gravel",
    "gravel_cycling": "Gravel",
    "cyclocross": "Cyclocross",
    "indoor_cycling": "Indoor trainer",
    "virtual_activity": "Virtual",
    # running
    "treadmill": "Treadmill",
    "trail": "Trail",
    "street": "Road",
    # swimming
    "lap_swimming": "Pool",
    "open_water": "Open water",
    # rowing
    "indoor_rowing": "Indoor rower",
    # other
    "generic": "General",
}

# Indoor classification
INDOOR_SUB_SPORTS = {"Indoor trainer", "Virtual", "Treadmill", "Indoor rower", "Pool"}
INDOOR_BY_DEFAULT_TYPES = {"Rowing", "Fitness", "Training"}
