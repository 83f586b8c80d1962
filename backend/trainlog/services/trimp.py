"""Training impulse (TRIMP), Edwards method.

TRIMP = duration in minutes x zone coefficient, where the coefficient comes
from the average heart rate expressed as % of heart rate reserve:
>=90 -> 5, >=80 -> 4, >=70 -> 3, >=60 -> 2, otherwise 1.

The percentage is not clamped: rates below resting or above max simply land
on the bottom or top rung of the ladder. Stored scores depend on this.
"""

from typing import Optional

from trainlog.core.constants import TRIMP_BASE_COEFFICIENT, TRIMP_COEFFICIENTS
from trainlog.core.num_utils import round_half_up
from trainlog.schemas.activity import ActivityRecord, AthleteProfile


def zone_coefficient(hrr_percent: float) -> int:
    for threshold, coefficient in TRIMP_COEFFICIENTS:
        if hrr_percent >= threshold:
            return coefficient
    return TRIMP_BASE_COEFFICIENT


def calculate_trimp(
    duration: float,
    avg_heart_rate: float,
    max_heart_rate: Optional[float],
    resting_heart_rate: Optional[float],
) -> Optional[int]:
    """Score one session; None when the athlete constants are missing.

    Example: 3600s at 150 bpm with max 185 / resting 50
    -> hrr% = 74.07 -> coefficient 3 -> round(60 * 3) = 180
    """
    if not max_heart_rate or not resting_heart_rate:
        return None
    reserve = max_heart_rate - resting_heart_rate
    if reserve <= 0:
        return None

    hrr_percent = (avg_heart_rate - resting_heart_rate) / reserve * 100
    duration_minutes = duration / 60
    return round_half_up(duration_minutes * zone_coefficient(hrr_percent))


def trimp_for_activity(record: ActivityRecord, profile: Optional[AthleteProfile]) -> Optional[int]:
    if profile is None or not record.avg_heart_rate:
        return None
    return calculate_trimp(
        record.duration,
        record.avg_heart_rate,
        profile.max_heart_rate,
        profile.resting_heart_rate,
    )


def with_trimp(record: ActivityRecord, profile: Optional[AthleteProfile]) -> ActivityRecord:
    """Copy of `record` with its TRIMP filled (or cleared) for `profile`."""
    return record.model_copy(update={"trimp": trimp_for_activity(record, profile)})
