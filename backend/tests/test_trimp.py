from datetime import datetime

from trainlog.schemas.activity import ActivityRecord, AthleteProfile
from trainlog.services.trimp import calculate_trimp, trimp_for_activity, with_trimp, zone_coefficient


def test_reference_session():
    # hrr% = 100 / 135 = 74.07 -> coefficient 3
    assert calculate_trimp(3600, 150, 185, 50) == 180


def test_coefficient_ladder():
    assert zone_coefficient(95) == 5
    assert zone_coefficient(90) == 5
    assert zone_coefficient(85) == 4
    assert zone_coefficient(70) == 3
    assert zone_coefficient(60) == 2
    assert zone_coefficient(59.9) == 1


def test_heart_rate_outside_reserve_is_not_clamped():
    assert calculate_trimp(3600, 40, 185, 50) == 60
    assert calculate_trimp(3600, 200, 185, 50) == 300


def test_rounds_half_up():
    # 2.5 minutes x 1
    assert calculate_trimp(150, 100, 185, 50) == 3


def test_missing_constants():
    assert calculate_trimp(3600, 150, None, 50) is None
    assert calculate_trimp(3600, 150, 185, None) is None


def test_non_positive_reserve():
    assert calculate_trimp(3600, 150, 50, 50) is None
    assert calculate_trimp(3600, 150, 50, 60) is None


def test_activity_without_heart_rate():
    record = ActivityRecord(start_time=datetime(2024, 5, 1), duration=3600)
    assert trimp_for_activity(record, AthleteProfile(max_heart_rate=185, resting_heart_rate=50)) is None
    assert trimp_for_activity(record, None) is None


def test_with_trimp_returns_copy():
    record = ActivityRecord(start_time=datetime(2024, 5, 1), duration=3600, avg_heart_rate=150)
    scored = with_trimp(record, AthleteProfile(max_heart_rate=185, resting_heart_rate=50))
    assert scored.trimp == 180
    assert record.trimp is None
