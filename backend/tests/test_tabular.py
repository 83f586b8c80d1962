from datetime import datetime

import pytest

from trainlog.core.errors import EmptyFileError, MalformedInputError, MissingColumnError
from trainlog.parsers.tabular import parse_tabular
from trainlog.schemas.activity import ActivityType


def test_parse_first_row():
    text = (
        "date,type,duration,distance,avgHeartRate,maxHeartRate,elevationGain\n"
        "2024-05-01T07:00:00,Running,3600,10000,150,172,85\n"
        "2024-05-02T07:00:00,Cycling,7200,60000,140,165,900\n"
    )
    record = parse_tabular(text)

    assert record.start_time == datetime(2024, 5, 1, 7, 0, 0)
    assert record.activity_type == ActivityType.running
    assert record.duration == 3600
    assert record.distance == 10000
    assert record.avg_heart_rate == 150
    assert record.max_heart_rate == 172
    assert record.elevation_gain == 85
    assert record.gps_points == []


def test_columns_match_any_case():
    text = "DATE,Type,DURATION,AvgHeartRate\n2024-05-01,walking,1800,110\n"
    record = parse_tabular(text)
    assert record.activity_type == ActivityType.walking
    assert record.duration == 1800
    assert record.avg_heart_rate == 110


def test_duration_as_hhmmss():
    record = parse_tabular("date,duration,movingTime\n2024-05-01,01:02:03,00:58:00\n")
    assert record.duration == 3723
    assert record.moving_time == 3480


def test_missing_optional_values_stay_absent():
    record = parse_tabular("date,type,avgPower\n2024-05-01,Rowing,\n")
    assert record.activity_type == ActivityType.rowing
    assert record.duration == 0
    assert record.avg_power is None


def test_timezone_qualified_date_converted():
    record = parse_tabular("date\n2024-05-01T07:00:00Z\n")
    assert record.start_time == datetime(2024, 5, 1, 7, 0, 0)
    assert record.start_time.tzinfo is None


def test_unknown_type_defaults_to_cycling():
    record = parse_tabular("date,type\n2024-05-01,unicycle\n")
    assert record.activity_type == ActivityType.cycling


def test_header_only():
    with pytest.raises(EmptyFileError):
        parse_tabular("date,type,duration\n")


def test_empty_text():
    with pytest.raises(EmptyFileError):
        parse_tabular("")


def test_missing_date_column():
    with pytest.raises(MissingColumnError) as exc:
        parse_tabular("type,duration\nRunning,3600\n")
    assert exc.value.column == "date"
    assert exc.value.stage == "header"


def test_non_numeric_value():
    with pytest.raises(MalformedInputError) as exc:
        parse_tabular("date,distance\n2024-05-01,far\n")
    assert exc.value.stage == "field:distance"


def test_non_finite_value():
    with pytest.raises(MalformedInputError):
        parse_tabular("date,avgPower\n2024-05-01,nan\n")


def test_invalid_date():
    with pytest.raises(MalformedInputError) as exc:
        parse_tabular("date\nyesterday\n")
    assert exc.value.stage == "field:date"


def test_decimal_comma():
    record = parse_tabular('date,distance,avgSpeed\n2024-05-01,"1,5","27,4"\n')
    assert record.distance == 1.5
    assert record.avg_speed == 27.4


def test_first_matching_header_wins():
    record = parse_tabular("Date,DATE\n2024-05-01,2023-01-01\n")
    assert record.start_time == datetime(2024, 5, 1)
