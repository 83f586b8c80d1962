from datetime import datetime, timezone

import pytest

from trainlog.core.errors import MalformedInputError, NoTrackError
from trainlog.parsers.track import parse_track
from trainlog.schemas.activity import ActivityType


def _gpx(body: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">'
        f"{body}</gpx>"
    )


def _trkpt(lat, lon, time=None, ele=None):
    inner = ""
    if ele is not None:
        inner += f"<ele>{ele}</ele>"
    if time is not None:
        inner += f"<time>{time}</time>"
    return f'<trkpt lat="{lat}" lon="{lon}">{inner}</trkpt>'


def _track(*points):
    return _gpx("<trk><name>Morning ride</name><trkseg>" + "".join(points) + "</trkseg></trk>")


def test_parse_basic_track():
    text = _track(
        _trkpt(45.0, 5.0, "2024-05-01T07:00:00Z", 100),
        _trkpt(45.005, 5.0, "2024-05-01T07:05:00Z", 130),
        _trkpt(45.01, 5.0, "2024-05-01T07:10:00Z", 160),
    )
    record = parse_track(text)

    assert record.start_time == datetime(2024, 5, 1, 7, 0, 0)
    assert record.duration == 600
    assert record.moving_time is None
    assert record.activity_type == ActivityType.cycling
    # 0.01 degree of latitude is about 1.11 km
    assert record.distance == pytest.approx(1112, rel=0.01)
    assert record.avg_speed == pytest.approx(6.67, rel=0.01)
    assert record.elevation_gain > 0
    assert record.elevation_loss is None
    assert record.avg_heart_rate is None
    assert len(record.gps_points) == 3
    assert record.gps_points[0].timestamp == datetime(2024, 5, 1, 7, 0, 0, tzinfo=timezone.utc)
    assert record.gps_points[1].elevation == 130


def test_single_point_has_no_average_speed():
    record = parse_track(_track(_trkpt(45.0, 5.0, "2024-05-01T07:00:00Z")))
    assert record.duration == 0
    assert record.distance == 0
    assert record.avg_speed is None


def test_no_track():
    with pytest.raises(NoTrackError) as exc:
        parse_track(_gpx('<wpt lat="45.0" lon="5.0"></wpt>'))
    assert exc.value.fmt == "gpx"
    assert exc.value.stage == "track"


def test_track_without_points():
    with pytest.raises(NoTrackError) as exc:
        parse_track(_track())
    assert exc.value.stage == "points"


def test_points_without_time():
    with pytest.raises(MalformedInputError):
        parse_track(_track(_trkpt(45.0, 5.0), _trkpt(45.01, 5.0)))


def test_not_xml():
    with pytest.raises(MalformedInputError) as exc:
        parse_track("definitely not a gpx file")
    assert exc.value.stage == "decode"
