import asyncio
from datetime import datetime

import pytest

from trainlog.core.errors import EmptyFileError
from trainlog.schemas.activity import ActivityRecord, ActivityType, GpsPoint
from trainlog.schemas.training import PolarizationFocus
from trainlog.services.importer import (
    analyze_activities,
    import_activity,
    import_content,
    merge_track,
    read_and_parse,
)

CSV = "date,type,duration,distance,avgHeartRate\n2024-05-01T07:00:00,Running,3600,10000,150\n"

GPX = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1"><trk><trkseg>'
    '<trkpt lat="45.0" lon="5.0"><ele>100</ele><time>2024-05-01T07:00:00Z</time></trkpt>'
    '<trkpt lat="45.005" lon="5.0"><ele>130</ele><time>2024-05-01T07:30:00Z</time></trkpt>'
    '<trkpt lat="45.01" lon="5.0"><ele>160</ele><time>2024-05-01T08:00:00Z</time></trkpt>'
    "</trkseg></trk></gpx>"
)


@pytest.fixture
def files(tmp_path):
    csv_path = tmp_path / "run.csv"
    csv_path.write_text(CSV)
    gpx_path = tmp_path / "run.gpx"
    gpx_path.write_text(GPX)
    bad_gpx_path = tmp_path / "broken.gpx"
    bad_gpx_path.write_text("<gpx><trk>")
    return csv_path, gpx_path, bad_gpx_path


def test_read_and_parse_uses_suffix(files):
    csv_path, _, _ = files
    record = asyncio.run(read_and_parse(csv_path))
    assert record.activity_type == ActivityType.running
    assert record.duration == 3600


def test_import_with_track(files, profile):
    csv_path, gpx_path, _ = files
    record = asyncio.run(import_activity(csv_path, gpx_path, profile))

    # summary from the primary file, trace from the track
    assert record.activity_type == ActivityType.running
    assert record.distance == 10000
    assert len(record.gps_points) == 3
    assert record.elevation_gain > 0
    assert record.trimp == 180


def test_broken_track_is_ignored(files, profile):
    csv_path, _, bad_gpx_path = files
    record = asyncio.run(import_activity(csv_path, bad_gpx_path, profile))
    assert record.gps_points == []
    assert record.trimp == 180


def test_missing_track_file_is_ignored(files, tmp_path):
    csv_path, _, _ = files
    record = asyncio.run(import_activity(csv_path, tmp_path / "nope.gpx"))
    assert record.gps_points == []
    assert record.trimp is None


def test_broken_primary_fails(tmp_path, files):
    _, gpx_path, _ = files
    empty = tmp_path / "empty.csv"
    empty.write_text("date,type\n")
    with pytest.raises(EmptyFileError):
        asyncio.run(import_activity(empty, gpx_path))


def test_import_content(profile):
    record = import_content(CSV.encode("utf-8"), "csv", GPX.encode("utf-8"), profile)
    assert len(record.gps_points) == 3
    assert record.trimp == 180

    record = import_content(CSV, "csv", b"garbage", profile)
    assert record.gps_points == []


def test_merge_track_keeps_recorded_elevation():
    primary = ActivityRecord(start_time=datetime(2024, 5, 1, 7), elevation_gain=250)
    track = ActivityRecord(
        start_time=datetime(2024, 5, 1, 7),
        elevation_gain=60,
        gps_points=[GpsPoint(lat=45.0, lon=5.0)],
    )
    merged = merge_track(primary, track)
    assert merged.elevation_gain == 250
    assert len(merged.gps_points) == 1
    assert primary.gps_points == []


def test_analyze_activities(profile):
    records = [
        ActivityRecord(start_time=datetime(2024, 5, 1, 7), duration=1000, avg_heart_rate=120),
        ActivityRecord(start_time=datetime(2024, 5, 2, 7), duration=1000, avg_heart_rate=135),
    ]
    report = analyze_activities(records, profile)

    assert len(report.zones) == 5
    assert report.summary.sessions == 2
    assert report.summary.avg_heart_rate == 128
    assert sum(t.percentage for t in report.zone_totals) == pytest.approx(100, abs=0.3)
    assert report.zone_totals[0].seconds == 800
    assert len(report.distribution.per_activity) == 2
    assert report.distribution.sampling["average"] == 2
    assert report.polarization.focus == PolarizationFocus.missing_high_intensity
    assert report.by_type[0].count == 2


def test_analyze_activities_without_constants():
    records = [ActivityRecord(start_time=datetime(2024, 5, 1, 7), duration=1000, avg_heart_rate=120)]
    assert analyze_activities(records, None) is None
