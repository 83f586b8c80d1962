"""GPS track (.gpx) parsing with gpxpy.

GPX carries no activity type, heart rate, power or cadence; those stay
None and the type defaults to Cycling until a paired file says otherwise.
"""

from datetime import timezone

import gpxpy
import gpxpy.gpx
from loguru import logger
from pydantic import ValidationError

from trainlog.core.config import settings
from trainlog.core.constants import DEFAULT_ACTIVITY_TYPE
from trainlog.core.errors import MalformedInputError, NoTrackError
from trainlog.core.time_utils import to_naive_local
from trainlog.schemas.activity import ActivityRecord, ActivityType, GpsPoint


def _as_utc(dt):
    if dt is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def parse_track(text: str) -> ActivityRecord:
    """Parse GPX text into an ActivityRecord built from the first track.

    Raises:
        MalformedInputError: undecodable XML or points without timestamps
        NoTrackError: no track, or a track without points
    """
    try:
        gpx = gpxpy.parse(text)
    except gpxpy.gpx.GPXException as e:
        raise MalformedInputError(f"unreadable GPX: {e}", fmt="gpx", stage="decode") from e

    if not gpx.tracks:
        raise NoTrackError()

    track = gpx.tracks[0]
    raw_points = [p for segment in track.segments for p in segment.points]
    if not raw_points:
        raise NoTrackError("track has no points", stage="points")

    first_time = _as_utc(raw_points[0].time)
    last_time = _as_utc(raw_points[-1].time)
    if first_time is None or last_time is None:
        raise MalformedInputError("GPS points must carry timestamps", fmt="gpx", stage="points")

    duration = (last_time - first_time).total_seconds()
    if duration < 0:
        logger.warning("[TRACK] Last point precedes first point, duration set to 0")
        duration = 0.0

    # Meters; summed per segment
    distance = track.length_2d() or 0.0

    # Zero-duration tracks have no defined average speed
    avg_speed = (distance / 1000) / (duration / 3600) if duration > 0 else None

    elevation = track.get_uphill_downhill()

    try:
        points = [
            GpsPoint(
                lat=p.latitude,
                lon=p.longitude,
                elevation=p.elevation,
                timestamp=_as_utc(p.time),
            )
            for p in raw_points
        ]
        record = ActivityRecord(
            start_time=to_naive_local(first_time, settings.timezone),
            duration=duration,
            moving_time=None,
            activity_type=ActivityType(DEFAULT_ACTIVITY_TYPE),
            distance=distance,
            avg_speed=avg_speed,
            elevation_gain=elevation.uphill or None,
            elevation_loss=elevation.downhill or None,
            gps_points=points,
        )
    except ValidationError as e:
        raise MalformedInputError(f"invalid track values: {e}", fmt="gpx", stage="record") from e

    logger.info(
        f"[TRACK] Parsed track {track.name or '(unnamed)'}: {len(points)} points, "
        f"{duration:.0f}s, {distance:.0f}m"
    )
    return record
