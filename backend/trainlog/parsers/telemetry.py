"""Binary telemetry (.fit) parsing.

Two steps:
- decode_telemetry: bytes -> session/lap/record cascade (fitparse), in
  km, km/h, degrees and Celsius
- activity_from_telemetry: cascade -> ActivityRecord

Decode errors from fitparse (FitParseError) propagate untouched.
"""

import io
from datetime import datetime, timezone

from fitparse import FitFile
from loguru import logger
from pydantic import ValidationError

from trainlog.core.config import settings
from trainlog.core.constants import (
    DEFAULT_ACTIVITY_TYPE,
    MPS_TO_KMH,
    SEMICIRCLE_TO_DEGREES,
    SPORT_MAP,
    SUB_SPORT_MAP,
)
from trainlog.core.errors import MalformedInputError, ParseError
from trainlog.core.time_utils import to_naive_local
from trainlog.schemas.activity import ActivityRecord, ActivityType, GpsPoint


def _semicircles_to_degrees(val):
    return val * SEMICIRCLE_TO_DEGREES if val is not None else None


def _m_to_km(val):
    return float(val) / 1000.0 if val is not None else None


def _mps_to_kmh(val):
    return float(val) * MPS_TO_KMH if val is not None else None


def _first(fields: dict, *names):
    """Value of the first present field; FIT 'enhanced_*' fields go first."""
    for name in names:
        if fields.get(name) is not None:
            return fields[name]
    return None


def _session_fields(fields: dict) -> dict:
    return {
        "start_time": fields.get("start_time"),
        "timestamp": fields.get("timestamp"),
        "sport": str(fields["sport"]) if fields.get("sport") is not None else None,
        "sub_sport": str(fields["sub_sport"]) if fields.get("sub_sport") is not None else None,
        "total_elapsed_time": fields.get("total_elapsed_time"),
        "total_timer_time": fields.get("total_timer_time"),
        "total_distance": _m_to_km(fields.get("total_distance")),
        "avg_speed": _mps_to_kmh(_first(fields, "enhanced_avg_speed", "avg_speed")),
        "max_speed": _mps_to_kmh(_first(fields, "enhanced_max_speed", "max_speed")),
        "total_ascent": fields.get("total_ascent"),
        "total_descent": fields.get("total_descent"),
        "avg_heart_rate": fields.get("avg_heart_rate"),
        "max_heart_rate": fields.get("max_heart_rate"),
        "avg_cadence": fields.get("avg_cadence"),
        "avg_power": fields.get("avg_power"),
        "normalized_power": fields.get("normalized_power"),
        "avg_temperature": fields.get("avg_temperature"),
        "max_temperature": fields.get("max_temperature"),
        "total_calories": fields.get("total_calories"),
    }


def _record_fields(fields: dict) -> dict:
    return {
        "timestamp": fields.get("timestamp"),
        "position_lat": _semicircles_to_degrees(fields.get("position_lat")),
        "position_long": _semicircles_to_degrees(fields.get("position_long")),
        "altitude": _first(fields, "enhanced_altitude", "altitude"),
        "heart_rate": fields.get("heart_rate"),
        "speed": _mps_to_kmh(_first(fields, "enhanced_speed", "speed")),
    }


def _within(ts, start, end) -> bool:
    # Unbounded windows keep everything
    if start is None or end is None:
        return True
    return ts is not None and start <= ts <= end


def _cascade(sessions: list[dict], laps: list[dict], records: list[dict]) -> list[dict]:
    """Nest laps into sessions and records into laps by their time windows."""
    for session in sessions:
        s_start, s_end = session["start_time"], session["timestamp"]
        session_laps = [
            lap for lap in laps
            if _within(lap.get("start_time"), s_start, s_end)
        ]
        session_records = [r for r in records if _within(r["timestamp"], s_start, s_end)]
        if not session_laps:
            # Devices that skip lap messages: one implicit lap
            session["laps"] = [{"records": session_records}]
            continue
        for lap in session_laps:
            lap["records"] = [
                r for r in session_records
                if _within(r["timestamp"], lap.get("start_time"), lap.get("timestamp"))
            ]
        session["laps"] = session_laps
    return sessions


def decode_telemetry(data: bytes) -> dict:
    """Decode FIT bytes into a {"sessions": [{..., "laps": [{"records": [...]}]}]} cascade.

    Raises fitparse.utils.FitParseError for undecodable bytes and
    MalformedInputError when the stream holds no messages at all.
    """
    fit = FitFile(io.BytesIO(data))
    sessions: list[dict] = []
    laps: list[dict] = []
    records: list[dict] = []
    time_created = None
    message_count = 0

    for msg in fit.get_messages():
        message_count += 1
        fields = {f.name: f.value for f in msg}
        if msg.name == "session":
            sessions.append(_session_fields(fields))
        elif msg.name == "lap":
            laps.append({"start_time": fields.get("start_time"), "timestamp": fields.get("timestamp")})
        elif msg.name == "record":
            records.append(_record_fields(fields))
        elif msg.name == "file_id" and time_created is None:
            time_created = fields.get("time_created")

    if message_count == 0:
        raise MalformedInputError("no data messages in file", fmt="fit", stage="decode")

    logger.debug(
        f"[TELEMETRY] Decoded {len(sessions)} session(s), {len(laps)} lap(s), {len(records)} record(s)"
    )
    return {
        "time_created": time_created,
        "sessions": _cascade(sessions, laps, records),
    }


def _as_utc(ts):
    if isinstance(ts, datetime) and ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def _activity_type(sport: str | None) -> ActivityType:
    if sport is None:
        return ActivityType(DEFAULT_ACTIVITY_TYPE)
    mapped = SPORT_MAP.get(sport.lower())
    if mapped is None:
        logger.warning(f"[TELEMETRY] Unmapped sport code {sport!r}, defaulting to {DEFAULT_ACTIVITY_TYPE}")
        return ActivityType(DEFAULT_ACTIVITY_TYPE)
    return ActivityType(mapped)


def _sub_sport_label(sub_sport: str | None) -> str | None:
    if sub_sport is None:
        return None
    return SUB_SPORT_MAP.get(sub_sport.lower(), sub_sport)


def _gps_points(records: list[dict]) -> list[GpsPoint]:
    points = []
    for r in records:
        if r.get("position_lat") is None or r.get("position_long") is None:
            continue
        points.append(GpsPoint(
            lat=r["position_lat"],
            lon=r["position_long"],
            elevation=r.get("altitude"),
            timestamp=_as_utc(r.get("timestamp")),
            heart_rate=r.get("heart_rate"),
            speed=r.get("speed"),
        ))
    return points


def activity_from_telemetry(decoded: dict) -> ActivityRecord:
    """Map a decoded cascade to an ActivityRecord.

    Uses the first session and the records of its first lap. A missing
    session leaves every field absent (duration and distance 0).
    """
    try:
        sessions = decoded.get("sessions") or []
        session = sessions[0] if sessions else {}
        laps = session.get("laps") or []
        records = (laps[0].get("records") or []) if laps else []
    except (AttributeError, TypeError, KeyError) as e:
        raise ParseError(f"unexpected structure: {e}", fmt="fit", stage="session") from e

    if not session:
        logger.warning("[TELEMETRY] No session message, summary fields left empty")

    try:
        points = _gps_points(records)
    except (AttributeError, TypeError, ValidationError) as e:
        raise ParseError(f"invalid sample record: {e}", fmt="fit", stage="record") from e

    start = session.get("start_time")
    if start is None and records:
        start = records[0].get("timestamp")
    if start is None:
        start = decoded.get("time_created")
    if start is None:
        raise ParseError("no start time in file", fmt="fit", stage="session")

    distance_km = session.get("total_distance")
    try:
        record = ActivityRecord(
            start_time=to_naive_local(start, settings.timezone),
            duration=session.get("total_elapsed_time") or 0,
            moving_time=session.get("total_timer_time"),
            activity_type=_activity_type(session.get("sport")),
            sub_sport=_sub_sport_label(session.get("sub_sport")),
            distance=distance_km * 1000 if distance_km is not None else 0,
            avg_speed=session.get("avg_speed"),
            max_speed=session.get("max_speed"),
            elevation_gain=session.get("total_ascent"),
            elevation_loss=session.get("total_descent"),
            avg_heart_rate=session.get("avg_heart_rate"),
            max_heart_rate=session.get("max_heart_rate"),
            avg_cadence=session.get("avg_cadence"),
            avg_power=session.get("avg_power"),
            normalized_power=session.get("normalized_power"),
            avg_temperature=session.get("avg_temperature"),
            max_temperature=session.get("max_temperature"),
            calories=session.get("total_calories"),
            gps_points=points,
        )
    except ValidationError as e:
        raise ParseError(f"invalid session values: {e}", fmt="fit", stage="record") from e

    return record


def parse_telemetry(data: bytes) -> ActivityRecord:
    record = activity_from_telemetry(decode_telemetry(data))
    logger.info(
        f"[TELEMETRY] Parsed {record.activity_type.value} activity: "
        f"{record.duration:.0f}s, {record.distance:.0f}m, {len(record.gps_points)} GPS points"
    )
    return record
