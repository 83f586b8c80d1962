"""Ad-hoc CSV export parsing.

Expected header (any case): date,type,duration,distance,avgHeartRate,...
Only the first data row is read; one file describes one activity.
"""

import csv
import io
import math
from datetime import datetime

from loguru import logger
from pydantic import ValidationError

from trainlog.core.config import settings
from trainlog.core.constants import DEFAULT_ACTIVITY_TYPE, SPORT_MAP
from trainlog.core.errors import EmptyFileError, MalformedInputError, MissingColumnError
from trainlog.core.time_utils import hhmmss_to_seconds, to_naive_local
from trainlog.schemas.activity import ActivityRecord, ActivityType

# record field -> accepted column names, matched case-insensitively
COLUMNS = {
    "date": ("date", "Date"),
    "type": ("type", "Type"),
    "duration": ("duration", "Duration"),
    "moving_time": ("movingTime", "MovingTime"),
    "distance": ("distance", "Distance"),
    "avg_heart_rate": ("avgHeartRate", "AvgHeartRate"),
    "max_heart_rate": ("maxHeartRate", "MaxHeartRate"),
    "avg_speed": ("avgSpeed", "AvgSpeed"),
    "max_speed": ("maxSpeed", "MaxSpeed"),
    "elevation_gain": ("elevationGain", "ElevationGain"),
    "elevation_loss": ("elevationLoss", "ElevationLoss"),
    "calories": ("calories", "Calories"),
    "avg_cadence": ("avgCadence", "AvgCadence"),
    "avg_power": ("avgPower", "AvgPower"),
    "normalized_power": ("normalizedPower", "NormalizedPower"),
    "avg_temperature": ("avgTemperature", "AvgTemperature"),
    "max_temperature": ("maxTemperature", "MaxTemperature"),
    "sub_sport": ("subSport", "SubSport"),
}

REQUIRED = ("date",)

NUMERIC = (
    "distance", "avg_heart_rate", "max_heart_rate", "avg_speed", "max_speed",
    "elevation_gain", "elevation_loss", "calories", "avg_cadence", "avg_power",
    "normalized_power", "avg_temperature", "max_temperature",
)

# Durations also accept HH:MM:SS
DURATIONS = ("duration", "moving_time")


def _resolve_columns(header: list[str]) -> dict[str, str]:
    """Map record field -> actual header name present in the file."""
    by_lower: dict[str, str] = {}
    for h in header:
        if h:
            # first spelling wins
            by_lower.setdefault(h.strip().lower(), h)
    resolved = {}
    for field, names in COLUMNS.items():
        for name in names:
            if name.lower() in by_lower:
                resolved[field] = by_lower[name.lower()]
                break
    return resolved


def _cell(row: dict, columns: dict, field: str) -> str | None:
    column = columns.get(field)
    if column is None:
        return None
    value = row.get(column)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _to_number(value: str, field: str) -> float:
    if "," in value and "." not in value:
        # decimal comma: "1,5"
        value = value.replace(",", ".")
    try:
        number = float(value)
    except ValueError:
        raise MalformedInputError(f"non-numeric value {value!r}", fmt="csv", stage=f"field:{field}")
    if not math.isfinite(number):
        raise MalformedInputError(f"non-finite value {value!r}", fmt="csv", stage=f"field:{field}")
    return number


def _to_seconds(value: str, field: str) -> float:
    if ":" in value:
        try:
            return float(hhmmss_to_seconds(value))
        except ValueError:
            raise MalformedInputError(f"invalid duration {value!r}", fmt="csv", stage=f"field:{field}")
    return _to_number(value, field)


def _to_start_time(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise MalformedInputError(f"invalid date {value!r}", fmt="csv", stage="field:date")
    # Timezone-qualified values are converted; bare values are already local
    if parsed.tzinfo is not None:
        return to_naive_local(parsed, settings.timezone)
    return parsed


def _to_activity_type(value: str | None) -> ActivityType:
    if value is None:
        return ActivityType(DEFAULT_ACTIVITY_TYPE)
    lowered = value.lower()
    for member in ActivityType:
        if member.value.lower() == lowered:
            return member
    mapped = SPORT_MAP.get(lowered)
    if mapped is not None:
        return ActivityType(mapped)
    logger.warning(f"[TABULAR] Unknown activity type {value!r}, defaulting to {DEFAULT_ACTIVITY_TYPE}")
    return ActivityType(DEFAULT_ACTIVITY_TYPE)


def parse_tabular(text: str) -> ActivityRecord:
    """Parse the first data row of a CSV export into an ActivityRecord.

    Raises:
        EmptyFileError: header only, or nothing at all
        MissingColumnError: no date column
        MalformedInputError: unparseable date or non-numeric value
    """
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    header = reader.fieldnames or []
    row = None
    for candidate in reader:
        # skip blank lines
        if any((v or "").strip() for v in candidate.values() if isinstance(v, str)):
            row = candidate
            break
    if row is None:
        raise EmptyFileError()

    columns = _resolve_columns(header)
    for field in REQUIRED:
        if field not in columns:
            raise MissingColumnError(field)

    date_value = _cell(row, columns, "date")
    if date_value is None:
        raise MalformedInputError("empty date", fmt="csv", stage="field:date")

    values = {}
    for field in NUMERIC:
        raw = _cell(row, columns, field)
        values[field] = _to_number(raw, field) if raw is not None else None
    for field in DURATIONS:
        raw = _cell(row, columns, field)
        values[field] = _to_seconds(raw, field) if raw is not None else None

    try:
        record = ActivityRecord(
            start_time=_to_start_time(date_value),
            activity_type=_to_activity_type(_cell(row, columns, "type")),
            sub_sport=_cell(row, columns, "sub_sport"),
            duration=values.pop("duration") or 0,
            distance=values.pop("distance") or 0,
            **values,
        )
    except ValidationError as e:
        raise MalformedInputError(f"invalid values: {e}", fmt="csv", stage="record") from e

    logger.info(
        f"[TABULAR] Parsed {record.activity_type.value} activity from CSV "
        f"({len(columns)} recognized columns)"
    )
    return record
