"""Import boundary: file content in, scored activity record out.

A primary file (FIT or CSV, occasionally GPX) may come with a separate GPX
track. Both are parsed independently; the track then replaces the GPS trace
and fills a missing elevation gain. A broken primary file fails the import,
a broken secondary track is logged and skipped.
"""

import asyncio
from pathlib import Path
from typing import Iterable, Optional, Union

from loguru import logger

from trainlog.core.errors import ParseError
from trainlog.parsers.dispatch import parse_content
from trainlog.schemas.activity import ActivityRecord, AthleteProfile
from trainlog.schemas.training import ZoneReport
from trainlog.services.hr_zones import zones_for_profile
from trainlog.services.polarization import build_polarization_summary
from trainlog.services.trimp import with_trimp
from trainlog.services.zone_report import (
    compute_zone_distribution,
    format_zone_totals,
    summarize_activities,
    summarize_by_type,
)

PathLike = Union[str, Path]


def merge_track(primary: ActivityRecord, track: ActivityRecord) -> ActivityRecord:
    update = {"gps_points": track.gps_points}
    if not primary.elevation_gain and track.elevation_gain:
        update["elevation_gain"] = track.elevation_gain
    return primary.model_copy(update=update)


def _merge_optional_track(primary: ActivityRecord, track) -> ActivityRecord:
    """Merge a secondary parse result, which may be an exception."""
    if track is None:
        return primary
    if isinstance(track, (ParseError, OSError)):
        logger.warning(f"[IMPORT] Ignoring unusable GPS track file: {track}")
        return primary
    if isinstance(track, BaseException):
        raise track
    return merge_track(primary, track)


def import_content(
    content: Union[bytes, str],
    extension: str,
    gps_track: Optional[Union[bytes, str]] = None,
    profile: Optional[AthleteProfile] = None,
) -> ActivityRecord:
    """Parse already-read upload content and score it for `profile`."""
    record = parse_content(content, extension)

    track = None
    if gps_track is not None:
        try:
            track = parse_content(gps_track, "gpx")
        except ParseError as e:
            track = e

    record = with_trimp(_merge_optional_track(record, track), profile)
    logger.info(
        f"[IMPORT] Imported {record.activity_type.value} activity from {extension} "
        f"(trimp={record.trimp}, gps_points={len(record.gps_points)})"
    )
    return record


async def read_and_parse(path: PathLike, extension: Optional[str] = None) -> ActivityRecord:
    """Read a file off the event loop, then parse it synchronously."""
    path = Path(path)
    content = await asyncio.to_thread(path.read_bytes)
    return parse_content(content, extension or path.suffix)


async def import_activity(
    primary: PathLike,
    gps_track: Optional[PathLike] = None,
    profile: Optional[AthleteProfile] = None,
) -> ActivityRecord:
    """Parse a primary file and an optional GPX file concurrently, then merge and score."""
    if gps_track is None:
        record = await read_and_parse(primary)
        track = None
    else:
        record, track = await asyncio.gather(
            read_and_parse(primary),
            read_and_parse(gps_track, "gpx"),
            return_exceptions=True,
        )
        if isinstance(record, BaseException):
            raise record

    record = with_trimp(_merge_optional_track(record, track), profile)
    logger.info(f"[IMPORT] Imported {Path(primary).name} (trimp={record.trimp})")
    return record


def analyze_activities(
    records: Iterable[ActivityRecord],
    profile: Optional[AthleteProfile],
) -> Optional[ZoneReport]:
    """Summary, zone distribution, polarization and per-type split for one athlete.

    Returns None when the athlete has no max / resting heart rate.
    """
    zones = zones_for_profile(profile)
    if not zones:
        logger.info("[IMPORT] Athlete heart rate constants missing, no zone analytics")
        return None

    records = list(records)
    distribution = compute_zone_distribution(records, zones)
    return ZoneReport(
        zones=zones,
        summary=summarize_activities(records),
        distribution=distribution,
        zone_totals=format_zone_totals(distribution.buckets, zones),
        polarization=build_polarization_summary(distribution.buckets),
        by_type=summarize_by_type(records),
    )
