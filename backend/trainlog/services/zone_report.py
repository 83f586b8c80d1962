"""Zone statistics across an athlete's activities.

Builds the per-activity zone table, the aggregated zone buckets that feed
the polarization score, and a per-type summary.
"""

from typing import Iterable, Optional, Sequence

from trainlog.core.constants import INDOOR_BY_DEFAULT_TYPES, INDOOR_SUB_SPORTS
from trainlog.core.num_utils import round_half_up
from trainlog.schemas.activity import ActivityRecord, ActivityType
from trainlog.schemas.training import (
    ActivitiesSummary,
    ActivityZoneSummary,
    HeartRateZone,
    TypeSummary,
    ZoneBucket,
    ZoneDistribution,
    ZoneDurationResult,
    ZoneShare,
    ZoneTotal,
)
from trainlog.services.hr_zones import calculate_zone_durations


def is_indoor(record: ActivityRecord) -> bool:
    """Indoor sub-sports, indoor-by-default types, and walks without GPS."""
    return (
        (record.sub_sport or "") in INDOOR_SUB_SPORTS
        or record.activity_type.value in INDOOR_BY_DEFAULT_TYPES
        or (record.activity_type == ActivityType.walking and not record.has_gps)
    )


def _dominant_index(durations: Sequence[float]) -> int:
    best = 0
    for i, value in enumerate(durations):
        if value > durations[best]:
            best = i
    return best


def summarize_activity(
    record: ActivityRecord,
    zones: Sequence[HeartRateZone],
    result: Optional[ZoneDurationResult] = None,
) -> ActivityZoneSummary:
    result = result or calculate_zone_durations(record, zones)
    total = result.total_seconds or record.duration or 0
    dominant = _dominant_index(result.durations) if result.durations else 0

    shares = [
        ZoneShare(
            zone=zone.zone,
            label=zone.name,
            color=zone.color,
            seconds=round_half_up(seconds),
            percentage=round_half_up(seconds / total * 100, 1) if total > 0 else 0.0,
        )
        for zone, seconds in zip(zones, result.durations)
    ]
    dominant_zone = zones[dominant] if zones else None

    return ActivityZoneSummary(
        start_time=record.start_time.isoformat(),
        activity_type=record.activity_type,
        sub_sport=record.sub_sport,
        is_indoor=is_indoor(record),
        duration=record.duration,
        distance=record.distance,
        avg_heart_rate=record.avg_heart_rate,
        max_heart_rate=record.max_heart_rate,
        trimp=record.trimp,
        zones=shares,
        dominant_zone=dominant_zone.zone if dominant_zone else 1,
        dominant_zone_label=dominant_zone.name if dominant_zone else None,
        source=result.source,
    )


def compute_zone_distribution(
    records: Iterable[ActivityRecord],
    zones: Sequence[HeartRateZone],
) -> ZoneDistribution:
    """Per-activity zone rows plus seconds per zone summed over all activities.

    Activities are independent of each other here; only the final sums
    combine them.
    """
    seconds = [0.0] * len(zones)
    distribution = ZoneDistribution(per_activity=[], buckets=[])

    for record in records:
        result = calculate_zone_durations(record, zones)
        summary = summarize_activity(record, zones, result)
        distribution.per_activity.append(summary)
        distribution.sampling[result.source.value] += 1
        for i, value in enumerate(result.durations):
            seconds[i] += value

    distribution.buckets = [
        ZoneBucket(zone=zone.zone, seconds=total) for zone, total in zip(zones, seconds)
    ]
    return distribution


def summarize_by_type(records: Iterable[ActivityRecord]) -> list[TypeSummary]:
    by_type: dict[ActivityType, TypeSummary] = {}
    for record in records:
        summary = by_type.setdefault(record.activity_type, TypeSummary(activity_type=record.activity_type))
        summary.count += 1
        summary.duration += record.duration or 0
        summary.distance += record.distance or 0
        summary.trimp += record.trimp or 0
        if is_indoor(record):
            summary.indoor += 1
        else:
            summary.outdoor += 1
    return list(by_type.values())


def format_zone_totals(
    buckets: Sequence[ZoneBucket],
    zones: Sequence[HeartRateZone],
) -> list[ZoneTotal]:
    """Aggregated buckets with zone bounds, hours and share of all zone time."""
    total = sum(b.seconds for b in buckets)
    return [
        ZoneTotal(
            zone=zone.zone,
            name=zone.name,
            color=zone.color,
            min=zone.min,
            max=zone.max,
            seconds=round_half_up(bucket.seconds),
            hours=round_half_up(bucket.seconds / 3600, 1),
            percentage=round_half_up(bucket.seconds / total * 100, 1) if total > 0 else 0.0,
        )
        for zone, bucket in zip(zones, buckets)
    ]


def summarize_activities(records: Iterable[ActivityRecord]) -> ActivitiesSummary:
    summary = ActivitiesSummary()
    heart_rates = []
    for record in records:
        summary.sessions += 1
        summary.total_distance += record.distance or 0
        summary.total_duration += record.duration or 0
        summary.total_trimp += record.trimp or 0
        if record.avg_heart_rate:
            heart_rates.append(record.avg_heart_rate)
        if is_indoor(record):
            summary.indoor_count += 1
        else:
            summary.outdoor_count += 1

    if heart_rates:
        summary.avg_heart_rate = round_half_up(sum(heart_rates) / len(heart_rates))
    if summary.total_duration > 0:
        speed = (summary.total_distance / 1000) / (summary.total_duration / 3600)
        summary.avg_speed = round_half_up(speed, 1)
    return summary
