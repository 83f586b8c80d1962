"""Heart-rate zones (Karvonen) and per-activity time in zone.

Time in zone is computed from the best data available, tagged by source:
- samples: per-point heart rate from the GPS trace, rescaled to the
  activity duration
- average: a synthetic distribution around the average heart rate
- none: no heart rate data at all
"""

from typing import Optional, Sequence

from loguru import logger

from trainlog.core.config import settings
from trainlog.core.constants import (
    AVERAGE_ABOVE_SHARE,
    AVERAGE_BELOW_SHARE,
    AVERAGE_DOMINANT_SHARE,
    AVERAGE_REMAINDER_SHARE,
    HR_RESERVE_ZONE_BOUNDS,
)
from trainlog.core.num_utils import round_half_up
from trainlog.core.time_utils import epoch_seconds
from trainlog.schemas.activity import ActivityRecord, AthleteProfile
from trainlog.schemas.training import HeartRateZone, ZoneDurationResult, ZoneSource


def build_zones(
    max_heart_rate: Optional[float],
    resting_heart_rate: Optional[float],
    labels: Optional[Sequence[str]] = None,
    colors: Optional[Sequence[str]] = None,
) -> list[HeartRateZone]:
    """Five zones from heart rate reserve: resting + fraction * (max - resting).

    Bounds are rounded to whole bpm; the top zone ends at max heart rate.
    Adjacent zones share their boundary value. Returns [] when either
    constant is missing.
    """
    if not max_heart_rate or not resting_heart_rate:
        return []
    labels = list(labels) if labels is not None else settings.zone_labels
    colors = list(colors) if colors is not None else settings.zone_colors
    reserve = max_heart_rate - resting_heart_rate

    zones = []
    last = len(HR_RESERVE_ZONE_BOUNDS) - 1
    for i, (low, high) in enumerate(HR_RESERVE_ZONE_BOUNDS):
        zones.append(HeartRateZone(
            zone=i + 1,
            min=round_half_up(resting_heart_rate + low * reserve),
            max=int(max_heart_rate) if i == last else round_half_up(resting_heart_rate + high * reserve),
            name=labels[i] if i < len(labels) else None,
            color=colors[i] if i < len(colors) else None,
        ))
    return zones


def zones_for_profile(profile: Optional[AthleteProfile]) -> list[HeartRateZone]:
    if profile is None or not profile.has_heart_rate_constants:
        return []
    return build_zones(profile.max_heart_rate, profile.resting_heart_rate)


def resolve_zone_index(value: float, zones: Sequence[HeartRateZone]) -> int:
    """Index of the first zone containing `value`; below all -> 0, above all -> last."""
    if not zones:
        return 0
    for i, zone in enumerate(zones):
        if zone.min <= value <= zone.max:
            return i
    return 0 if value < zones[0].min else len(zones) - 1


def _sampled_durations(record: ActivityRecord, zones: Sequence[HeartRateZone]) -> Optional[list[float]]:
    """Per-zone seconds from heart-rate-stamped points, or None with fewer than 2.

    Each gap is clamped to the configured [min, max] seconds and credited
    to the zone of the earlier point.
    """
    points = record.heart_rate_points()
    if len(points) < 2:
        return None

    points.sort(key=lambda p: epoch_seconds(p.timestamp))
    durations = [0.0] * len(zones)
    for current, following in zip(points, points[1:]):
        delta = epoch_seconds(following.timestamp) - epoch_seconds(current.timestamp)
        if delta <= 0:
            continue
        delta = min(max(delta, settings.sample_delta_min_s), settings.sample_delta_max_s)
        durations[resolve_zone_index(current.heart_rate, zones)] += delta
    return durations


def _average_durations(avg_heart_rate: float, duration: float, zones: Sequence[HeartRateZone]) -> list[float]:
    """60% dominant zone, 20% below, 15% above, 5% over the remaining zones.

    Shares of neighbours that do not exist (dominant zone at either end)
    are dropped, not redistributed. With the dominant zone at either end the
    5% is shared by three zones. Older stored distributions gave each of
    those zones 5% / (zones - 3) = 2.5% instead, so for Z1- or Z5-dominant
    activities their total is 2.5 points higher (Z1: 82.5% vs 80%).
    """
    n = len(zones)
    dominant = resolve_zone_index(avg_heart_rate, zones)
    durations = [0.0] * n
    durations[dominant] = duration * AVERAGE_DOMINANT_SHARE
    if dominant > 0:
        durations[dominant - 1] = duration * AVERAGE_BELOW_SHARE
    if dominant < n - 1:
        durations[dominant + 1] = duration * AVERAGE_ABOVE_SHARE

    others = [i for i in range(n) if abs(i - dominant) > 1]
    for i in others:
        durations[i] = duration * AVERAGE_REMAINDER_SHARE / len(others)
    return durations


def calculate_zone_durations(record: ActivityRecord, zones: Sequence[HeartRateZone]) -> ZoneDurationResult:
    """Seconds spent in each zone for one activity."""
    n = len(zones)
    if n == 0:
        return ZoneDurationResult(durations=[], total_seconds=0.0, source=ZoneSource.none)

    activity_duration = record.duration or 0.0
    sampled = _sampled_durations(record, zones)
    if sampled is not None:
        sampled_seconds = sum(sampled)
        if sampled_seconds > 0 and activity_duration > 0:
            scale = activity_duration / sampled_seconds
            if settings.rescale_ratio_min < scale < settings.rescale_ratio_max:
                return ZoneDurationResult(
                    durations=[d * scale for d in sampled],
                    total_seconds=activity_duration,
                    source=ZoneSource.samples,
                )
            logger.info(
                f"[HR_ZONES] Sampled {sampled_seconds:.0f}s vs duration {activity_duration:.0f}s "
                f"(ratio {scale:.2f}), discarding samples"
            )
        elif sampled_seconds > 0:
            # No recorded duration to rescale against
            return ZoneDurationResult(
                durations=sampled, total_seconds=sampled_seconds, source=ZoneSource.samples
            )

    if record.avg_heart_rate:
        return ZoneDurationResult(
            durations=_average_durations(record.avg_heart_rate, activity_duration, zones),
            total_seconds=activity_duration,
            source=ZoneSource.average,
        )

    return ZoneDurationResult(durations=[0.0] * n, total_seconds=0.0, source=ZoneSource.none)
