"""Intensity distribution against the polarized 80/10/10 model.

Zones 1-2 count as low, zone 3 as moderate, zones 4-5 as high.
score = max(0, 100 - 0.8 * sum(|actual% - target%|))
"""

from typing import Iterable, Union

from trainlog.core.constants import POLARIZATION_PENALTY, POLARIZATION_TARGET
from trainlog.core.num_utils import round_half_up
from trainlog.schemas.training import (
    IntensitySplit,
    PolarizationFocus,
    PolarizationSummary,
    ZoneBucket,
)

LOW_ZONES = (1, 2)
MODERATE_ZONES = (3,)
HIGH_ZONES = (4, 5)

FOCUS_MESSAGES = {
    PolarizationFocus.insufficient_base: "Add more Z1/Z2 volume to build your aerobic base.",
    PolarizationFocus.missing_high_intensity: "Add Z4/Z5 blocks to stimulate your VO2 max.",
    PolarizationFocus.too_much_intensity: "Watch your fatigue: the high-intensity share is very large.",
    PolarizationFocus.balanced: "Distribution is very close to 80/10/10, keep it up.",
}


def classify_focus(percentages: IntensitySplit) -> PolarizationFocus:
    if percentages.low < 70:
        return PolarizationFocus.insufficient_base
    if percentages.high < 8:
        return PolarizationFocus.missing_high_intensity
    if percentages.high > 20:
        return PolarizationFocus.too_much_intensity
    return PolarizationFocus.balanced


def build_polarization_summary(buckets: Iterable[Union[ZoneBucket, dict]]) -> PolarizationSummary:
    """Aggregate {zone, seconds} buckets (any number per zone) into a score and focus."""
    totals = IntensitySplit()
    for bucket in buckets:
        if isinstance(bucket, dict):
            bucket = ZoneBucket(**bucket)
        if bucket.zone in LOW_ZONES:
            totals.low += bucket.seconds
        elif bucket.zone in MODERATE_ZONES:
            totals.moderate += bucket.seconds
        elif bucket.zone in HIGH_ZONES:
            totals.high += bucket.seconds

    total_seconds = totals.low + totals.moderate + totals.high

    def to_percent(value: float) -> float:
        return value / total_seconds * 100 if total_seconds > 0 else 0.0

    percentages = IntensitySplit(
        low=to_percent(totals.low),
        moderate=to_percent(totals.moderate),
        high=to_percent(totals.high),
    )
    target = IntensitySplit(**POLARIZATION_TARGET)
    deviation = (
        abs(percentages.low - target.low)
        + abs(percentages.moderate - target.moderate)
        + abs(percentages.high - target.high)
    )
    score = max(0.0, 100 - deviation * POLARIZATION_PENALTY)
    focus = classify_focus(percentages)

    return PolarizationSummary(
        totals=totals,
        percentages=percentages,
        target=target,
        score=round_half_up(score, 1),
        focus=focus,
        message=FOCUS_MESSAGES[focus],
    )
