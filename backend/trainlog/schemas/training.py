from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from trainlog.schemas.activity import ActivityType


class HeartRateZone(BaseModel):
    zone: int  # 1-based
    min: int  # bpm, inclusive
    max: int  # bpm, inclusive
    # Presentation only; injected from settings
    name: Optional[str] = None
    color: Optional[str] = None


class ZoneSource(str, Enum):
    samples = "samples"  # per-sample heart rate from the GPS trace
    average = "average"  # synthesized from the average heart rate
    none = "none"  # no heart rate data


class ZoneDurationResult(BaseModel):
    durations: list[float]  # seconds per zone, zone order
    total_seconds: float
    source: ZoneSource


class ZoneBucket(BaseModel):
    zone: int
    seconds: float


class IntensitySplit(BaseModel):
    low: float = 0.0
    moderate: float = 0.0
    high: float = 0.0


class PolarizationFocus(str, Enum):
    insufficient_base = "insufficient base"
    missing_high_intensity = "missing high intensity"
    too_much_intensity = "too much intensity"
    balanced = "balanced"


class PolarizationSummary(BaseModel):
    totals: IntensitySplit  # seconds
    percentages: IntensitySplit
    target: IntensitySplit
    score: float  # 0-100
    focus: PolarizationFocus
    message: str


class DailyTrimp(BaseModel):
    date: date
    trimp: float = 0.0


class TrainingLoadSample(BaseModel):
    date: date
    trimp: float
    chronic_load: float
    acute_load: float
    balance: float


class LoadStatus(str, Enum):
    fresh = "fresh"
    rested = "rested"
    optimal = "optimal"
    tired = "tired"
    overreached = "overreached"


class LoadStatusThresholds(BaseModel):
    """Lower (exclusive) balance bound for each status, checked top-down."""

    fresh: float = 25.0
    rested: float = 5.0
    optimal: float = -10.0
    tired: float = -30.0


class TrainingLoadStatus(BaseModel):
    chronic_load: float
    acute_load: float
    balance: float
    status: LoadStatus
    recommendation: str


class TrainingLoadReport(BaseModel):
    history: list[TrainingLoadSample]
    current: TrainingLoadStatus


class ZoneShare(BaseModel):
    zone: int
    label: Optional[str] = None
    color: Optional[str] = None
    seconds: int
    percentage: float


class ActivityZoneSummary(BaseModel):
    start_time: str
    activity_type: ActivityType
    sub_sport: Optional[str] = None
    is_indoor: bool
    duration: float
    distance: float
    avg_heart_rate: Optional[float] = None
    max_heart_rate: Optional[float] = None
    trimp: Optional[int] = None
    zones: list[ZoneShare]
    dominant_zone: int
    dominant_zone_label: Optional[str] = None
    source: ZoneSource


class ZoneDistribution(BaseModel):
    per_activity: list[ActivityZoneSummary]
    buckets: list[ZoneBucket]
    sampling: dict[str, int] = Field(default_factory=lambda: {s.value: 0 for s in ZoneSource})


class TypeSummary(BaseModel):
    activity_type: ActivityType
    count: int = 0
    duration: float = 0.0
    distance: float = 0.0
    trimp: float = 0.0
    indoor: int = 0
    outdoor: int = 0


class ActivitiesSummary(BaseModel):
    sessions: int = 0
    total_distance: float = 0.0  # meters
    total_duration: float = 0.0  # seconds
    total_trimp: float = 0.0
    avg_heart_rate: Optional[int] = None  # mean of per-activity averages
    avg_speed: Optional[float] = None  # km/h, None without duration
    indoor_count: int = 0
    outdoor_count: int = 0


class ZoneTotal(BaseModel):
    """Seconds in one zone summed over many activities."""

    zone: int
    name: Optional[str] = None
    color: Optional[str] = None
    min: int
    max: int
    seconds: int
    hours: float
    percentage: float  # of all zone time


class ZoneReport(BaseModel):
    zones: list[HeartRateZone]
    summary: ActivitiesSummary
    distribution: ZoneDistribution
    zone_totals: list[ZoneTotal]
    polarization: PolarizationSummary
    by_type: list[TypeSummary]
