from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator


class ActivityType(str, Enum):
    cycling = "Cycling"
    running = "Running"
    walking = "Walking"
    rowing = "Rowing"
    swimming = "Swimming"
    hiking = "Hiking"
    fitness = "Fitness"
    training = "Training"
    transition = "Transition"


class GpsPoint(BaseModel):
    """One sample of a GPS trace. Missing optional values stay None, never 0."""

    lat: float
    lon: float
    elevation: Optional[float] = None  # meters
    timestamp: Optional[datetime] = None
    heart_rate: Optional[float] = None  # bpm
    speed: Optional[float] = None  # km/h


class ActivityRecord(BaseModel):
    """Normalized activity produced by every parser.

    Every measured field is optional: FIT files carry most of them, GPX
    files carry no heart rate or power, CSV exports carry no GPS trace.
    """

    start_time: datetime  # local wall-clock time, no tzinfo
    duration: float = Field(0.0, ge=0)  # seconds, includes pauses
    moving_time: Optional[float] = Field(None, ge=0)  # seconds, excludes pauses
    activity_type: ActivityType = ActivityType.cycling
    sub_sport: Optional[str] = None

    distance: float = Field(0.0, ge=0)  # meters
    avg_speed: Optional[float] = None  # km/h
    max_speed: Optional[float] = None  # km/h
    elevation_gain: Optional[float] = None  # meters
    elevation_loss: Optional[float] = None  # meters

    avg_heart_rate: Optional[float] = None
    max_heart_rate: Optional[float] = None
    avg_cadence: Optional[float] = None
    avg_power: Optional[float] = None
    normalized_power: Optional[float] = None
    avg_temperature: Optional[float] = None  # Celsius
    max_temperature: Optional[float] = None  # Celsius
    calories: Optional[float] = None

    trimp: Optional[int] = None
    gps_points: list[GpsPoint] = Field(default_factory=list)

    # Opaque enrichment attached after parsing (e.g. weather lookup)
    weather: Optional[dict[str, Any]] = None

    @model_validator(mode="after")
    def _moving_within_duration(self):
        if self.moving_time is not None and self.moving_time > self.duration:
            raise ValueError("moving_time must not exceed duration")
        return self

    @property
    def has_gps(self) -> bool:
        return len(self.gps_points) > 0

    def heart_rate_points(self) -> list[GpsPoint]:
        """Points carrying both a positive heart rate and a timestamp."""
        return [
            p for p in self.gps_points
            if p.heart_rate is not None and p.heart_rate > 0 and p.timestamp is not None
        ]


class AthleteProfile(BaseModel):
    """Physiological constants supplied by the athlete profile store."""

    max_heart_rate: Optional[int] = None
    resting_heart_rate: Optional[int] = None

    @property
    def has_heart_rate_constants(self) -> bool:
        return bool(self.max_heart_rate) and bool(self.resting_heart_rate)
