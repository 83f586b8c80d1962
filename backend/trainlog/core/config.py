from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator


class Settings(BaseSettings):
    # Timezone used to turn device UTC timestamps into local start times.
    # Examples: "America/New_York", "Europe/Paris", or "local" to use system tz.
    timezone: str = "local"
    log_level: str = "INFO"
    log_file: str | None = None

    # Training load smoothing windows (days)
    chronic_window_days: int = 42
    acute_window_days: int = 7

    # Balance thresholds for the load status, evaluated top-down
    status_fresh_above: float = 25.0
    status_rested_above: float = 5.0
    status_optimal_above: float = -10.0
    status_tired_above: float = -30.0

    # Zone engine tunables
    sample_delta_min_s: float = 1.0
    sample_delta_max_s: float = 30.0
    rescale_ratio_min: float = 0.3
    rescale_ratio_max: float = 3.0

    # Zone presentation, attached to zone definitions only
    zone_labels: list[str] = [
        "Z1 - Recovery",
        "Z2 - Endurance",
        "Z3 - Tempo",
        "Z4 - Threshold",
        "Z5 - VO2 max",
    ]
    zone_colors: list[str] = ["#0EA5E9", "#22C55E", "#FACC15", "#F97316", "#EF4444"]

    # Allow empty env strings for optional fields
    @field_validator("log_file", mode="before")
    @classmethod
    def _empty_to_none(cls, v):
        if v in ("", None, "null", "None"):
            return None
        return v

    model_config = SettingsConfigDict(env_file=".env", env_prefix="TRAINLOG_", extra="ignore")


settings = Settings()
