"""Chronic / acute training load and balance from daily TRIMP.

- chronic load: EMA over `chronic_window` days (42 by default)
- acute load: EMA over `acute_window` days (7 by default)
- balance: chronic - acute

alpha = 2 / (N + 1). The first day seeds both averages with that day's
TRIMP instead of 0. Each day depends on the previous one, so a series is
always computed in date order.
"""

from datetime import date, timedelta
from typing import Iterable, Optional, Sequence, Union

from loguru import logger

from trainlog.core.config import settings
from trainlog.core.num_utils import round_half_up
from trainlog.schemas.activity import ActivityRecord
from trainlog.schemas.training import (
    DailyTrimp,
    LoadStatus,
    LoadStatusThresholds,
    TrainingLoadReport,
    TrainingLoadSample,
    TrainingLoadStatus,
)

RECOMMENDATIONS = {
    LoadStatus.fresh: "You are very fresh: a good moment for a race or a hard session.",
    LoadStatus.rested: "You are well rested, with a good balance between fitness and fatigue.",
    LoadStatus.optimal: "Optimal zone for progress. Keep going!",
    LoadStatus.tired: "Fatigue is building up. Plan more recovery.",
    LoadStatus.overreached: "Risk of overtraining! Take some rest.",
}


def smoothing_factor(window_days: int) -> float:
    if window_days < 1:
        raise ValueError("window_days must be >= 1")
    return 2 / (window_days + 1)


def default_thresholds() -> LoadStatusThresholds:
    return LoadStatusThresholds(
        fresh=settings.status_fresh_above,
        rested=settings.status_rested_above,
        optimal=settings.status_optimal_above,
        tired=settings.status_tired_above,
    )


def build_daily_trimp(
    activities: Iterable[ActivityRecord],
    days: int,
    end: Optional[date] = None,
) -> list[DailyTrimp]:
    """One entry per day of the `days`-long window ending on `end` (today by default).

    Rest days are present with trimp 0; activities outside the window are ignored.
    """
    end = end or date.today()
    start = end - timedelta(days=days - 1)
    totals: dict[date, float] = {start + timedelta(days=i): 0.0 for i in range(days)}

    for activity in activities:
        day = activity.start_time.date()
        if day in totals:
            totals[day] += activity.trimp or 0

    return [DailyTrimp(date=d, trimp=t) for d, t in totals.items()]


def calculate_load_series(
    daily: Sequence[Union[DailyTrimp, tuple]],
    chronic_window: Optional[int] = None,
    acute_window: Optional[int] = None,
) -> list[TrainingLoadSample]:
    """EMA series for consecutive days; output values rounded to 0.1."""
    chronic_alpha = smoothing_factor(chronic_window or settings.chronic_window_days)
    acute_alpha = smoothing_factor(acute_window or settings.acute_window_days)

    chronic = 0.0
    acute = 0.0
    samples: list[TrainingLoadSample] = []
    for i, entry in enumerate(daily):
        if not isinstance(entry, DailyTrimp):
            entry = DailyTrimp(date=entry[0], trimp=entry[1])
        trimp = entry.trimp
        if i == 0:
            chronic = trimp
            acute = trimp
        else:
            chronic = trimp * chronic_alpha + chronic * (1 - chronic_alpha)
            acute = trimp * acute_alpha + acute * (1 - acute_alpha)

        samples.append(TrainingLoadSample(
            date=entry.date,
            trimp=trimp,
            chronic_load=round_half_up(chronic, 1),
            acute_load=round_half_up(acute, 1),
            balance=round_half_up(chronic - acute, 1),
        ))
    return samples


def classify_status(
    balance: float,
    thresholds: Optional[LoadStatusThresholds] = None,
) -> tuple[LoadStatus, str]:
    t = thresholds or default_thresholds()
    if balance > t.fresh:
        status = LoadStatus.fresh
    elif balance > t.rested:
        status = LoadStatus.rested
    elif balance > t.optimal:
        status = LoadStatus.optimal
    elif balance > t.tired:
        status = LoadStatus.tired
    else:
        status = LoadStatus.overreached
    return status, RECOMMENDATIONS[status]


def current_status(
    history: Sequence[TrainingLoadSample],
    thresholds: Optional[LoadStatusThresholds] = None,
) -> TrainingLoadStatus:
    """Status of the most recent day; an empty history reads as all zeros."""
    if history:
        last = history[-1]
        chronic, acute, balance = last.chronic_load, last.acute_load, last.balance
    else:
        chronic = acute = balance = 0.0
    status, recommendation = classify_status(balance, thresholds)
    return TrainingLoadStatus(
        chronic_load=chronic,
        acute_load=acute,
        balance=balance,
        status=status,
        recommendation=recommendation,
    )


def calculate_training_load(
    activities: Iterable[ActivityRecord],
    days: int = 90,
    end: Optional[date] = None,
    chronic_window: Optional[int] = None,
    acute_window: Optional[int] = None,
    thresholds: Optional[LoadStatusThresholds] = None,
) -> TrainingLoadReport:
    """Daily history over the window plus the current status."""
    daily = build_daily_trimp(activities, days, end)
    history = calculate_load_series(daily, chronic_window, acute_window)
    current = current_status(history, thresholds)
    logger.info(
        f"[LOAD] {len(history)} days, chronic={current.chronic_load} acute={current.acute_load} "
        f"balance={current.balance} -> {current.status.value}"
    )
    return TrainingLoadReport(history=history, current=current)
