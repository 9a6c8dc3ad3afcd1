# backend/nutrisync/services/activity_classifier.py
"""
Maps raw session / wearable data onto a TrainingLoad and reconciles planned
vs completed training for a day.
"""

import logging
from typing import Iterable, Sequence

from nutrisync.core.science import round_half_up
from nutrisync.models.activity import (
    TrainingSession, WearableData, SessionPlan, SessionActual, DayReconciliation
)
from nutrisync.models.enums import TrainingLoad, SessionIntensity, SessionType
from nutrisync.models.targets import UserProfile
from nutrisync.services.targets_engine import compute_day_target

logger = logging.getLogger(__name__)

SESSION_TYPE_LOADS = {
    SessionType.RECOVERY: TrainingLoad.EASY,
    SessionType.EASY: TrainingLoad.EASY,
    SessionType.TEMPO: TrainingLoad.MODERATE,
    SessionType.INTERVAL: TrainingLoad.QUALITY,
    SessionType.LONG: TrainingLoad.LONG,
}

# Highest first: a day with intervals is a quality day even if it also had a long run
LOAD_PRIORITY = (
    TrainingLoad.QUALITY,
    TrainingLoad.LONG,
    TrainingLoad.MODERATE,
    TrainingLoad.EASY,
    TrainingLoad.REST,
)

LONG_SESSION_MIN = 90
MODERATE_SESSION_MIN = 45
MODERATE_DAY_TOTAL_MIN = 60

HR_LOW_PCT = 65
HR_HIGH_PCT = 85
HR_MAX_AGE_BASE = 220
KCAL_PER_MIN_LOW = 6
KCAL_PER_MIN_HIGH = 10


def estimate_max_hr(age: int) -> int:
    return HR_MAX_AGE_BASE - age


def intensity_from_heart_rate(average_hr: float, max_hr: float) -> SessionIntensity:
    hr_pct = average_hr / max_hr * 100
    if hr_pct < HR_LOW_PCT:
        return SessionIntensity.LOW
    if hr_pct > HR_HIGH_PCT:
        return SessionIntensity.HIGH
    return SessionIntensity.MODERATE


def classify_load(session: TrainingSession) -> TrainingLoad:
    if session.duration_min == 0:
        return TrainingLoad.REST

    if session.session_type is not None:
        return SESSION_TYPE_LOADS[session.session_type]

    if session.duration_min >= LONG_SESSION_MIN:
        return TrainingLoad.LONG
    if session.intensity == SessionIntensity.HIGH:
        return TrainingLoad.QUALITY
    if session.intensity == SessionIntensity.MODERATE and session.duration_min >= MODERATE_SESSION_MIN:
        return TrainingLoad.MODERATE
    return TrainingLoad.EASY


def infer_load_from_wearable(data: WearableData) -> TrainingLoad:
    """Estimate intensity from heart rate (or energy rate as a fallback) and classify"""
    if data.duration_min == 0:
        return TrainingLoad.REST

    intensity = SessionIntensity.MODERATE
    if data.average_hr and data.max_hr:
        intensity = intensity_from_heart_rate(data.average_hr, data.max_hr)
    elif data.calories_burned > 0:
        kcal_per_min = data.calories_burned / data.duration_min
        if kcal_per_min < KCAL_PER_MIN_LOW:
            intensity = SessionIntensity.LOW
        elif kcal_per_min > KCAL_PER_MIN_HIGH:
            intensity = SessionIntensity.HIGH

    return classify_load(TrainingSession(duration_min=data.duration_min, intensity=intensity))


def highest_load(loads: Iterable[TrainingLoad]) -> TrainingLoad:
    best = TrainingLoad.REST
    for load in loads:
        if LOAD_PRIORITY.index(load) < LOAD_PRIORITY.index(best):
            best = load
    return best


def aggregate_activities_to_load(sessions: Sequence[TrainingSession]) -> TrainingLoad:
    """One load for the whole day; several short easy sessions add up to a moderate day"""
    if not sessions:
        return TrainingLoad.REST

    load = highest_load(classify_load(session) for session in sessions)
    total_min = sum(session.duration_min for session in sessions)
    if load == TrainingLoad.EASY and total_min >= MODERATE_DAY_TOTAL_MIN:
        load = TrainingLoad.MODERATE

    logger.debug(f"Aggregated {len(sessions)} sessions ({total_min} min) -> {load.value}")
    return load


def reconcile_day(profile: UserProfile, date: str, plans: Sequence[SessionPlan],
                  actuals: Sequence[SessionActual]) -> DayReconciliation:
    """Re-target the day to what was actually trained"""
    planned_load = highest_load(plan.planned_load for plan in plans)
    actual_load = highest_load(actual.actual_load for actual in actuals)

    planned_target = compute_day_target(profile, planned_load, date)
    adjusted_target = compute_day_target(profile, actual_load, date)
    variance = round_half_up((adjusted_target.kcal - planned_target.kcal) / planned_target.kcal * 100)

    if planned_load != actual_load:
        logger.info(f"Day {date} trained as {actual_load.value} instead of {planned_load.value} ({variance:+d}% kcal)")

    return DayReconciliation(
        date=date,
        planned_load=planned_load,
        actual_load=actual_load,
        variance_pct=variance,
        adjusted_target=adjusted_target,
    )
