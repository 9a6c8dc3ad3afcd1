# backend/nutrisync/services/periodization.py
"""
Goal & periodization adjuster

Pure transforms DayTarget -> DayTarget. Goal adjustments are applied before
race-phase adjustments; the two are not interchangeable.
"""

import math
import logging
from dataclasses import replace
from typing import Optional, Tuple, Union

from nutrisync.core import science
from nutrisync.core.errors import coerce_enum, require_positive
from nutrisync.core.science import round_half_up
from nutrisync.models.enums import GoalType, RacePhase, TrainingLoad
from nutrisync.models.targets import DayTarget, MacroGrams, FuelingWindow, UserProfile
from nutrisync.services.targets_engine import (
    balance_fat_grams, build_day_target, compute_day_target, parse_iso_date
)

logger = logging.getLogger(__name__)


def _shift_fat_to_cho(target: DayTarget, fraction: float) -> DayTarget:
    """Move a share of the day's kcal from fat to CHO without breaking the fat floor"""
    floor_fat_g = math.ceil(science.FAT_FLOOR_FRACTION * target.kcal / science.KCAL_PER_G_FAT - 1e-9)
    available_g = max(0, target.grams.fat - floor_fat_g)
    fat_shift_g = min(round_half_up(fraction * target.kcal / science.KCAL_PER_G_FAT), available_g)
    if fat_shift_g == 0:
        return target

    cho_gain_g = round_half_up(fat_shift_g * science.KCAL_PER_G_FAT / science.KCAL_PER_G_CHO)
    grams = MacroGrams(
        cho=target.grams.cho + cho_gain_g,
        protein=target.grams.protein,
        fat=target.grams.fat - fat_shift_g,
    )
    return build_day_target(target.date, target.load, target.kcal, grams, target.fueling)


def _rescale(target: DayTarget, kcal_factor: float, protein_factor: float = 1.0) -> DayTarget:
    """Scale the day's energy (and optionally protein); fat re-balances to the new total"""
    kcal = round_half_up(target.kcal * kcal_factor, science.KCAL_ROUNDING_STEP)
    protein_g = round_half_up(target.grams.protein * protein_factor)
    grams = MacroGrams(
        cho=target.grams.cho,
        protein=protein_g,
        fat=balance_fat_grams(kcal, target.grams.cho, protein_g),
    )
    return build_day_target(target.date, target.load, kcal, grams, target.fueling)


def adjust_for_goal(target: DayTarget, goal: Optional[Union[GoalType, str]] = None) -> DayTarget:
    if goal is None:
        return target
    goal = coerce_enum(GoalType, goal, "goal")

    if goal.is_race:
        adjusted = _shift_fat_to_cho(target, science.GOAL_FAT_TO_CHO_SHIFT)
    elif goal == GoalType.WEIGHT_LOSS:
        adjusted = _rescale(target, science.WEIGHT_LOSS_KCAL_FACTOR, science.WEIGHT_LOSS_PROTEIN_FACTOR)
    elif goal == GoalType.GAIN_MUSCLE:
        adjusted = _rescale(target, science.GAIN_MUSCLE_KCAL_FACTOR, science.GAIN_MUSCLE_PROTEIN_FACTOR)
    else:
        adjusted = target

    logger.debug(f"Goal {goal.value}: kcal {target.kcal} -> {adjusted.kcal}")
    return adjusted


def determine_race_phase(date: str, race_date: Optional[str] = None) -> RacePhase:
    """Race phase from the number of days between the reference date and the race"""
    reference = parse_iso_date(date, "date")
    if race_date is None:
        return RacePhase.BASE

    days_to_race = (parse_iso_date(race_date, "race_date") - reference).days
    if days_to_race < 0:
        return RacePhase.OFF
    for max_days, phase in science.RACE_PHASE_THRESHOLDS:
        if days_to_race <= max_days:
            return phase
    return RacePhase.BASE


def _raise_race_fueling(fueling: FuelingWindow, weight_kg: Optional[float]) -> FuelingWindow:
    """Race-day fueling floors; existing guidance is only ever raised"""
    during = max(fueling.during_cho_g_per_hour or 0, science.RACE_DURING_CHO_PER_HOUR_FLOOR)
    pre = fueling.pre
    post = fueling.post

    if weight_kg is not None:
        pre_floor = round_half_up(weight_kg * science.RACE_PRE_CHO_PER_KG_FLOOR)
        post_cho_floor = round_half_up(weight_kg * science.RACE_POST_CHO_PER_KG_FLOOR)
        post_pro_floor = round_half_up(weight_kg * science.RACE_POST_PROTEIN_PER_KG_FLOOR)

        if pre is not None:
            pre = replace(pre, cho_g=max(pre.cho_g, pre_floor))
        if post is not None:
            post = replace(
                post,
                cho_g=max(post.cho_g, post_cho_floor),
                protein_g=max(post.protein_g, post_pro_floor),
            )

    return FuelingWindow(pre=pre, during_cho_g_per_hour=during, post=post)


def adjust_for_phase(target: DayTarget, phase: Union[RacePhase, str],
                     weight_kg: Optional[float] = None) -> DayTarget:
    phase = coerce_enum(RacePhase, phase, "phase")
    if weight_kg is not None:
        require_positive(weight_kg, "weight_kg")

    if phase == RacePhase.BUILD and target.load.is_high:
        adjusted = _rescale(target, science.BUILD_HIGH_LOAD_KCAL_FACTOR)
    elif phase == RacePhase.PEAK:
        adjusted = _shift_fat_to_cho(target, science.PEAK_FAT_TO_CHO_SHIFT)
    elif phase == RacePhase.TAPER and not target.load.is_high:
        adjusted = _rescale(target, science.TAPER_KCAL_FACTOR)
    elif phase == RacePhase.RACE and target.load != TrainingLoad.REST:
        adjusted = replace(target, fueling=_raise_race_fueling(target.fueling, weight_kg))
    else:
        adjusted = target

    logger.debug(f"Phase {phase.value} on {target.load.value} day: kcal {target.kcal} -> {adjusted.kcal}")
    return adjusted


def apply_periodization(target: DayTarget, goal: Optional[Union[GoalType, str]],
                        phase: Union[RacePhase, str], weight_kg: Optional[float] = None) -> DayTarget:
    """Goal first, then race phase"""
    return adjust_for_phase(adjust_for_goal(target, goal), phase, weight_kg)


def compute_periodized_target(profile: UserProfile, load: Union[TrainingLoad, str], date: str,
                              goal: Optional[Union[GoalType, str]] = None,
                              race_date: Optional[str] = None) -> Tuple[DayTarget, RacePhase]:
    """Base target for the day, adjusted for the athlete's goal and race phase"""
    base = compute_day_target(profile, load, date)
    phase = determine_race_phase(date, race_date)
    return apply_periodization(base, goal, phase, profile.weight_kg), phase
