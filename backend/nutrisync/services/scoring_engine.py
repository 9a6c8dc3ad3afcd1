# backend/nutrisync/services/scoring_engine.py
"""
Unified scoring engine

Scores one day's logged food and training against its targets:

    total = clamp(0, 100, nutrition * wN + training * wT
                          + bonuses + penalties - overconsumption + incomplete)

wN / wT come from the day's training load. The penalty profile is chosen by
whoever builds the engine and passed down explicitly.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple, Union

from nutrisync.core import scoring_profiles as sp
from nutrisync.core.errors import coerce_enum, require_non_negative
from nutrisync.core.science import round_half_up
from nutrisync.models.enums import TrainingLoad, MealType, ExperienceLevel, PenaltyProfileName
from nutrisync.models.scoring import (
    ScoringContext, ResolvedContext, WindowStatus, NutritionBreakdown, TrainingBreakdown,
    BlendWeights, ScoreBreakdown, MealLogEntry, MacroScores, MealScore
)
from nutrisync.models.targets import Meal
from nutrisync.services.data_completeness import assess_data_completeness
from nutrisync.services.scoring_context import resolve_context, DEFAULT_EXPERIENCE_LEVEL

logger = logging.getLogger(__name__)


def _clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


# ===== Nutrition =====

def calculate_macro_score(target: float, actual: float,
                          experience_level: ExperienceLevel = DEFAULT_EXPERIENCE_LEVEL) -> int:
    """Discrete 0-100 score for one macro; an undefined target never scores as perfect"""
    if target <= 0:
        return 0
    error = abs(actual - target) / target
    for bound, score in zip(sp.TOLERANCE_LADDERS[experience_level], sp.TOLERANCE_SCORES):
        if error <= bound:
            return score
    return 0


def _window_dose_score(need: Optional[float], got: Optional[float], status: WindowStatus) -> float:
    if not status.applicable or not need or need <= 0:
        return 100
    got = got or 0
    if got <= 0:
        return 0

    ratio = got / need
    if status.in_window:
        bands, floor = sp.IN_WINDOW_BANDS, sp.IN_WINDOW_MIN_SCORE
    else:
        bands, floor = sp.OUT_OF_WINDOW_BANDS, sp.OUT_OF_WINDOW_MIN_SCORE
    for min_ratio, score in bands:
        if ratio >= min_ratio:
            return score
    return floor


def _during_score(need: Optional[float], got: Optional[float], status: WindowStatus) -> float:
    if not status.applicable or not need or need <= 0:
        return 100
    delta = abs((got or 0) - need)
    if delta <= sp.DURING_FULL_CREDIT_DELTA:
        return 100
    if delta >= sp.DURING_ZERO_CREDIT_DELTA:
        return 0
    span = sp.DURING_ZERO_CREDIT_DELTA - sp.DURING_FULL_CREDIT_DELTA
    return 100 * (sp.DURING_ZERO_CREDIT_DELTA - delta) / span


def _post_score(context: ResolvedContext) -> float:
    """Post window is only as good as the weaker of its CHO and protein doses"""
    status = context.windows.post
    target, actual = context.target, context.actual
    needs = [
        (need, got) for need, got in (
            (target.post_cho, actual.post_cho),
            (target.post_pro, actual.post_pro),
        )
        if need and need > 0
    ]
    if not status.applicable or not needs:
        return 100
    return min(_window_dose_score(need, got, status) for need, got in needs)


def calculate_timing_score(context: ResolvedContext) -> float:
    target, actual, windows = context.target, context.actual, context.windows
    pre = _window_dose_score(target.pre_cho, actual.pre_cho, windows.pre)
    during = _during_score(target.during_cho_per_hour, actual.during_cho_per_hour, windows.during)
    post = _post_score(context)
    return (
        pre * sp.TIMING_WEIGHTS["pre"]
        + during * sp.TIMING_WEIGHTS["during"]
        + post * sp.TIMING_WEIGHTS["post"]
    )


def calculate_structure_score(context: ResolvedContext) -> int:
    present = set(context.meals_present)
    score = sum(
        sp.MAIN_MEAL_POINTS
        for meal in (MealType.BREAKFAST, MealType.LUNCH, MealType.DINNER)
        if meal in present
    )
    if context.load != TrainingLoad.REST and MealType.SNACK in present:
        score += sp.SNACK_POINTS
    if context.single_meal_over_60pct:
        score = min(score, sp.SINGLE_MEAL_CAP)
    return score


def _macro_component(context: ResolvedContext) -> float:
    weights = sp.STRATEGY_CONFIG[context.strategy].macro_weights
    level = context.experience_level
    target, actual = context.target, context.actual
    return (
        calculate_macro_score(target.calories, actual.calories, level) * weights.calories
        + calculate_macro_score(target.protein, actual.protein, level) * weights.protein
        + calculate_macro_score(target.carbs, actual.carbs, level) * weights.carbs
        + calculate_macro_score(target.fat, actual.fat, level) * weights.fat
    )


def calculate_nutrition_score(context: ResolvedContext) -> Tuple[float, float, float, float]:
    """Returns (total, macros, timing, structure), unrounded"""
    weights = sp.STRATEGY_CONFIG[context.strategy].nutrition_weights
    macros = _macro_component(context)
    timing = calculate_timing_score(context)
    structure = calculate_structure_score(context)
    total = macros * weights.macros + timing * weights.timing + structure * weights.structure
    return total, macros, timing, structure


# ===== Training =====

def calculate_completion_score(planned_min: float, actual_min: float) -> int:
    if planned_min <= 0:
        return 100
    ratio = actual_min / planned_min
    full_low, full_high = sp.COMPLETION_FULL_RANGE
    partial_low, partial_high = sp.COMPLETION_PARTIAL_RANGE
    if full_low <= ratio <= full_high:
        return 100
    if partial_low <= ratio <= partial_high:
        return sp.COMPLETION_PARTIAL_SCORE
    return 0


def calculate_training_score(context: ResolvedContext) -> Tuple[float, int, int, int]:
    """Returns (total, completion, type_match, intensity)"""
    completion = calculate_completion_score(context.planned_duration_min, context.actual_duration_min)
    type_match = 100 if context.type_family_match else 0
    if context.intensity_ok:
        intensity = 100
    elif context.intensity_near:
        intensity = sp.INTENSITY_NEAR_SCORE
    else:
        intensity = 0

    # Without heart-rate data intensity can't be judged; its weight goes to completion
    intensity_weight = sp.INTENSITY_WEIGHT if context.has_heart_rate else 0.0
    completion_weight = sp.BASE_COMPLETION_WEIGHT + (sp.INTENSITY_WEIGHT - intensity_weight)

    total = (
        completion * completion_weight
        + type_match * sp.TYPE_MATCH_WEIGHT
        + intensity * intensity_weight
    )
    return total, completion, type_match, intensity


# ===== Modifiers =====

def calculate_bonuses(context: ResolvedContext) -> int:
    flags = context.flags
    bonuses = 0
    if flags.window_sync_all:
        bonuses += sp.WINDOW_SYNC_BONUS
    bonuses += min(sp.MAX_STREAK_BONUS, max(0, flags.streak_days))
    if flags.hydration_ok:
        bonuses += sp.HYDRATION_BONUS
    return min(bonuses, sp.MAX_TOTAL_BONUS)


def calculate_penalties(context: ResolvedContext, profile: sp.PenaltyProfile) -> int:
    flags = context.flags
    penalties = 0
    if flags.is_hard_day and context.actual.carbs < sp.HARD_DAY_CARB_FLOOR * context.target.carbs:
        penalties += profile.hard_underfuel
    if flags.big_deficit and context.actual_duration_min >= sp.BIG_DEFICIT_MIN_DURATION:
        penalties += profile.big_deficit
    if flags.missed_post_window:
        penalties += profile.missed_post_window
    return max(penalties, profile.max_combined)


def calculate_overconsumption_penalty(context: ResolvedContext) -> int:
    config = sp.STRATEGY_CONFIG[context.strategy]
    target_kcal = context.target.calories
    if target_kcal > 0 and context.actual.calories > target_kcal * config.overconsumption_threshold:
        return config.overconsumption_penalty
    return 0


# ===== Engine =====

class UnifiedScoringEngine:
    """Scores days under one penalty profile"""

    def __init__(self, penalty_profile: Union[PenaltyProfileName, str] = PenaltyProfileName.REDUCED):
        name = coerce_enum(PenaltyProfileName, penalty_profile, "penalty_profile")
        self.penalty_profile = sp.get_penalty_profile(name)

    def score(self, context: ScoringContext) -> ScoreBreakdown:
        resolved = resolve_context(context)
        load_weights = sp.LOAD_WEIGHTS[resolved.load]

        nutrition_total, macros, timing, structure = calculate_nutrition_score(resolved)
        training_total, completion, type_match, intensity = calculate_training_score(resolved)

        bonuses = calculate_bonuses(resolved)
        penalties = calculate_penalties(resolved, self.penalty_profile)
        overconsumption = calculate_overconsumption_penalty(resolved)
        completeness, incomplete = assess_data_completeness(resolved, self.penalty_profile)

        raw = (
            nutrition_total * load_weights.nutrition
            + training_total * load_weights.training
            + bonuses
            + penalties
            - overconsumption
            + incomplete
        )
        total = int(_clamp(round_half_up(raw)))

        logger.debug(
            f"Score {total} ({resolved.strategy.value}/{resolved.load.value}): "
            f"nutrition={nutrition_total:.1f} training={training_total:.1f} "
            f"bonus={bonuses} penalty={penalties + incomplete} over={overconsumption}"
        )

        return ScoreBreakdown(
            total=total,
            nutrition=NutritionBreakdown(
                total=round_half_up(nutrition_total),
                macros=round_half_up(macros),
                timing=round_half_up(timing),
                structure=round_half_up(structure),
            ),
            training=TrainingBreakdown(
                total=round_half_up(training_total),
                completion=completion,
                type_match=type_match,
                intensity=intensity,
            ),
            bonuses=bonuses,
            penalties=penalties + incomplete,
            overconsumption_penalty=overconsumption,
            weights=BlendWeights(nutrition=load_weights.nutrition, training=load_weights.training),
            data_completeness=completeness,
        )


def calculate_unified_score(context: ScoringContext,
                            penalty_profile: Union[PenaltyProfileName, str] = PenaltyProfileName.REDUCED
                            ) -> ScoreBreakdown:
    return UnifiedScoringEngine(penalty_profile).score(context)


# ===== Meal-level =====

def _sum_logs(logs: Sequence[MealLogEntry]) -> Dict[MealType, List[float]]:
    totals: Dict[MealType, List[float]] = defaultdict(lambda: [0.0, 0.0, 0.0, 0.0])
    for entry in logs:
        meal_type = coerce_enum(MealType, entry.meal_type, "meal_type")
        for name in ("calories", "protein_g", "carbs_g", "fat_g"):
            require_non_negative(getattr(entry, name), f"log.{name}")
        row = totals[meal_type]
        row[0] += entry.calories
        row[1] += entry.protein_g
        row[2] += entry.carbs_g
        row[3] += entry.fat_g
    return totals


def calculate_meal_scores(target_meals: Sequence[Meal], logs: Sequence[MealLogEntry],
                          experience_level: Optional[Union[ExperienceLevel, str]] = None) -> List[MealScore]:
    """
    Score each planned meal against what was logged for it.

    score = 0.4 * calories + 0.6 * mean(protein, carbs, fat); a planned meal
    with nothing logged scores 0.
    """
    level = DEFAULT_EXPERIENCE_LEVEL
    if experience_level is not None:
        level = coerce_enum(ExperienceLevel, experience_level, "experience_level")
    logged = _sum_logs(logs)

    scores = []
    for meal in target_meals:
        if meal.meal not in logged:
            scores.append(MealScore(meal_type=meal.meal, score=0, breakdown=MacroScores(0, 0, 0, 0)))
            continue

        calories, protein, carbs, fat = logged[meal.meal]
        breakdown = MacroScores(
            calories=calculate_macro_score(meal.kcal, calories, level),
            protein=calculate_macro_score(meal.protein_g, protein, level),
            carbs=calculate_macro_score(meal.cho_g, carbs, level),
            fat=calculate_macro_score(meal.fat_g, fat, level),
        )
        macro_mean = (breakdown.protein + breakdown.carbs + breakdown.fat) / 3
        score = round_half_up(breakdown.calories * sp.MEAL_CALORIE_WEIGHT + macro_mean * sp.MEAL_MACRO_WEIGHT)
        scores.append(MealScore(meal_type=meal.meal, score=score, breakdown=breakdown))
    return scores
