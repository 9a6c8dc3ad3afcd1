# backend/nutrisync/services/scoring_context.py
"""
Scoring context builder

Every optional field of a ScoringContext gets its documented default here,
once, so the scoring functions never have to ask whether something is present.
"""

import logging
from typing import Optional, Sequence, Tuple, Union

from nutrisync.core.errors import coerce_enum, require_non_negative, require_positive
from nutrisync.models.enums import (
    TrainingLoad, MealType, ScoringStrategy, ExperienceLevel, SessionIntensity, SessionType
)
from nutrisync.models.scoring import (
    ScoringContext, ResolvedContext, NutritionTargets, NutritionActuals,
    FuelingWindows, WindowStatus, TrainingPlan, TrainingActual, ScoringFlags
)
from nutrisync.models.targets import DayTarget, UserProfile, MacroGrams, FuelingWindow
from nutrisync.services.activity_classifier import (
    SESSION_TYPE_LOADS, estimate_max_hr, intensity_from_heart_rate
)
from nutrisync.services.targets_engine import calculate_tdee, calculate_macros, calculate_fueling_windows

logger = logging.getLogger(__name__)

DEFAULT_EXPERIENCE_LEVEL = ExperienceLevel.INTERMEDIATE

INTENSITY_ORDER = (SessionIntensity.LOW, SessionIntensity.MODERATE, SessionIntensity.HIGH)


def _flatten(kcal: float, grams: MacroGrams, fueling: FuelingWindow) -> NutritionTargets:
    return NutritionTargets(
        calories=kcal,
        protein=grams.protein,
        carbs=grams.cho,
        fat=grams.fat,
        pre_cho=fueling.pre.cho_g if fueling.pre else None,
        during_cho_per_hour=fueling.during_cho_g_per_hour,
        post_cho=fueling.post.cho_g if fueling.post else None,
        post_pro=fueling.post.protein_g if fueling.post else None,
    )


def targets_from_day_target(target: DayTarget) -> NutritionTargets:
    """Flatten a DayTarget into the record the scoring engine compares against"""
    return _flatten(target.kcal, target.grams, target.fueling)


def fallback_targets(profile: UserProfile, load: TrainingLoad) -> NutritionTargets:
    """Targets from body metrics and load alone, for users without a stored meal plan"""
    tdee = calculate_tdee(profile, load)
    return _flatten(tdee, calculate_macros(profile, load, tdee), calculate_fueling_windows(profile, load))


def default_windows(load: TrainingLoad) -> FuelingWindows:
    trains = load != TrainingLoad.REST
    return FuelingWindows(
        pre=WindowStatus(applicable=trains),
        during=WindowStatus(applicable=load.is_high),
        post=WindowStatus(applicable=trains),
    )


def _validate_actuals(actual: NutritionActuals) -> None:
    for name in ("calories", "protein", "carbs", "fat"):
        require_non_negative(getattr(actual, name), f"actual.{name}")
    for name in ("pre_cho", "during_cho_per_hour", "post_cho", "post_pro"):
        value = getattr(actual, name)
        if value is not None:
            require_non_negative(value, f"actual.{name}")


def _type_family(session_type: str) -> str:
    """Known session types collapse onto the load they train; anything else matches by name"""
    name = session_type.strip().lower()
    try:
        return SESSION_TYPE_LOADS[SessionType(name)].value
    except ValueError:
        return name


def match_type_family(plan: TrainingPlan, actual: TrainingActual) -> bool:
    """No credit unless both the planned and the completed session type are known"""
    if not plan.type or not actual.type:
        return False
    return _type_family(plan.type) == _type_family(actual.type)


def match_intensity(plan: TrainingPlan, actual: TrainingActual,
                    profile: Optional[UserProfile]) -> Tuple[bool, bool]:
    """(on target, one zone off) from average heart rate against the age-predicted maximum"""
    if plan.intensity is None or actual.avg_hr is None or profile is None:
        return False, False
    max_hr = estimate_max_hr(profile.age)
    if max_hr <= 0:
        return False, False
    planned = coerce_enum(SessionIntensity, plan.intensity, "training_plan.intensity")
    achieved = intensity_from_heart_rate(actual.avg_hr, max_hr)
    gap = abs(INTENSITY_ORDER.index(planned) - INTENSITY_ORDER.index(achieved))
    return gap == 0, gap == 1


def resolve_context(context: ScoringContext) -> ResolvedContext:
    load = coerce_enum(TrainingLoad, context.load, "load")
    strategy = coerce_enum(ScoringStrategy, context.strategy, "strategy")
    experience = DEFAULT_EXPERIENCE_LEVEL
    if context.experience_level is not None:
        experience = coerce_enum(ExperienceLevel, context.experience_level, "experience_level")
    meals_present = tuple(coerce_enum(MealType, meal, "meals_present") for meal in context.meals_present)
    _validate_actuals(context.actual)

    target = context.target
    has_meal_plan = target.calories > 0
    if not has_meal_plan and context.profile is not None:
        logger.warning(f"No meal plan targets; synthesising {load.value} targets from body metrics")
        target = fallback_targets(context.profile, load)

    plan = context.training_plan or TrainingPlan()
    actual_training = context.training_actual or TrainingActual()
    planned_duration = plan.duration_min or 0
    actual_duration = actual_training.duration_min or 0
    require_non_negative(planned_duration, "training_plan.duration_min")
    require_non_negative(actual_duration, "training_actual.duration_min")
    if actual_training.avg_hr is not None:
        require_positive(actual_training.avg_hr, "training_actual.avg_hr")

    type_family_match = context.type_family_match
    if type_family_match is None:
        type_family_match = match_type_family(plan, actual_training)
    intensity_ok, intensity_near = match_intensity(plan, actual_training, context.profile)
    if context.intensity_ok is not None:
        intensity_ok = context.intensity_ok
    if context.intensity_near is not None:
        intensity_near = context.intensity_near

    has_food_logs = context.has_food_logs
    if has_food_logs is None:
        has_food_logs = context.actual.calories > 0 or len(meals_present) > 0

    return ResolvedContext(
        target=target,
        actual=context.actual,
        load=load,
        strategy=strategy,
        experience_level=experience,
        windows=context.windows or default_windows(load),
        meals_present=meals_present,
        single_meal_over_60pct=context.single_meal_over_60pct,
        planned_duration_min=planned_duration,
        actual_duration_min=actual_duration,
        type_family_match=type_family_match,
        intensity_ok=intensity_ok,
        intensity_near=intensity_near,
        has_heart_rate=actual_training.avg_hr is not None,
        has_training_data=context.training_plan is not None or context.training_actual is not None,
        flags=context.flags or ScoringFlags(),
        has_food_logs=has_food_logs,
        has_meal_plan=has_meal_plan,
        has_body_metrics=context.has_body_metrics,
    )


def create_scoring_context(
    targets: NutritionTargets,
    actuals: NutritionActuals,
    training_plan: Optional[TrainingPlan] = None,
    training_actual: Optional[TrainingActual] = None,
    load: Union[TrainingLoad, str] = TrainingLoad.REST,
    strategy: Union[ScoringStrategy, str] = ScoringStrategy.RUNNER_FOCUSED,
    meals_present: Sequence[Union[MealType, str]] = (),
    windows: Optional[FuelingWindows] = None,
    flags: Optional[ScoringFlags] = None,
    experience_level: Optional[Union[ExperienceLevel, str]] = None,
) -> ScoringContext:
    """Convenience factory with the usual defaults for a day"""
    return ScoringContext(
        target=targets,
        actual=actuals,
        load=coerce_enum(TrainingLoad, load, "load"),
        strategy=coerce_enum(ScoringStrategy, strategy, "strategy"),
        windows=windows,
        meals_present=tuple(coerce_enum(MealType, meal, "meals_present") for meal in meals_present),
        training_plan=training_plan,
        training_actual=training_actual,
        flags=flags,
        experience_level=experience_level,
    )
