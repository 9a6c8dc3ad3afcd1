# backend/nutrisync/services/targets_engine.py
"""
Targets engine: profile + training load + date -> DayTarget

BMR (Mifflin-St Jeor) -> TDEE by activity factor -> per-kg CHO/protein with fat
as the balancing term -> meal split and workout fueling windows.
"""

import math
import logging
from datetime import date as date_type
from typing import Dict, Tuple, Union

from nutrisync.core import science
from nutrisync.core.errors import InvalidArgumentError, coerce_enum, require_non_negative
from nutrisync.core.science import round_half_up
from nutrisync.models.enums import Sex, TrainingLoad, MealType, SessionIntensity
from nutrisync.models.targets import (
    UserProfile, MacroGrams, Meal, PreWindow, PostWindow, FuelingWindow, DayTarget, HydrationPlan
)

logger = logging.getLogger(__name__)

LoadLike = Union[TrainingLoad, str]


def parse_iso_date(value: str, field: str = "date") -> date_type:
    """Parse an ISO-8601 calendar date (a datetime string keeps only its date part)"""
    if isinstance(value, date_type):
        return value
    if not isinstance(value, str):
        raise InvalidArgumentError(field, value, "expected an ISO-8601 date string")
    try:
        return date_type.fromisoformat(value[:10])
    except ValueError:
        raise InvalidArgumentError(field, value, "expected an ISO-8601 date string") from None


def calculate_bmr(profile: UserProfile) -> float:
    """
    Calculate Basal Metabolic Rate using Mifflin-St Jeor Formula
    Men: BMR = 10 × weight(kg) + 6.25 × height(cm) - 5 × age(years) + 5
    Women: BMR = 10 × weight(kg) + 6.25 × height(cm) - 5 × age(years) - 161
    """
    bmr = (
        science.BMR_WEIGHT_COEF * profile.weight_kg
        + science.BMR_HEIGHT_COEF * profile.height_cm
        - science.BMR_AGE_COEF * profile.age
    )
    if profile.sex == Sex.MALE:
        bmr += science.BMR_MALE_OFFSET
    else:
        bmr += science.BMR_FEMALE_OFFSET
    return bmr


def get_activity_factor(load: LoadLike) -> float:
    load = coerce_enum(TrainingLoad, load, "load")
    return science.ACTIVITY_FACTORS[load]


def calculate_tdee(profile: UserProfile, load: LoadLike) -> int:
    """Calculate Total Daily Energy Expenditure, rounded to the nearest 10 kcal"""
    factor = get_activity_factor(load)
    return round_half_up(calculate_bmr(profile) * factor, science.KCAL_ROUNDING_STEP)


def get_macro_targets_per_kg(load: LoadLike) -> Dict[str, float]:
    load = coerce_enum(TrainingLoad, load, "load")
    return dict(science.MACROS_PER_KG[load])


def balance_fat_grams(kcal: float, cho_g: int, protein_g: int) -> int:
    """
    Fat fills whatever CHO and protein leave of the day's energy, but never
    supplies less than 20% of it.
    """
    floor_kcal = science.FAT_FLOOR_FRACTION * kcal
    remaining_kcal = kcal - cho_g * science.KCAL_PER_G_CHO - protein_g * science.KCAL_PER_G_PROTEIN
    fat_kcal = max(floor_kcal, remaining_kcal)
    fat_g = round_half_up(fat_kcal / science.KCAL_PER_G_FAT)
    if fat_g * science.KCAL_PER_G_FAT < floor_kcal - 1e-9:
        fat_g = math.ceil(floor_kcal / science.KCAL_PER_G_FAT - 1e-9)
    return max(0, fat_g)


def calculate_macros(profile: UserProfile, load: LoadLike, tdee: float) -> MacroGrams:
    per_kg = get_macro_targets_per_kg(load)
    cho_g = round_half_up(profile.weight_kg * per_kg["cho"])
    protein_g = round_half_up(profile.weight_kg * per_kg["protein"])
    fat_g = balance_fat_grams(tdee, cho_g, protein_g)
    return MacroGrams(cho=cho_g, protein=protein_g, fat=fat_g)


def get_meal_ratios(load: LoadLike) -> Dict[MealType, float]:
    load = coerce_enum(TrainingLoad, load, "load")
    if load == TrainingLoad.REST:
        return dict(science.REST_DAY_MEAL_RATIOS)
    return dict(science.TRAINING_DAY_MEAL_RATIOS)


def calculate_meals(tdee: float, macros: MacroGrams, load: LoadLike) -> Tuple[Meal, ...]:
    """Split day totals across meals; rounding is per meal so totals may drift a few grams"""
    ratios = get_meal_ratios(load)
    meals = []
    for meal_type in science.MEAL_ORDER:
        ratio = ratios[meal_type]
        if ratio <= 0:
            continue
        meals.append(Meal(
            meal=meal_type,
            ratio=ratio,
            cho_g=round_half_up(macros.cho * ratio),
            protein_g=round_half_up(macros.protein * ratio),
            fat_g=round_half_up(macros.fat * ratio),
            kcal=round_half_up(tdee * ratio, science.KCAL_ROUNDING_STEP),
        ))
    return tuple(meals)


def calculate_fueling_windows(profile: UserProfile, load: LoadLike) -> FuelingWindow:
    load = coerce_enum(TrainingLoad, load, "load")
    if load == TrainingLoad.REST:
        # No workout, so no windows at all
        return FuelingWindow()

    weight = profile.weight_kg
    return FuelingWindow(
        pre=PreWindow(
            hours_before=science.PRE_WINDOW_HOURS_BEFORE,
            cho_g=round_half_up(weight * science.PRE_CHO_PER_KG[load]),
        ),
        during_cho_g_per_hour=science.DURING_CHO_PER_HOUR[load],
        post=PostWindow(
            minutes_after=science.POST_WINDOW_MINUTES_AFTER,
            cho_g=round_half_up(weight * science.POST_CHO_PER_KG),
            protein_g=round_half_up(weight * science.POST_PROTEIN_PER_KG),
        ),
    )


def build_day_target(date: str, load: TrainingLoad, kcal: int, grams: MacroGrams,
                     fueling: FuelingWindow) -> DayTarget:
    """Assemble a DayTarget, distributing meals from the given totals"""
    return DayTarget(
        date=date,
        load=load,
        kcal=kcal,
        grams=grams,
        fueling=fueling,
        meals=calculate_meals(kcal, grams, load),
    )


def compute_day_target(profile: UserProfile, load: LoadLike, date: str) -> DayTarget:
    """Main entry point: complete daily nutrition targets for one profile and load"""
    load = coerce_enum(TrainingLoad, load, "load")
    parse_iso_date(date)

    tdee = calculate_tdee(profile, load)
    macros = calculate_macros(profile, load, tdee)
    fueling = calculate_fueling_windows(profile, load)

    logger.debug(
        f"Day target {date} load={load.value}: tdee={tdee} "
        f"cho={macros.cho}g protein={macros.protein}g fat={macros.fat}g"
    )
    return build_day_target(date, load, tdee, macros, fueling)


def calculate_hydration_plan(duration_min: float,
                             intensity: Union[SessionIntensity, str] = SessionIntensity.MODERATE) -> HydrationPlan:
    """Fluid and sodium per hour for a session"""
    require_non_negative(duration_min, "duration_min")
    intensity = coerce_enum(SessionIntensity, intensity, "intensity")

    fluid = science.HYDRATION_BASE_FLUID_ML
    sodium = science.HYDRATION_BASE_SODIUM_MG
    if duration_min > science.HYDRATION_LONG_SESSION_MIN:
        fluid = science.HYDRATION_LONG_FLUID_ML
        sodium = science.HYDRATION_LONG_SODIUM_MG
    if intensity == SessionIntensity.HIGH:
        fluid += science.HYDRATION_HIGH_INTENSITY_EXTRA_FLUID_ML
        sodium += science.HYDRATION_HIGH_INTENSITY_EXTRA_SODIUM_MG
    return HydrationPlan(fluid_ml_per_hour=fluid, sodium_mg_per_hour=sodium)


def update_glycogen(previous_pct: float, target: DayTarget, consumed_cho_g: float) -> int:
    """Next-day glycogen estimate (0-100%) from the day's load and CHO intake"""
    require_non_negative(consumed_cho_g, "consumed_cho_g")
    depletion = science.GLYCOGEN_DEPLETION[target.load]

    replenishment = 0.0
    if target.grams.cho > 0:
        replenishment = (consumed_cho_g / target.grams.cho) * abs(depletion) * science.GLYCOGEN_REFILL_EFFICIENCY

    glycogen = previous_pct + depletion + replenishment
    return round_half_up(min(100.0, max(0.0, glycogen)))
