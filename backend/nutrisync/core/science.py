# backend/nutrisync/core/science.py
"""
Science layer constants

Single source of truth for the BMR formula, activity factors, per-kg macro
tables, meal ratios and fueling guidance. Every table is keyed by a closed
enum and must cover all of its members.
"""

import math
from typing import Dict, Optional

from nutrisync.models.enums import TrainingLoad, MealType, RacePhase

# Energy density (kcal per gram)
KCAL_PER_G_CHO = 4
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_FAT = 9

# Mifflin-St Jeor coefficients
BMR_WEIGHT_COEF = 10.0
BMR_HEIGHT_COEF = 6.25
BMR_AGE_COEF = 5.0
BMR_MALE_OFFSET = 5.0
BMR_FEMALE_OFFSET = -161.0

# TDEE is reported to the nearest 10 kcal
KCAL_ROUNDING_STEP = 10

# Fat never supplies less than this share of TDEE
FAT_FLOOR_FRACTION = 0.20

ACTIVITY_FACTORS: Dict[TrainingLoad, float] = {
    TrainingLoad.REST: 1.4,
    TrainingLoad.EASY: 1.6,
    TrainingLoad.MODERATE: 1.8,
    TrainingLoad.LONG: 2.0,
    TrainingLoad.QUALITY: 2.1,
}

# Midpoints of published g/kg ranges: (CHO, protein)
MACROS_PER_KG: Dict[TrainingLoad, Dict[str, float]] = {
    TrainingLoad.REST: {"cho": 3.5, "protein": 1.6},      # 3-4 g/kg CHO
    TrainingLoad.EASY: {"cho": 5.5, "protein": 1.7},      # 5-6 g/kg CHO
    TrainingLoad.MODERATE: {"cho": 7.0, "protein": 1.8},  # 6-8 g/kg CHO
    TrainingLoad.LONG: {"cho": 9.0, "protein": 1.9},      # 8-10 g/kg CHO
    TrainingLoad.QUALITY: {"cho": 8.0, "protein": 1.9},   # 7-9 g/kg CHO
}

REST_DAY_MEAL_RATIOS: Dict[MealType, float] = {
    MealType.BREAKFAST: 0.30,
    MealType.LUNCH: 0.35,
    MealType.DINNER: 0.35,
    MealType.SNACK: 0.0,
}

TRAINING_DAY_MEAL_RATIOS: Dict[MealType, float] = {
    MealType.BREAKFAST: 0.25,
    MealType.LUNCH: 0.30,
    MealType.DINNER: 0.30,
    MealType.SNACK: 0.15,
}

MEAL_ORDER = (MealType.BREAKFAST, MealType.LUNCH, MealType.DINNER, MealType.SNACK)

# Fueling windows
PRE_WINDOW_HOURS_BEFORE = 3
PRE_CHO_PER_KG: Dict[TrainingLoad, float] = {
    TrainingLoad.REST: 0.0,
    TrainingLoad.EASY: 1.5,
    TrainingLoad.MODERATE: 2.5,
    TrainingLoad.LONG: 3.5,
    TrainingLoad.QUALITY: 3.0,
}

# 30-60 g/h midpoint, only for sessions long enough to need it
DURING_CHO_PER_HOUR: Dict[TrainingLoad, Optional[int]] = {
    TrainingLoad.REST: None,
    TrainingLoad.EASY: None,
    TrainingLoad.MODERATE: None,
    TrainingLoad.LONG: 45,
    TrainingLoad.QUALITY: 45,
}

POST_WINDOW_MINUTES_AFTER = 60
POST_CHO_PER_KG = 1.0
POST_PROTEIN_PER_KG = 0.3

# Goal and periodization shifts
GOAL_FAT_TO_CHO_SHIFT = 0.05
WEIGHT_LOSS_KCAL_FACTOR = 0.90
WEIGHT_LOSS_PROTEIN_FACTOR = 1.10
GAIN_MUSCLE_KCAL_FACTOR = 1.05
GAIN_MUSCLE_PROTEIN_FACTOR = 1.15

BUILD_HIGH_LOAD_KCAL_FACTOR = 1.05
PEAK_FAT_TO_CHO_SHIFT = 0.05
TAPER_KCAL_FACTOR = 0.90

RACE_DURING_CHO_PER_HOUR_FLOOR = 60
RACE_PRE_CHO_PER_KG_FLOOR = 3.0
RACE_POST_CHO_PER_KG_FLOOR = 1.2
RACE_POST_PROTEIN_PER_KG_FLOOR = 0.3

# Days until race (inclusive upper bounds), checked in order
RACE_PHASE_THRESHOLDS = (
    (0, RacePhase.RACE),
    (7, RacePhase.TAPER),
    (21, RacePhase.PEAK),
    (56, RacePhase.BUILD),
)

# Hydration (per hour of training)
HYDRATION_BASE_FLUID_ML = 500
HYDRATION_BASE_SODIUM_MG = 300
HYDRATION_LONG_SESSION_MIN = 90
HYDRATION_LONG_FLUID_ML = 600
HYDRATION_LONG_SODIUM_MG = 400
HYDRATION_HIGH_INTENSITY_EXTRA_FLUID_ML = 100
HYDRATION_HIGH_INTENSITY_EXTRA_SODIUM_MG = 100

# Glycogen model
GLYCOGEN_DEPLETION: Dict[TrainingLoad, int] = {
    TrainingLoad.REST: -5,
    TrainingLoad.EASY: -10,
    TrainingLoad.MODERATE: -20,
    TrainingLoad.LONG: -35,
    TrainingLoad.QUALITY: -30,
}
GLYCOGEN_REFILL_EFFICIENCY = 1.2


def round_half_up(value: float, step: int = 1) -> int:
    """Round to the nearest multiple of step; ties round up (not to even)"""
    return int(math.floor(value / step + 0.5)) * step
