# backend/nutrisync/core/scoring_profiles.py
"""
Scoring tunables: strategy weights, load blend, tolerance ladders and
penalty profiles. The engine receives the profile it should use; nothing
here is switched at runtime.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from nutrisync.models.enums import (
    TrainingLoad, ScoringStrategy, ExperienceLevel, PenaltyProfileName
)


@dataclass(frozen=True)
class MacroWeights:
    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class NutritionWeights:
    macros: float
    timing: float
    structure: float


@dataclass(frozen=True)
class StrategyConfig:
    macro_weights: MacroWeights
    nutrition_weights: NutritionWeights
    overconsumption_threshold: float
    overconsumption_penalty: int


@dataclass(frozen=True)
class LoadWeights:
    nutrition: float
    training: float


@dataclass(frozen=True)
class PenaltyProfile:
    """Penalty magnitudes (all <= 0) for one profile"""
    name: PenaltyProfileName
    hard_underfuel: int
    big_deficit: int
    missed_post_window: int
    max_combined: int
    no_food_logs: int
    no_structured_meals: int


STRATEGY_CONFIG: Dict[ScoringStrategy, StrategyConfig] = {
    ScoringStrategy.RUNNER_FOCUSED: StrategyConfig(
        macro_weights=MacroWeights(calories=0.3, protein=0.2, carbs=0.4, fat=0.1),
        nutrition_weights=NutritionWeights(macros=0.50, timing=0.35, structure=0.15),
        overconsumption_threshold=1.15,
        overconsumption_penalty=10,
    ),
    ScoringStrategy.GENERAL: StrategyConfig(
        macro_weights=MacroWeights(calories=0.4, protein=0.3, carbs=0.2, fat=0.1),
        nutrition_weights=NutritionWeights(macros=0.60, timing=0.25, structure=0.15),
        overconsumption_threshold=1.10,
        overconsumption_penalty=5,
    ),
    ScoringStrategy.MEAL_LEVEL: StrategyConfig(
        macro_weights=MacroWeights(calories=0.4, protein=0.2, carbs=0.2, fat=0.2),
        nutrition_weights=NutritionWeights(macros=0.60, timing=0.25, structure=0.15),
        overconsumption_threshold=1.10,
        overconsumption_penalty=3,
    ),
}

LOAD_WEIGHTS: Dict[TrainingLoad, LoadWeights] = {
    TrainingLoad.REST: LoadWeights(nutrition=1.0, training=0.0),
    TrainingLoad.EASY: LoadWeights(nutrition=0.7, training=0.3),
    TrainingLoad.MODERATE: LoadWeights(nutrition=0.6, training=0.4),
    TrainingLoad.LONG: LoadWeights(nutrition=0.55, training=0.45),
    TrainingLoad.QUALITY: LoadWeights(nutrition=0.6, training=0.4),
}

# Upper error bounds (|actual - target| / target) for scores 100, 80, 60, 40, 20
TOLERANCE_SCORES: Tuple[int, ...] = (100, 80, 60, 40, 20)
TOLERANCE_LADDERS: Dict[ExperienceLevel, Tuple[float, ...]] = {
    ExperienceLevel.BEGINNER: (0.10, 0.20, 0.30, 0.40, 0.50),
    ExperienceLevel.INTERMEDIATE: (0.075, 0.15, 0.225, 0.30, 0.40),
    ExperienceLevel.ADVANCED: (0.05, 0.10, 0.15, 0.20, 0.30),
}

PENALTY_PROFILES: Dict[PenaltyProfileName, PenaltyProfile] = {
    PenaltyProfileName.REDUCED: PenaltyProfile(
        name=PenaltyProfileName.REDUCED,
        hard_underfuel=-2,
        big_deficit=-5,
        missed_post_window=-1,
        max_combined=-8,
        no_food_logs=-15,
        no_structured_meals=0,
    ),
    PenaltyProfileName.STRICT: PenaltyProfile(
        name=PenaltyProfileName.STRICT,
        hard_underfuel=-5,
        big_deficit=-10,
        missed_post_window=-3,
        max_combined=-15,
        no_food_logs=-30,
        no_structured_meals=-10,
    ),
}

# Timing sub-score weights
TIMING_WEIGHTS = {"pre": 0.4, "during": 0.4, "post": 0.2}

# In-window: (min dose ratio, score); anything consumed below the last band scores 30
IN_WINDOW_BANDS: Tuple[Tuple[float, int], ...] = ((0.8, 100), (0.6, 80), (0.4, 60), (0.2, 45))
IN_WINDOW_MIN_SCORE = 30
# Out of window the best achievable score is 60
OUT_OF_WINDOW_BANDS: Tuple[Tuple[float, int], ...] = ((0.8, 60), (0.5, 40))
OUT_OF_WINDOW_MIN_SCORE = 20

DURING_FULL_CREDIT_DELTA = 10
DURING_ZERO_CREDIT_DELTA = 30

# Structure
MAIN_MEAL_POINTS = 25
SNACK_POINTS = 25
SINGLE_MEAL_CAP = 70

# Training
COMPLETION_FULL_RANGE = (0.9, 1.1)
COMPLETION_PARTIAL_RANGE = (0.75, 1.25)
COMPLETION_PARTIAL_SCORE = 60
BASE_COMPLETION_WEIGHT = 0.60
TYPE_MATCH_WEIGHT = 0.25
INTENSITY_WEIGHT = 0.15
INTENSITY_NEAR_SCORE = 60

# Bonuses
WINDOW_SYNC_BONUS = 5
MAX_STREAK_BONUS = 5
HYDRATION_BONUS = 2
MAX_TOTAL_BONUS = 10

# Penalty triggers
HARD_DAY_CARB_FLOOR = 0.8
BIG_DEFICIT_MIN_DURATION = 90


def get_penalty_profile(name: PenaltyProfileName) -> PenaltyProfile:
    return PENALTY_PROFILES[name]


# Meal-level: calories vs mean of the three macros
MEAL_CALORIE_WEIGHT = 0.4
MEAL_MACRO_WEIGHT = 0.6
