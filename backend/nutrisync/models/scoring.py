# backend/nutrisync/models/scoring.py
"""
Scoring inputs and outputs

ScoringContext is what callers assemble (optional fields may be left out).
ResolvedContext is the same data with every default filled in; the scoring
engine only ever sees the resolved form.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from nutrisync.models.enums import (
    TrainingLoad, MealType, ScoringStrategy, ExperienceLevel, SessionIntensity
)
from nutrisync.models.targets import UserProfile


@dataclass(frozen=True)
class NutritionTargets:
    calories: float
    protein: float
    carbs: float
    fat: float
    pre_cho: Optional[float] = None
    during_cho_per_hour: Optional[float] = None
    post_cho: Optional[float] = None
    post_pro: Optional[float] = None


@dataclass(frozen=True)
class NutritionActuals:
    calories: float
    protein: float
    carbs: float
    fat: float
    pre_cho: Optional[float] = None
    during_cho_per_hour: Optional[float] = None
    post_cho: Optional[float] = None
    post_pro: Optional[float] = None


@dataclass(frozen=True)
class WindowStatus:
    applicable: bool
    in_window: bool = True


@dataclass(frozen=True)
class FuelingWindows:
    pre: WindowStatus
    during: WindowStatus
    post: WindowStatus


@dataclass(frozen=True)
class TrainingPlan:
    duration_min: Optional[float] = None
    type: Optional[str] = None
    intensity: Optional[SessionIntensity] = None


@dataclass(frozen=True)
class TrainingActual:
    duration_min: Optional[float] = None
    type: Optional[str] = None
    avg_hr: Optional[float] = None


@dataclass(frozen=True)
class ScoringFlags:
    window_sync_all: bool = False
    streak_days: int = 0
    hydration_ok: bool = False
    big_deficit: bool = False
    is_hard_day: bool = False
    missed_post_window: bool = False


@dataclass(frozen=True)
class ScoringContext:
    target: NutritionTargets
    actual: NutritionActuals
    load: TrainingLoad = TrainingLoad.REST
    strategy: ScoringStrategy = ScoringStrategy.RUNNER_FOCUSED
    windows: Optional[FuelingWindows] = None
    meals_present: Tuple[MealType, ...] = ()
    single_meal_over_60pct: bool = False
    training_plan: Optional[TrainingPlan] = None
    training_actual: Optional[TrainingActual] = None
    type_family_match: Optional[bool] = None
    intensity_ok: Optional[bool] = None
    intensity_near: Optional[bool] = None
    experience_level: Optional[ExperienceLevel] = None
    flags: Optional[ScoringFlags] = None
    has_food_logs: Optional[bool] = None
    has_body_metrics: bool = True
    # Body metrics: synthesised targets when no meal plan exists, max heart rate by age
    profile: Optional[UserProfile] = None


@dataclass(frozen=True)
class ResolvedContext:
    target: NutritionTargets
    actual: NutritionActuals
    load: TrainingLoad
    strategy: ScoringStrategy
    experience_level: ExperienceLevel
    windows: FuelingWindows
    meals_present: Tuple[MealType, ...]
    single_meal_over_60pct: bool
    planned_duration_min: float
    actual_duration_min: float
    type_family_match: bool
    intensity_ok: bool
    intensity_near: bool
    has_heart_rate: bool
    has_training_data: bool
    flags: ScoringFlags
    has_food_logs: bool
    has_meal_plan: bool
    has_body_metrics: bool


@dataclass(frozen=True)
class NutritionBreakdown:
    total: int
    macros: int
    timing: int
    structure: int


@dataclass(frozen=True)
class TrainingBreakdown:
    total: int
    completion: int
    type_match: int
    intensity: int


@dataclass(frozen=True)
class BlendWeights:
    nutrition: float
    training: float


@dataclass(frozen=True)
class DataCompleteness:
    has_body_metrics: bool
    has_meal_plan: bool
    has_food_logs: bool
    meals_logged: int
    reliable: bool
    missing_data: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ScoreBreakdown:
    total: int
    nutrition: NutritionBreakdown
    training: TrainingBreakdown
    bonuses: int
    penalties: int
    overconsumption_penalty: int
    weights: BlendWeights
    data_completeness: DataCompleteness


@dataclass(frozen=True)
class MealLogEntry:
    """Logged food aggregated under one meal type"""
    meal_type: MealType
    calories: float
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0


@dataclass(frozen=True)
class MacroScores:
    calories: int
    protein: int
    carbs: int
    fat: int


@dataclass(frozen=True)
class MealScore:
    meal_type: MealType
    score: int
    breakdown: MacroScores
