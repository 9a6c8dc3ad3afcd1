# backend/nutrisync/schemas/scoring.py

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from nutrisync.models.enums import (
    TrainingLoad, MealType, ScoringStrategy, ExperienceLevel, PenaltyProfileName, SessionIntensity
)
from nutrisync.models.scoring import (
    NutritionTargets, NutritionActuals, WindowStatus, FuelingWindows,
    TrainingPlan, TrainingActual, ScoringFlags, ScoringContext, MealLogEntry
)
from nutrisync.models.targets import Meal
from nutrisync.schemas.targets import ProfileInput


class NutritionValues(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    calories: float = Field(..., ge=0)
    protein: float = Field(..., ge=0)
    carbs: float = Field(..., ge=0)
    fat: float = Field(..., ge=0)
    pre_cho: Optional[float] = Field(None, ge=0)
    during_cho_per_hour: Optional[float] = Field(None, ge=0)
    post_cho: Optional[float] = Field(None, ge=0)
    post_pro: Optional[float] = Field(None, ge=0)


class WindowStatusInput(BaseModel):
    applicable: bool
    in_window: bool = True


class FuelingWindowsInput(BaseModel):
    pre: WindowStatusInput
    during: WindowStatusInput
    post: WindowStatusInput

    def to_domain(self) -> FuelingWindows:
        return FuelingWindows(
            pre=WindowStatus(**self.pre.model_dump()),
            during=WindowStatus(**self.during.model_dump()),
            post=WindowStatus(**self.post.model_dump()),
        )


class TrainingPlanInput(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    duration_min: Optional[float] = Field(None, ge=0)
    type: Optional[str] = None
    intensity: Optional[SessionIntensity] = None


class TrainingActualInput(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    duration_min: Optional[float] = Field(None, ge=0)
    type: Optional[str] = None
    avg_hr: Optional[float] = Field(None, gt=0)


class ScoringFlagsInput(BaseModel):
    window_sync_all: bool = False
    streak_days: int = Field(0, ge=0)
    hydration_ok: bool = False
    big_deficit: bool = False
    is_hard_day: bool = False
    missed_post_window: bool = False


class UnifiedScoreRequest(BaseModel):
    """A day's scoring context as sent by the client"""
    target: NutritionValues
    actual: NutritionValues
    load: TrainingLoad = TrainingLoad.REST
    strategy: Optional[ScoringStrategy] = None
    windows: Optional[FuelingWindowsInput] = None
    meals_present: List[MealType] = []
    single_meal_over_60pct: bool = False
    training_plan: Optional[TrainingPlanInput] = None
    training_actual: Optional[TrainingActualInput] = None
    type_family_match: Optional[bool] = None
    intensity_ok: Optional[bool] = None
    intensity_near: Optional[bool] = None
    experience_level: Optional[ExperienceLevel] = None
    flags: Optional[ScoringFlagsInput] = None
    has_food_logs: Optional[bool] = None
    has_body_metrics: bool = True
    profile: Optional[ProfileInput] = None
    penalty_profile: Optional[PenaltyProfileName] = None

    def to_domain(self, default_strategy: ScoringStrategy,
                  default_experience_level: ExperienceLevel) -> ScoringContext:
        return ScoringContext(
            target=NutritionTargets(**self.target.model_dump()),
            actual=NutritionActuals(**self.actual.model_dump()),
            load=self.load,
            strategy=self.strategy or default_strategy,
            windows=self.windows.to_domain() if self.windows else None,
            meals_present=tuple(self.meals_present),
            single_meal_over_60pct=self.single_meal_over_60pct,
            training_plan=TrainingPlan(**self.training_plan.model_dump()) if self.training_plan else None,
            training_actual=TrainingActual(**self.training_actual.model_dump()) if self.training_actual else None,
            type_family_match=self.type_family_match,
            intensity_ok=self.intensity_ok,
            intensity_near=self.intensity_near,
            experience_level=self.experience_level or default_experience_level,
            flags=ScoringFlags(**self.flags.model_dump()) if self.flags else None,
            has_food_logs=self.has_food_logs,
            has_body_metrics=self.has_body_metrics,
            profile=self.profile.to_domain() if self.profile else None,
        )


class TargetMealInput(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    meal: MealType
    ratio: float = Field(..., gt=0, le=1)
    cho_g: float = Field(..., ge=0)
    protein_g: float = Field(..., ge=0)
    fat_g: float = Field(..., ge=0)
    kcal: float = Field(..., ge=0)

    def to_domain(self) -> Meal:
        return Meal(**self.model_dump())


class MealLogInput(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    meal_type: MealType
    calories: float = Field(..., ge=0)
    protein_g: float = Field(0, ge=0)
    carbs_g: float = Field(0, ge=0)
    fat_g: float = Field(0, ge=0)

    def to_domain(self) -> MealLogEntry:
        return MealLogEntry(**self.model_dump())


class MealScoresRequest(BaseModel):
    target_meals: List[TargetMealInput]
    logs: List[MealLogInput] = []
    experience_level: Optional[ExperienceLevel] = None
