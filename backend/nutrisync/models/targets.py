# backend/nutrisync/models/targets.py
"""
Domain records produced by the targets engine
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from nutrisync.core.errors import InvalidArgumentError, coerce_enum, require_positive
from nutrisync.models.enums import Sex, TrainingLoad, MealType


@dataclass(frozen=True)
class UserProfile:
    """Body metrics for one computation call"""
    weight_kg: float
    height_cm: float
    age: int
    sex: Sex

    def __post_init__(self):
        require_positive(self.weight_kg, "weight_kg")
        require_positive(self.height_cm, "height_cm")
        require_positive(self.age, "age")
        if isinstance(self.age, float) and not self.age.is_integer():
            raise InvalidArgumentError("age", self.age, "must be a whole number of years")
        object.__setattr__(self, "age", int(self.age))
        object.__setattr__(self, "sex", coerce_enum(Sex, self.sex, "sex"))


@dataclass(frozen=True)
class MacroGrams:
    cho: int
    protein: int
    fat: int

    @property
    def kcal(self) -> int:
        return self.cho * 4 + self.protein * 4 + self.fat * 9


@dataclass(frozen=True)
class Meal:
    meal: MealType
    ratio: float
    cho_g: int
    protein_g: int
    fat_g: int
    kcal: int


@dataclass(frozen=True)
class PreWindow:
    hours_before: int
    cho_g: int


@dataclass(frozen=True)
class PostWindow:
    minutes_after: int
    cho_g: int
    protein_g: int


@dataclass(frozen=True)
class FuelingWindow:
    """Workout fueling guidance; empty on rest days"""
    pre: Optional[PreWindow] = None
    during_cho_g_per_hour: Optional[int] = None
    post: Optional[PostWindow] = None

    @property
    def is_empty(self) -> bool:
        return self.pre is None and self.during_cho_g_per_hour is None and self.post is None


@dataclass(frozen=True)
class DayTarget:
    date: str
    load: TrainingLoad
    kcal: int
    grams: MacroGrams
    fueling: FuelingWindow = field(default_factory=FuelingWindow)
    meals: Tuple[Meal, ...] = ()

    def meal(self, meal_type: MealType) -> Optional[Meal]:
        for meal in self.meals:
            if meal.meal == meal_type:
                return meal
        return None


@dataclass(frozen=True)
class HydrationPlan:
    fluid_ml_per_hour: int
    sodium_mg_per_hour: int
