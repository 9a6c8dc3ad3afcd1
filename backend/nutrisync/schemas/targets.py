# backend/nutrisync/schemas/targets.py

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from nutrisync.models.enums import Sex, TrainingLoad, GoalType
from nutrisync.models.targets import UserProfile


class ProfileInput(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    weight_kg: float = Field(..., gt=0, description="Body weight in kg")
    height_cm: float = Field(..., gt=0, description="Height in cm")
    age: int = Field(..., gt=0)
    sex: Sex

    def to_domain(self) -> UserProfile:
        return UserProfile(
            weight_kg=self.weight_kg,
            height_cm=self.height_cm,
            age=self.age,
            sex=self.sex,
        )


class DayTargetRequest(BaseModel):
    profile: ProfileInput
    load: TrainingLoad
    date: str = Field(..., description="ISO-8601 date, e.g. 2025-10-12")
    goal: Optional[GoalType] = None
    race_date: Optional[str] = None
