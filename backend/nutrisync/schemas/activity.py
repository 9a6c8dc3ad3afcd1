# backend/nutrisync/schemas/activity.py

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from nutrisync.models.activity import TrainingSession
from nutrisync.models.enums import SessionIntensity, SessionType


class ActivityInput(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    duration_min: float = Field(..., ge=0)
    intensity: SessionIntensity = SessionIntensity.MODERATE
    session_type: Optional[SessionType] = None

    def to_domain(self) -> TrainingSession:
        return TrainingSession(
            duration_min=self.duration_min,
            intensity=self.intensity,
            session_type=self.session_type,
        )


class ClassifyActivitiesRequest(BaseModel):
    activities: List[ActivityInput] = []
