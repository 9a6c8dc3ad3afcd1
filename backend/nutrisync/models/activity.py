from dataclasses import dataclass
from typing import Optional

from nutrisync.core.errors import coerce_enum, require_non_negative, require_positive
from nutrisync.models.enums import TrainingLoad, SessionIntensity, SessionType
from nutrisync.models.targets import DayTarget


@dataclass(frozen=True)
class TrainingSession:
    """A single planned or completed session, as reported by a tracker"""
    duration_min: float
    intensity: SessionIntensity = SessionIntensity.MODERATE
    session_type: Optional[SessionType] = None

    def __post_init__(self):
        require_non_negative(self.duration_min, "duration_min")
        object.__setattr__(self, "intensity", coerce_enum(SessionIntensity, self.intensity, "intensity"))
        if self.session_type is not None:
            object.__setattr__(self, "session_type", coerce_enum(SessionType, self.session_type, "session_type"))


@dataclass(frozen=True)
class WearableData:
    activity_type: str
    duration_min: float
    calories_burned: float = 0.0
    average_hr: Optional[float] = None
    max_hr: Optional[float] = None

    def __post_init__(self):
        require_non_negative(self.duration_min, "duration_min")
        require_non_negative(self.calories_burned, "calories_burned")
        for name in ("average_hr", "max_hr"):
            if getattr(self, name) is not None:
                require_positive(getattr(self, name), name)


@dataclass(frozen=True)
class SessionPlan:
    id: str
    planned_load: TrainingLoad
    planned_duration_min: float

    def __post_init__(self):
        object.__setattr__(self, "planned_load", coerce_enum(TrainingLoad, self.planned_load, "planned_load"))


@dataclass(frozen=True)
class SessionActual:
    id: str
    actual_load: TrainingLoad
    actual_duration_min: float
    calories_burned: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "actual_load", coerce_enum(TrainingLoad, self.actual_load, "actual_load"))


@dataclass(frozen=True)
class DayReconciliation:
    date: str
    planned_load: TrainingLoad
    actual_load: TrainingLoad
    variance_pct: int  # kcal difference of actual vs planned target
    adjusted_target: DayTarget
