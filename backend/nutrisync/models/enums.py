from enum import Enum


class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"


class TrainingLoad(str, Enum):
    """Training load of a day, ordered by intensity"""
    REST = "rest"
    EASY = "easy"
    MODERATE = "moderate"
    LONG = "long"
    QUALITY = "quality"

    @property
    def rank(self) -> int:
        # long and quality share a load class
        return _LOAD_RANK[self]

    @property
    def is_high(self) -> bool:
        return self.rank >= _LOAD_RANK[TrainingLoad.LONG]


_LOAD_RANK = {
    TrainingLoad.REST: 0,
    TrainingLoad.EASY: 1,
    TrainingLoad.MODERATE: 2,
    TrainingLoad.LONG: 3,
    TrainingLoad.QUALITY: 3,
}


class MealType(str, Enum):
    """Meal type enumeration, in serving order"""
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class SessionIntensity(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class SessionType(str, Enum):
    RECOVERY = "recovery"
    EASY = "easy"
    TEMPO = "tempo"
    INTERVAL = "interval"
    LONG = "long"


class GoalType(str, Enum):
    GENERAL = "general"
    FULL_MARATHON = "full_marathon"
    HALF_MARATHON = "half_marathon"
    ULTRA = "ultra"
    TEN_K = "10k"
    FIVE_K = "5k"
    WEIGHT_LOSS = "weight_loss"
    GAIN_MUSCLE = "gain_muscle"

    @property
    def is_race(self) -> bool:
        return self in (
            GoalType.FULL_MARATHON,
            GoalType.HALF_MARATHON,
            GoalType.ULTRA,
            GoalType.TEN_K,
            GoalType.FIVE_K,
        )


class RacePhase(str, Enum):
    OFF = "off"
    BASE = "base"
    BUILD = "build"
    PEAK = "peak"
    TAPER = "taper"
    RACE = "race"


class ScoringStrategy(str, Enum):
    RUNNER_FOCUSED = "runner-focused"
    GENERAL = "general"
    MEAL_LEVEL = "meal-level"


class ExperienceLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class PenaltyProfileName(str, Enum):
    REDUCED = "reduced"
    STRICT = "strict"
