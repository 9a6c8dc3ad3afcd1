# backend/nutrisync/services/data_completeness.py
"""
Data-completeness gate

Decides whether a day's score can be trusted and how much to take off for
missing logs. A missing meal plan is never penalised: targets can always be
derived from body metrics and load.
"""

import logging
from typing import List, Tuple

from nutrisync.core.scoring_profiles import PenaltyProfile
from nutrisync.models.enums import TrainingLoad
from nutrisync.models.scoring import ResolvedContext, DataCompleteness

logger = logging.getLogger(__name__)


def assess_data_completeness(context: ResolvedContext, profile: PenaltyProfile) -> Tuple[DataCompleteness, int]:
    """Returns the completeness record and the (non-positive) incomplete-data penalty"""
    meals_logged = len(context.meals_present)
    missing: List[str] = []
    penalty = 0

    if not context.has_food_logs:
        penalty += profile.no_food_logs
        missing.append("food logs")
        logger.warning(f"No food logged for the day; applying {profile.name.value} penalty {profile.no_food_logs}")
    elif meals_logged == 0:
        penalty += profile.no_structured_meals
        missing.append("structured meals")

    if not context.has_meal_plan:
        missing.append("meal plan")
    if not context.has_body_metrics:
        missing.append("body metrics")
    if context.load != TrainingLoad.REST and not context.has_training_data:
        missing.append("training data")

    completeness = DataCompleteness(
        has_body_metrics=context.has_body_metrics,
        has_meal_plan=context.has_meal_plan,
        has_food_logs=context.has_food_logs,
        meals_logged=meals_logged,
        reliable=context.has_food_logs and meals_logged > 0,
        missing_data=tuple(missing),
    )
    return completeness, penalty
