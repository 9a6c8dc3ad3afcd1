# backend/nutrisync/api/scoring.py
"""
Scoring API: unified day score and per-meal scores
"""

import logging
from fastapi import APIRouter

from nutrisync.core.config import settings
from nutrisync.schemas.scoring import UnifiedScoreRequest, MealScoresRequest
from nutrisync.services.scoring_engine import UnifiedScoringEngine, calculate_meal_scores

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scoring", tags=["Scoring"])


@router.post("/unified")
def score_day(request: UnifiedScoreRequest):
    """Unified 0-100 score for a day, with its full breakdown"""
    context = request.to_domain(settings.default_strategy, settings.default_experience_level)
    engine = UnifiedScoringEngine(request.penalty_profile or settings.default_penalty_profile)
    breakdown = engine.score(context)

    if not breakdown.data_completeness.reliable:
        logger.info(f"Unreliable score {breakdown.total}: missing {', '.join(breakdown.data_completeness.missing_data)}")
    return breakdown


@router.post("/meals")
def score_meals(request: MealScoresRequest):
    """Score each planned meal against what was logged for it"""
    scores = calculate_meal_scores(
        [meal.to_domain() for meal in request.target_meals],
        [log.to_domain() for log in request.logs],
        request.experience_level or settings.default_experience_level,
    )
    return {"meals": scores}
