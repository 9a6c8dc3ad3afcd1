# backend/nutrisync/api/targets.py
"""
Day-target API: profile + load + date -> periodized DayTarget
"""

import logging
from fastapi import APIRouter

from nutrisync.schemas.targets import DayTargetRequest
from nutrisync.services.periodization import compute_periodized_target

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/targets", tags=["Targets"])


@router.post("/day")
def calculate_day_target(request: DayTargetRequest):
    """Daily calories, macros, meal split and fueling windows"""
    target, phase = compute_periodized_target(
        request.profile.to_domain(),
        request.load,
        request.date,
        goal=request.goal,
        race_date=request.race_date,
    )
    logger.info(f"Day target {request.date}: {target.load.value} {target.kcal} kcal ({phase.value})")
    return {"target": target, "phase": phase}
