# backend/nutrisync/api/activities.py

from fastapi import APIRouter

from nutrisync.schemas.activity import ClassifyActivitiesRequest
from nutrisync.services.activity_classifier import aggregate_activities_to_load

router = APIRouter(prefix="/activities", tags=["Activities"])


@router.post("/classify")
def classify_activities(request: ClassifyActivitiesRequest):
    """Collapse a day's sessions into a single training load"""
    load = aggregate_activities_to_load([activity.to_domain() for activity in request.activities])
    return {"load": load}
