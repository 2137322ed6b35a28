from typing import Annotated

from fastapi import APIRouter, Depends, Query

from linkshelf.api.deps import get_activity_service
from linkshelf.core.auth import verify_api_key
from linkshelf.schemas.bookmark import ActivityResponse, WeeklyCountResponse
from linkshelf.services.activity_service import DEFAULT_ACTIVITY_WEEKS, ActivityService

router = APIRouter(tags=["Activity"], dependencies=[Depends(verify_api_key)])

ActivityServiceDep = Annotated[ActivityService, Depends(get_activity_service)]


@router.post("/bookmarks/weekly-count", response_model=WeeklyCountResponse)
async def recompute_weekly_counts(service: ActivityServiceDep) -> WeeklyCountResponse:
    """Recompute every bookmark's running count within its owner's week."""
    updated, total = service.recompute_weekly_counts()
    return WeeklyCountResponse(
        message="Weekly running counts updated successfully",
        updated_bookmarks=updated,
        total_bookmarks=total,
    )


@router.get("/users/{user_id}/activity", response_model=ActivityResponse)
async def weekly_activity(
    user_id: str,
    service: ActivityServiceDep,
    weeks: int = Query(DEFAULT_ACTIVITY_WEEKS, ge=1, le=104, description="Number of weeks to show."),
) -> ActivityResponse:
    labels, data = service.weekly_activity(user_id, weeks=weeks)
    return ActivityResponse(user_id=user_id, weeks=weeks, labels=labels, data=data)
