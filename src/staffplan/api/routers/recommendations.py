"""
Router for resource recommendations.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException

from staffplan.api import schemas
from staffplan.api.dependencies import get_resource_recommender
from staffplan.engine import RecommendationCriteria, ResourceRecommender
from staffplan.errors import InvalidInputError, NotFoundError
from staffplan.platform.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("", response_model=List[schemas.UserRecommendationResponse])
async def recommend_resources(
    request: schemas.RecommendationRequest,
    recommender: Annotated[ResourceRecommender, Depends(get_resource_recommender)],
):
    """
    Rank users for an activity.
    """
    criteria = RecommendationCriteria(
        activity_id=request.activity_id,
        required_skills=request.required_skills,
        required_team_role=request.required_team_role,
        start_date=request.start_date,
        end_date=request.end_date,
        allocated_hours=request.allocated_hours,
        exclude_user_ids=request.exclude_user_ids,
    )
    try:
        return await recommender.recommend_resources(criteria)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Failed to recommend resources", activity_id=request.activity_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
