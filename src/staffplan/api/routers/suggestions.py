"""
Router for requirement-driven suggestions and start date estimates.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException

from staffplan.api import schemas
from staffplan.api.dependencies import get_resource_suggester
from staffplan.engine import ResourceSuggester
from staffplan.errors import InvalidInputError, NotFoundError
from staffplan.platform.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/resources", response_model=List[schemas.ResourceSuggestionResponse])
async def suggest_resources(
    request: schemas.SuggestionRequest,
    suggester: Annotated[ResourceSuggester, Depends(get_resource_suggester)],
):
    """
    Suggest people for an activity over a window.
    """
    try:
        return await suggester.suggest_resources(
            request.activity_id,
            request.start_date,
            request.end_date,
            request.required_hours_per_week,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Failed to get suggestions", activity_id=request.activity_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to get suggestions")


@router.post("/estimate-start-date", response_model=schemas.EstimateStartDateResponse)
async def estimate_start_date(
    request: schemas.EstimateStartDateRequest,
    suggester: Annotated[ResourceSuggester, Depends(get_resource_suggester)],
):
    """
    Earliest date a team of the requested size could start.
    """
    try:
        start_date = await suggester.estimate_start_date(
            request.activity_id,
            request.required_hours_per_week,
            request.team_size,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Failed to estimate start date", activity_id=request.activity_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to estimate start date")

    return schemas.EstimateStartDateResponse(
        start_date=start_date,
        can_start_immediately=start_date is not None and start_date <= suggester.today(),
    )
