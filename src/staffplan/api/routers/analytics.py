"""
Router for utilization and capacity analytics.
"""

from datetime import date
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from staffplan.api import schemas
from staffplan.api.dependencies import get_capacity_planner, get_utilization_calculator
from staffplan.engine import CapacityPlanner, UtilizationCalculator
from staffplan.errors import InvalidInputError, NotFoundError
from staffplan.platform.config import settings
from staffplan.platform.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/utilization/user/{user_id}", response_model=schemas.UtilizationResponse)
async def get_user_utilization(
    user_id: str,
    calculator: Annotated[UtilizationCalculator, Depends(get_utilization_calculator)],
    start_date: date = Query(..., description="First day of the period (YYYY-MM-DD)"),
    end_date: date = Query(..., description="Last day of the period (YYYY-MM-DD)"),
    standard_hours_per_week: float = Query(settings.STANDARD_HOURS_PER_WEEK, ge=0),
):
    """
    Utilization of a single user.
    """
    try:
        result = await calculator.calculate_user_utilization(
            user_id, start_date, end_date, standard_hours_per_week
        )
        return schemas.UtilizationResponse.model_validate(result)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Failed to calculate utilization", user_id=user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to calculate utilization")


@router.get("/utilization/team", response_model=List[schemas.UtilizationResponse])
async def get_team_utilization(
    calculator: Annotated[UtilizationCalculator, Depends(get_utilization_calculator)],
    start_date: date = Query(...),
    end_date: date = Query(...),
    standard_hours_per_week: float = Query(settings.STANDARD_HOURS_PER_WEEK, ge=0),
):
    """
    Utilization of every user.
    """
    try:
        results = await calculator.calculate_team_utilization(
            start_date, end_date, standard_hours_per_week
        )
        return [schemas.UtilizationResponse.model_validate(r) for r in results]
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Failed to calculate team utilization", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to calculate team utilization")


@router.get("/activity", response_model=schemas.ActivitySummaryResponse)
async def get_activity_summary(
    calculator: Annotated[UtilizationCalculator, Depends(get_utilization_calculator)],
    start_date: Optional[date] = Query(None, description="Defaults to 30 days before end_date"),
    end_date: Optional[date] = Query(None, description="Defaults to today"),
):
    """
    Headline project, task and time-entry counts for a period.
    """
    try:
        return await calculator.get_activity_summary(start_date, end_date)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Failed to fetch activity summary", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch activity summary")


@router.get("/capacity/{user_id}", response_model=List[schemas.WeeklyCapacityResponse])
async def get_user_capacity(
    user_id: str,
    planner: Annotated[CapacityPlanner, Depends(get_capacity_planner)],
    start_date: date = Query(...),
    end_date: date = Query(...),
    standard_hours_per_week: float = Query(settings.STANDARD_HOURS_PER_WEEK, gt=0),
):
    """
    Week-by-week allocation of a single user.
    """
    try:
        return await planner.get_user_capacity(
            user_id, start_date, end_date, standard_hours_per_week
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Failed to calculate capacity", user_id=user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to calculate capacity")
