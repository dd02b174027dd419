"""
Router for KPI calculations.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from staffplan.api import schemas
from staffplan.api.dependencies import get_utilization_calculator
from staffplan.engine import UtilizationCalculator
from staffplan.errors import InvalidInputError, NotFoundError
from staffplan.platform.config import settings
from staffplan.platform.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/calculate/utilization", response_model=schemas.UtilizationKpiResponse)
async def calculate_utilization_kpi(
    request: schemas.UtilizationKpiRequest,
    calculator: Annotated[UtilizationCalculator, Depends(get_utilization_calculator)],
):
    """
    Utilization over approved hours, clamped to 100 for display.
    """
    try:
        kpi = await calculator.calculate_utilization_kpi(
            request.start_date,
            request.end_date,
            user_id=request.user_id,
            standard_hours_per_week=settings.STANDARD_HOURS_PER_WEEK,
        )
        return schemas.UtilizationKpiResponse.model_validate(kpi)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Failed to calculate utilization KPI", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
