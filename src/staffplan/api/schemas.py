from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator

# --- Utilization ---

class UtilizationResponse(BaseModel):
    user_id: str
    user_name: str
    period: str
    allocated_hours: float
    actual_hours: float
    capacity_hours: float
    utilization_percent: float
    raw_utilization: float
    clamped_utilization: float

    class Config:
        from_attributes = True

class UtilizationKpiRequest(BaseModel):
    user_id: Optional[str] = None
    start_date: date
    end_date: date

class UtilizationKpiResponse(BaseModel):
    user_id: Optional[str] = None
    period: str
    total_hours: float
    available_hours: float
    utilization: float = Field(..., description="Clamped to 100")
    raw_utilization: float

    class Config:
        from_attributes = True

class ActivitySummaryResponse(BaseModel):
    start_date: date
    end_date: date
    total_projects: int
    active_projects: int
    total_tasks: int
    total_time_entries: int
    total_hours: float
    unique_users: int

    class Config:
        from_attributes = True

class WeeklyCapacityResponse(BaseModel):
    user_id: str
    user_name: str
    week: date
    allocated_hours: float
    available_hours: float
    utilization_percent: float

    class Config:
        from_attributes = True

# --- Recommendations ---

class RecommendationRequest(BaseModel):
    activity_id: str
    required_skills: List[str] = Field(default_factory=list)
    required_team_role: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    allocated_hours: Optional[float] = Field(None, gt=0, description="Requested hours per week")
    exclude_user_ids: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_window(self) -> "RecommendationRequest":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

class UserRecommendationResponse(BaseModel):
    user_id: str
    user_name: str
    user_email: str
    score: float
    reasons: List[str]
    current_utilization: float
    skills_match: float
    availability: float
    remaining_capacity: float
    team_role: Optional[str] = None
    billing_rate: Optional[Decimal] = None
    cost_rate: Optional[Decimal] = None

    class Config:
        from_attributes = True

# --- Suggestions ---

class SuggestionRequest(BaseModel):
    activity_id: str
    start_date: date
    end_date: date
    required_hours_per_week: float = Field(..., gt=0)

class ResourceSuggestionResponse(BaseModel):
    user_id: str
    user_name: str
    confidence_score: float
    reasons: List[str]
    available_from: Optional[date] = None
    skills_match: float
    current_utilization: float

    class Config:
        from_attributes = True

class EstimateStartDateRequest(BaseModel):
    activity_id: str
    required_hours_per_week: float = Field(..., gt=0)
    team_size: int = Field(..., ge=1)

class EstimateStartDateResponse(BaseModel):
    start_date: Optional[date] = None
    can_start_immediately: bool
