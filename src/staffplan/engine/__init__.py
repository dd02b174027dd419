"""
staffplan engine - utilization and staffing computations

- UtilizationCalculator: allocated/actual hours and utilization
- CapacityPlanner: weekly capacity buckets and allocation conflicts
- ResourceRecommender: skill/availability/load ranking for an activity
- ResourceSuggester: requirement-driven suggestions and start date estimates
"""

from .base import EngineServiceBase
from .capacity import CapacityPlanner, WeeklyCapacity
from .recommender import RecommendationCriteria, ResourceRecommender, UserRecommendation
from .suggestions import ResourceSuggester, ResourceSuggestion
from .utilization import (
    ActivitySummary,
    UtilizationCalculator,
    UtilizationKpi,
    UtilizationResult,
)

__all__ = [
    "EngineServiceBase",
    "CapacityPlanner",
    "WeeklyCapacity",
    "RecommendationCriteria",
    "ResourceRecommender",
    "UserRecommendation",
    "ResourceSuggester",
    "ResourceSuggestion",
    "ActivitySummary",
    "UtilizationCalculator",
    "UtilizationKpi",
    "UtilizationResult",
]
