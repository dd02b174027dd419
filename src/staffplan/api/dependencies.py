from typing import Annotated

from fastapi import Depends

from staffplan.api.database import get_record_store, get_database_adapter, close_database_adapter
from staffplan.engine import (
    CapacityPlanner,
    ResourceRecommender,
    ResourceSuggester,
    UtilizationCalculator,
)
from staffplan.storage.base import RecordStore


def init_resources() -> None:
    """Initialize the database connection pool."""
    adapter = get_database_adapter()
    adapter.connect()

def close_resources() -> None:
    close_database_adapter()


def get_utilization_calculator(
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> UtilizationCalculator:
    return UtilizationCalculator(store)

def get_capacity_planner(
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> CapacityPlanner:
    return CapacityPlanner(store)

def get_resource_recommender(
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> ResourceRecommender:
    return ResourceRecommender(store)

def get_resource_suggester(
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> ResourceSuggester:
    return ResourceSuggester(store)
