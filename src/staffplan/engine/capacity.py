"""
Capacity Planner

Week-by-week allocation view for a user, plus the conflict checks used when
proposing people for new work.

Only PENDING and CONFIRMED assignments hold capacity.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List

from staffplan.domain import ACTIVE_ASSIGNMENT_STATUSES, Assignment, DateWindow
from staffplan.errors import InvalidInputError, NotFoundError

from .base import EngineServiceBase
from .intervals import assignment_overlaps, week_starts


@dataclass
class WeeklyCapacity:
    """Allocation of one user in one Monday-start week."""
    user_id: str
    user_name: str
    week: date
    allocated_hours: float
    available_hours: float
    utilization_percent: float


class CapacityPlanner(EngineServiceBase):
    """Weekly capacity buckets and allocation conflict detection."""

    async def get_user_capacity(
        self,
        user_id: str,
        start_date: date,
        end_date: date,
        standard_hours_per_week: float = 40,
    ) -> List[WeeklyCapacity]:
        """
        Bucket a user's weekly allocations by week.

        Every week touched by the range gets a bucket. An assignment counts
        its full weekly hours in each week where it covers at least one day
        that also falls inside the range.
        """
        window = self.require_window(start_date, end_date)
        if standard_hours_per_week is None or standard_hours_per_week <= 0:
            raise InvalidInputError("standard_hours_per_week must be positive")

        user = self.store.find_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)

        assignments = self.store.find_assignments_overlapping(
            user_id, window, statuses=ACTIVE_ASSIGNMENT_STATUSES
        )

        buckets = []
        for monday in week_starts(window):
            week_window = DateWindow(
                max(monday, window.start),
                min(monday + timedelta(days=6), window.end),
            )
            allocated = sum(
                (float(a.allocated_hours) for a in assignments if assignment_overlaps(a, week_window)),
                0.0,
            )
            buckets.append(WeeklyCapacity(
                user_id=user.id,
                user_name=user.name,
                week=monday,
                allocated_hours=allocated,
                available_hours=standard_hours_per_week,
                utilization_percent=(allocated / standard_hours_per_week) * 100,
            ))

        return buckets

    async def check_allocation_conflict(
        self,
        user_id: str,
        start_date: date,
        end_date: date,
    ) -> bool:
        """True when any active assignment of the user overlaps the range."""
        window = self.require_window(start_date, end_date)
        return bool(self.find_conflicts(user_id, window))

    def find_conflicts(self, user_id: str, window: DateWindow) -> List[Assignment]:
        """
        Active assignments overlapping a window, ordered by end date.

        Open-ended assignments sort last.
        """
        conflicts = self.store.find_assignments_overlapping(
            user_id, window, statuses=ACTIVE_ASSIGNMENT_STATUSES
        )
        return sorted(
            conflicts,
            key=lambda a: (a.end_date is None, a.end_date or date.max),
        )
