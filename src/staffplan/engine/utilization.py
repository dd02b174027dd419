"""
Utilization Calculator

Computes allocated hours, logged hours and utilization against a standard
weekly capacity for one user, the whole team, or as a KPI.

Formulas:
```
capacity_hours      = ceil(days / 7) * standard_hours_per_week
allocated_hours     = Σ ceil(clipped_days / 7) * assignment.allocated_hours
utilization_percent = actual_hours / capacity_hours * 100   (0 when capacity is 0)
```

utilization_percent is never clamped here. Results expose both the raw value
and a display value clamped to 100.

Usage:
    calculator = UtilizationCalculator(store)

    result = await calculator.calculate_user_utilization(user_id, start, end)
    team = await calculator.calculate_team_utilization(start, end)
    kpi = await calculator.calculate_utilization_kpi(start, end, user_id=user_id)
"""

import asyncio
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Sequence

from staffplan.domain import (
    ActivityStatus,
    ActivityType,
    DateWindow,
    TimeEntryStatus,
    User,
)
from staffplan.errors import InvalidInputError, NotFoundError
from staffplan.platform.config import Settings, settings as default_settings

from .base import EngineServiceBase
from .intervals import allocated_hours_in_window, overlaps_window, weeks_in_window

MAX_DISPLAY_UTILIZATION = 100.0


def clamp_utilization(percent: float) -> float:
    """Display variant of a utilization percentage."""
    return min(percent, MAX_DISPLAY_UTILIZATION)


@dataclass
class UtilizationResult:
    """Utilization of one user over a period."""
    user_id: str
    user_name: str
    period: str
    allocated_hours: float
    actual_hours: float
    capacity_hours: float
    utilization_percent: float

    @property
    def raw_utilization(self) -> float:
        return self.utilization_percent

    @property
    def clamped_utilization(self) -> float:
        return clamp_utilization(self.utilization_percent)


@dataclass
class UtilizationKpi:
    """Approved-hours utilization for one user or everyone."""
    user_id: Optional[str]
    period: str
    total_hours: float
    available_hours: float
    raw_utilization: float

    @property
    def utilization(self) -> float:
        return clamp_utilization(self.raw_utilization)


@dataclass
class ActivitySummary:
    start_date: date
    end_date: date
    total_projects: int
    active_projects: int
    total_tasks: int
    total_time_entries: int
    total_hours: float
    unique_users: int


def format_period(window: DateWindow) -> str:
    return f"{window.start.isoformat()} to {window.end.isoformat()}"


class UtilizationCalculator(EngineServiceBase):
    """
    Aggregates allocations and logged time into utilization figures.

    Stateless between calls; every figure is derived from a fresh store read.
    """

    def __init__(self, store, clock=None, settings: Optional[Settings] = None):
        super().__init__(store, clock)
        self.settings = settings or default_settings

    async def calculate_user_utilization(
        self,
        user_id: str,
        start_date: date,
        end_date: date,
        standard_hours_per_week: float = 40,
        time_entry_statuses: Optional[Sequence[TimeEntryStatus]] = None,
    ) -> UtilizationResult:
        """
        Calculate utilization for a single user.

        Args:
            user_id: User to evaluate
            start_date: First day of the period
            end_date: Last day of the period
            standard_hours_per_week: Weekly capacity
            time_entry_statuses: Restrict logged hours to these statuses (all when None)

        Returns:
            UtilizationResult, zeroed when the user has no assignments or entries

        Raises:
            InvalidInputError: malformed date range
            NotFoundError: unknown user
        """
        window = self.require_window(start_date, end_date)
        self._require_capacity(standard_hours_per_week)

        user = self.store.find_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)

        return self._utilization_for(user, window, standard_hours_per_week, time_entry_statuses)

    async def calculate_team_utilization(
        self,
        start_date: date,
        end_date: date,
        standard_hours_per_week: float = 40,
        time_entry_statuses: Optional[Sequence[TimeEntryStatus]] = None,
    ) -> List[UtilizationResult]:
        """
        Calculate utilization for every known user.

        The store is synchronous, so users are evaluated one after another
        even though results are collected through asyncio.gather.
        """
        window = self.require_window(start_date, end_date)
        self._require_capacity(standard_hours_per_week)

        users = self.store.list_users()

        async def _one(user: User) -> UtilizationResult:
            return self._utilization_for(user, window, standard_hours_per_week, time_entry_statuses)

        results = await asyncio.gather(*(_one(user) for user in users))

        self.logger.info(
            "team utilization calculated",
            users=len(results),
            period=format_period(window),
        )
        return list(results)

    async def calculate_utilization_kpi(
        self,
        start_date: date,
        end_date: date,
        user_id: Optional[str] = None,
        standard_hours_per_week: float = 40,
    ) -> UtilizationKpi:
        """
        Utilization KPI over approved hours only.

        Capacity is a single person's weekly capacity even when user_id is None.
        """
        window = self.require_window(start_date, end_date)
        self._require_capacity(standard_hours_per_week)

        if user_id is not None and self.store.find_user_by_id(user_id) is None:
            raise NotFoundError("User", user_id)

        entries = self.store.find_time_entries_in_window(
            user_id, window, statuses=[TimeEntryStatus.APPROVED]
        )
        total_hours = sum((float(e.hours) for e in entries), 0.0)
        available_hours = weeks_in_window(window) * standard_hours_per_week
        raw = (total_hours / available_hours) * 100 if available_hours > 0 else 0.0

        return UtilizationKpi(
            user_id=user_id,
            period=format_period(window),
            total_hours=total_hours,
            available_hours=available_hours,
            raw_utilization=raw,
        )

    async def get_activity_summary(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> ActivitySummary:
        """
        Headline counts for a period.

        end_date defaults to today and start_date to ACTIVITY_SUMMARY_DEFAULT_DAYS
        before end_date.
        """
        end = end_date if end_date is not None else self.today()
        start = (
            start_date
            if start_date is not None
            else end - timedelta(days=self.settings.ACTIVITY_SUMMARY_DEFAULT_DAYS)
        )
        window = self.require_window(start, end)

        activities = self.store.list_activities()
        entries = self.store.find_time_entries_in_window(None, window)

        def created_by_end(activity) -> bool:
            return activity.created_at is None or activity.created_at.date() <= window.end

        total_projects = sum(
            1 for a in activities
            if a.type == ActivityType.PROJECT and created_by_end(a)
        )
        active_projects = sum(
            1 for a in activities
            if a.type == ActivityType.PROJECT
            and a.status == ActivityStatus.ACTIVE
            and overlaps_window(a.start_date, a.end_date, window)
        )
        total_tasks = sum(
            1 for a in activities
            if a.type in (ActivityType.PROJECT, ActivityType.INTERNAL) and created_by_end(a)
        )

        return ActivitySummary(
            start_date=window.start,
            end_date=window.end,
            total_projects=total_projects,
            active_projects=active_projects,
            total_tasks=total_tasks,
            total_time_entries=len(entries),
            total_hours=sum((float(e.hours) for e in entries), 0.0),
            unique_users=len({e.user_id for e in entries}),
        )

    def _utilization_for(
        self,
        user: User,
        window: DateWindow,
        standard_hours_per_week: float,
        time_entry_statuses: Optional[Sequence[TimeEntryStatus]],
    ) -> UtilizationResult:
        assignments = self.store.find_assignments_overlapping(user.id, window)
        entries = self.store.find_time_entries_in_window(
            user.id, window, statuses=time_entry_statuses
        )

        allocated_hours = sum((allocated_hours_in_window(a, window) for a in assignments), 0.0)
        actual_hours = sum((float(e.hours) for e in entries), 0.0)
        capacity_hours = weeks_in_window(window) * standard_hours_per_week
        utilization = (actual_hours / capacity_hours) * 100 if capacity_hours > 0 else 0.0

        return UtilizationResult(
            user_id=user.id,
            user_name=user.name,
            period=format_period(window),
            allocated_hours=allocated_hours,
            actual_hours=actual_hours,
            capacity_hours=capacity_hours,
            utilization_percent=utilization,
        )

    @staticmethod
    def _require_capacity(standard_hours_per_week: float) -> None:
        if standard_hours_per_week is None or standard_hours_per_week < 0:
            raise InvalidInputError("standard_hours_per_week must be zero or positive")
