"""
Resource Suggester

Suggests people for an activity from its ordered skill requirements, and
estimates when a team of a given size could start.

Scoring (0-100, clamped):
```
skills_match  = Σ priority(requirements met at or above level) / Σ priority × 100
score         = skills_match × 0.4
              + 50  if no active assignment overlaps the window
              + 30  if the last conflict ends inside the window (available the day after)
              + 10  if utilization < 80%
              - 20  if utilization > 100%
```

Utilization here is clipped weekly allocation over the window against a
40 hour week.

Usage:
    suggester = ResourceSuggester(store)

    suggestions = await suggester.suggest_resources(activity_id, start, end, 20)
    start = await suggester.estimate_start_date(activity_id, 20, team_size=3)
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Optional

from staffplan.domain import (
    DateWindow,
    ProficiencyLevel,
    ProjectRequirement,
    User,
)
from staffplan.errors import InvalidInputError

from .base import EngineServiceBase
from .capacity import CapacityPlanner
from .intervals import allocated_hours_in_window, weeks_in_window


@dataclass
class ResourceSuggestion:
    """A suggested person for an activity."""
    user_id: str
    user_name: str
    confidence_score: float  # 0-100
    reasons: List[str]
    available_from: Optional[date]
    skills_match: float  # 0-100
    current_utilization: float  # percent, unclamped


class ResourceSuggester(EngineServiceBase):
    """Requirement-driven suggestions and start date estimation."""

    SKILLS_WEIGHT = 0.4
    FULL_AVAILABILITY_POINTS = 50
    PARTIAL_AVAILABILITY_POINTS = 30
    LOW_UTILIZATION_BONUS = 10
    OVERALLOCATION_PENALTY = 20

    LOW_UTILIZATION_PERCENT = 80
    FULL_UTILIZATION_PERCENT = 100

    STANDARD_HOURS_PER_WEEK = 40
    LOOKAHEAD_DAYS = 90

    def __init__(self, store, clock=None):
        super().__init__(store, clock)
        self.capacity = CapacityPlanner(store, self.clock)

    async def suggest_resources(
        self,
        activity_id: str,
        start_date: date,
        end_date: date,
        required_hours_per_week: float,
    ) -> List[ResourceSuggestion]:
        """
        Suggest users for an activity over a window.

        Args:
            activity_id: Activity whose requirements drive the match
            start_date: Desired start
            end_date: Desired end
            required_hours_per_week: Weekly hours the activity needs per person

        Returns:
            Suggestions with a positive score, best first

        Raises:
            NotFoundError: activity does not exist
            InvalidInputError: malformed window or negative hours
        """
        window = self.require_window(start_date, end_date)
        if required_hours_per_week is None or required_hours_per_week < 0:
            raise InvalidInputError("required_hours_per_week must be zero or positive")

        self.require_activity(activity_id)
        requirements = self.store.find_project_requirements(activity_id)
        users = self.store.list_users()

        suggestions = []
        for user in users:
            suggestion = self._evaluate_user(user, requirements, window)
            if suggestion.confidence_score > 0:
                suggestions.append(suggestion)

        suggestions.sort(key=lambda s: s.confidence_score, reverse=True)

        self.logger.info(
            "resources suggested",
            activity_id=activity_id,
            requirements=len(requirements),
            required_hours_per_week=required_hours_per_week,
            suggested=len(suggestions),
        )
        return suggestions

    async def estimate_start_date(
        self,
        activity_id: str,
        required_hours_per_week: float,
        team_size: int,
    ) -> Optional[date]:
        """
        Earliest date by which team_size suggested people are available.

        Looks LOOKAHEAD_DAYS ahead from today. Returns today when enough
        people are free now, the team_size-th earliest availability otherwise,
        and None when the window never yields enough people.
        """
        if team_size is None or team_size < 1:
            raise InvalidInputError("team_size must be at least 1")

        today = self.today()
        horizon = today + timedelta(days=self.LOOKAHEAD_DAYS)
        suggestions = await self.suggest_resources(
            activity_id, today, horizon, required_hours_per_week
        )

        available_now = [
            s for s in suggestions
            if s.available_from is not None and s.available_from <= today
        ]
        if len(available_now) >= team_size:
            return today

        dates = sorted(s.available_from for s in suggestions if s.available_from is not None)
        if len(dates) >= team_size:
            return dates[team_size - 1]

        self.logger.info(
            "not enough people in lookahead",
            activity_id=activity_id,
            team_size=team_size,
            available=len(dates),
        )
        return None

    def _evaluate_user(
        self,
        user: User,
        requirements: List[ProjectRequirement],
        window: DateWindow,
    ) -> ResourceSuggestion:
        reasons: List[str] = []
        score = 0.0

        # Skills
        skills_match = self._skills_match(user, requirements, reasons)
        score += skills_match * self.SKILLS_WEIGHT

        # Availability
        available_from = None
        conflicts = self.capacity.find_conflicts(user.id, window)
        if not conflicts:
            available_from = window.start
            score += self.FULL_AVAILABILITY_POINTS
            reasons.append("Available for the entire period")
        else:
            last_conflict = conflicts[-1]
            if last_conflict.end_date is not None:
                candidate = last_conflict.end_date + timedelta(days=1)
                if candidate <= window.end:
                    available_from = candidate
            if available_from is not None:
                score += self.PARTIAL_AVAILABILITY_POINTS
                reasons.append(f"Available from {available_from.isoformat()}")
            else:
                reasons.append("Not available during this period")

        # Utilization
        capacity_hours = weeks_in_window(window) * self.STANDARD_HOURS_PER_WEEK
        allocated = sum((allocated_hours_in_window(a, window) for a in conflicts), 0.0)
        utilization = (allocated / capacity_hours) * 100 if capacity_hours > 0 else 0.0

        if utilization < self.LOW_UTILIZATION_PERCENT:
            score += self.LOW_UTILIZATION_BONUS
            reasons.append(f"Low utilization ({utilization:.1f}%)")
        elif utilization > self.FULL_UTILIZATION_PERCENT:
            score -= self.OVERALLOCATION_PENALTY
            reasons.append(f"Over-allocated ({utilization:.1f}%)")

        return ResourceSuggestion(
            user_id=user.id,
            user_name=user.name,
            confidence_score=max(0.0, min(100.0, score)),
            reasons=reasons,
            available_from=available_from,
            skills_match=skills_match,
            current_utilization=utilization,
        )

    def _skills_match(
        self,
        user: User,
        requirements: List[ProjectRequirement],
        reasons: List[str],
    ) -> float:
        """Priority-weighted share of requirements met, 0-100."""
        user_levels: Dict[str, ProficiencyLevel] = {}
        for skill in user.skills:
            key = skill.name.lower()
            current = user_levels.get(key)
            if current is None or skill.proficiency_level > current:
                user_levels[key] = skill.proficiency_level

        matched = 0
        total_priority = 0
        for req in requirements:
            weight = req.priority or 1
            total_priority += weight
            level = user_levels.get(req.skill_name.lower())

            if level is None:
                reasons.append(f"Missing skill: {req.skill_name}")
            elif level >= req.required_level:
                matched += weight
                reasons.append(f"Has {req.skill_name} at {level.value} level")
            else:
                reasons.append(
                    f"Missing {req.skill_name} (has {level.value}, needs {req.required_level.value})"
                )

        return (matched / total_priority) * 100 if total_priority > 0 else 0.0
