"""
Resource Recommender

Ranks users for an activity by skill match, availability and current load.

Scoring:
```
skills_match        = matched_required_skills / required_skills   (0.5 when none requested)
current_utilization = (Σ assignment.allocated_hours + Σ logged hours) / (weeks_in_window × 40)
availability        = max(0, 1 - current_utilization)
score               = 0.4 × skills_match
                    + 0.3 × availability
                    + 0.3 × (1 - min(current_utilization, 1))
```

A required skill matches when any of the user's skill names contains it or
is contained by it, case-insensitively.

Hard filters (the user is dropped, not penalised):
- required_team_role given and the user's current role name differs
- allocated_hours requested and remaining capacity is below it

Assignment hours are summed flat, one weekly figure per overlapping
assignment, with no clipping to the window. UtilizationCalculator clips and
scales by weeks instead; the two figures are not meant to agree.

Usage:
    recommender = ResourceRecommender(store)

    ranked = await recommender.recommend_resources(
        RecommendationCriteria(activity_id, required_skills=["Risk Assessment"], allocated_hours=20)
    )
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

from staffplan.domain import (
    ACTIVE_ASSIGNMENT_STATUSES,
    TimeEntryStatus,
    User,
)
from staffplan.errors import InvalidInputError
from staffplan.storage.base import CandidateFilter

from .base import EngineServiceBase
from .intervals import weeks_in_window


@dataclass
class RecommendationCriteria:
    """What the activity needs from a candidate."""
    activity_id: str
    required_skills: Sequence[str] = field(default_factory=list)
    required_team_role: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    # Requested hours per week
    allocated_hours: Optional[float] = None
    exclude_user_ids: Sequence[str] = field(default_factory=list)


@dataclass
class UserRecommendation:
    """A ranked candidate for an activity."""
    user_id: str
    user_name: str
    user_email: str
    score: float
    reasons: List[str]
    current_utilization: float  # capped at 1.0
    skills_match: float
    availability: float
    remaining_capacity: float
    team_role: Optional[str] = None
    billing_rate: Optional[Decimal] = None
    cost_rate: Optional[Decimal] = None


class ResourceRecommender(EngineServiceBase):
    """
    Recommends users for an activity.

    Weights and thresholds are fixed.
    """

    SKILLS_WEIGHT = 0.4
    AVAILABILITY_WEIGHT = 0.3
    UTILIZATION_WEIGHT = 0.3

    STANDARD_HOURS_PER_WEEK = 40
    NEUTRAL_SKILLS_MATCH = 0.5

    # Reason thresholds
    STRONG_SKILLS_MATCH = 0.8
    PARTIAL_SKILLS_MATCH = 0.5
    HIGH_AVAILABILITY = 0.7
    MODERATE_AVAILABILITY = 0.4
    GOOD_UTILIZATION = 0.7

    # Time entries that still count as logged work
    COUNTED_TIME_ENTRY_STATUSES = (
        TimeEntryStatus.DRAFT,
        TimeEntryStatus.SUBMITTED,
        TimeEntryStatus.APPROVED,
    )

    async def recommend_resources(self, criteria: RecommendationCriteria) -> List[UserRecommendation]:
        """
        Rank candidate users for an activity.

        Args:
            criteria: Activity and optional constraints

        Returns:
            Recommendations sorted by score, best first. Ties keep fetch order.
            An empty list is a valid result.

        Raises:
            NotFoundError: activity does not exist
            InvalidInputError: inverted window or negative requested hours
        """
        window = self.optional_window(criteria.start_date, criteria.end_date)
        requested_hours = criteria.allocated_hours or 0
        if requested_hours < 0:
            raise InvalidInputError("allocated_hours must be positive")

        self.require_activity(criteria.activity_id)

        users = self.store.find_users_with_skills_roles_assignments(CandidateFilter(
            window=window,
            exclude_user_ids=list(criteria.exclude_user_ids),
            assignment_statuses=ACTIVE_ASSIGNMENT_STATUSES,
            time_entry_statuses=self.COUNTED_TIME_ENTRY_STATUSES,
        ))

        excluded = set(criteria.exclude_user_ids)
        required_skills = [s.lower() for s in criteria.required_skills]
        available_hours = weeks_in_window(window) * self.STANDARD_HOURS_PER_WEEK

        recommendations = []
        for user in users:
            if user.id in excluded:
                continue

            current_role = user.team_role
            if criteria.required_team_role and (
                current_role is None or current_role.name != criteria.required_team_role
            ):
                self.logger.debug("candidate dropped", user_id=user.id, reason="team_role")
                continue

            skills_match = self.calculate_skills_match(user, required_skills)

            total_allocated = sum((float(a.allocated_hours) for a in user.assignments), 0.0)
            total_logged = sum((float(e.hours) for e in user.time_entries), 0.0)
            current_utilization = (
                (total_allocated + total_logged) / available_hours
                if available_hours > 0 else 0.0
            )
            availability = max(0.0, 1 - current_utilization)

            remaining_capacity = max(0.0, available_hours - total_allocated - total_logged)
            if requested_hours > 0 and remaining_capacity < requested_hours:
                self.logger.debug(
                    "candidate dropped",
                    user_id=user.id,
                    reason="capacity",
                    remaining_capacity=remaining_capacity,
                )
                continue

            score = self.composite_score(skills_match, availability, current_utilization)

            recommendations.append(UserRecommendation(
                user_id=user.id,
                user_name=user.name,
                user_email=user.email,
                score=score,
                reasons=self._reasons(skills_match, availability, current_utilization),
                current_utilization=min(current_utilization, 1.0),
                skills_match=skills_match,
                availability=availability,
                remaining_capacity=remaining_capacity,
                team_role=current_role.name if current_role else None,
                billing_rate=current_role.billing_rate if current_role else None,
                cost_rate=current_role.cost_rate if current_role else None,
            ))

        recommendations.sort(key=lambda r: r.score, reverse=True)

        self.logger.info(
            "resources recommended",
            activity_id=criteria.activity_id,
            candidates=len(users),
            recommended=len(recommendations),
        )
        return recommendations

    def calculate_skills_match(self, user: User, required_skills: Sequence[str]) -> float:
        """Fraction of required skill names the user loosely matches."""
        if not required_skills:
            return self.NEUTRAL_SKILLS_MATCH

        user_skills = [s.name.lower() for s in user.skills if s.name]
        matched = [
            required for required in required_skills
            if any(us in required.lower() or required.lower() in us for us in user_skills)
        ]
        return len(matched) / len(required_skills)

    @classmethod
    def composite_score(cls, skills_match: float, availability: float, current_utilization: float) -> float:
        return (
            skills_match * cls.SKILLS_WEIGHT
            + availability * cls.AVAILABILITY_WEIGHT
            + (1 - min(current_utilization, 1.0)) * cls.UTILIZATION_WEIGHT
        )

    def _reasons(self, skills_match: float, availability: float, current_utilization: float) -> List[str]:
        reasons = []
        if skills_match >= self.STRONG_SKILLS_MATCH:
            reasons.append("Strong skills match")
        elif skills_match >= self.PARTIAL_SKILLS_MATCH:
            reasons.append("Partial skills match")

        if availability >= self.HIGH_AVAILABILITY:
            reasons.append("High availability")
        elif availability >= self.MODERATE_AVAILABILITY:
            reasons.append("Moderate availability")

        if current_utilization < self.GOOD_UTILIZATION:
            reasons.append("Good utilization level")
        return reasons

