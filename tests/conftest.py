"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

import pytest

sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from staffplan.domain import (  # noqa: E402
    Activity,
    ActivityStatus,
    ActivityType,
    Assignment,
    AssignmentStatus,
    DateWindow,
    ProficiencyLevel,
    ProjectRequirement,
    TeamRole,
    TimeEntry,
    TimeEntryStatus,
    User,
    UserSkill,
)
from staffplan.engine.intervals import overlaps_window  # noqa: E402
from staffplan.storage.base import CandidateFilter, RecordStore  # noqa: E402


# =============================================================================
# In-memory record store
# =============================================================================

class InMemoryRecordStore(RecordStore):
    """Fake record store answering the read contract from plain lists."""

    def __init__(self):
        self.users: Dict[str, User] = {}
        self.activities: Dict[str, Activity] = {}
        self.assignments: List[Assignment] = []
        self.time_entries: List[TimeEntry] = []
        self.requirements: List[ProjectRequirement] = []
        self.calls: List[str] = []

    # --- seeding ---

    def add_user(self, user_id, name=None, skills=(), team_role=None, email=None) -> User:
        user = User(
            id=user_id,
            name=name or user_id.title(),
            email=email or f"{user_id}@example.com",
            team_role=team_role,
            skills=[
                s if isinstance(s, UserSkill) else UserSkill(name=s[0], proficiency_level=s[1])
                for s in skills
            ],
        )
        self.users[user_id] = user
        return user

    def add_activity(self, activity_id, **kwargs) -> Activity:
        activity = Activity(id=activity_id, name=kwargs.pop("name", activity_id), **kwargs)
        self.activities[activity_id] = activity
        return activity

    def add_assignment(
        self,
        user_id,
        hours,
        start=None,
        end=None,
        status=AssignmentStatus.CONFIRMED,
        activity_id="act_other",
    ) -> Assignment:
        assignment = Assignment(
            id=f"asg_{len(self.assignments) + 1}",
            user_id=user_id,
            activity_id=activity_id,
            allocated_hours=Decimal(str(hours)),
            start_date=start,
            end_date=end,
            status=status,
        )
        self.assignments.append(assignment)
        return assignment

    def add_time_entry(
        self,
        user_id,
        entry_date,
        hours,
        status=TimeEntryStatus.APPROVED,
        activity_id="act_other",
    ) -> TimeEntry:
        entry = TimeEntry(
            id=f"te_{len(self.time_entries) + 1}",
            user_id=user_id,
            activity_id=activity_id,
            entry_date=entry_date,
            hours=Decimal(str(hours)),
            status=status,
        )
        self.time_entries.append(entry)
        return entry

    def add_requirement(self, activity_id, skill_name, level, priority=1) -> ProjectRequirement:
        requirement = ProjectRequirement(
            id=f"req_{len(self.requirements) + 1}",
            activity_id=activity_id,
            skill_name=skill_name,
            required_level=level,
            priority=priority,
        )
        self.requirements.append(requirement)
        return requirement

    # --- RecordStore ---

    def find_users_with_skills_roles_assignments(self, candidate_filter: CandidateFilter) -> List[User]:
        self.calls.append("find_users_with_skills_roles_assignments")
        excluded = set(candidate_filter.exclude_user_ids)
        result = []
        for user in self.users.values():
            if user.id in excluded:
                continue
            snapshot = User(
                id=user.id,
                name=user.name,
                email=user.email,
                role=user.role,
                team_role=user.team_role,
                skills=list(user.skills),
                assignments=self.find_assignments_overlapping(
                    user.id, candidate_filter.window, candidate_filter.assignment_statuses or None
                ),
                time_entries=self.find_time_entries_in_window(
                    user.id, candidate_filter.window, candidate_filter.time_entry_statuses or None
                ),
            )
            result.append(snapshot)
        return result

    def find_assignments_overlapping(
        self,
        user_id: str,
        window: DateWindow,
        statuses: Optional[Sequence[AssignmentStatus]] = None,
    ) -> List[Assignment]:
        return [
            a for a in self.assignments
            if a.user_id == user_id
            and overlaps_window(a.start_date, a.end_date, window)
            and (not statuses or a.status in statuses)
        ]

    def find_time_entries_in_window(
        self,
        user_id: Optional[str],
        window: DateWindow,
        statuses: Optional[Sequence[TimeEntryStatus]] = None,
    ) -> List[TimeEntry]:
        return [
            e for e in self.time_entries
            if (user_id is None or e.user_id == user_id)
            and (window.start is None or e.entry_date >= window.start)
            and (window.end is None or e.entry_date <= window.end)
            and (not statuses or e.status in statuses)
        ]

    def find_activity_by_id(self, activity_id: str) -> Optional[Activity]:
        return self.activities.get(activity_id)

    def find_project_requirements(self, activity_id: str) -> List[ProjectRequirement]:
        return [r for r in self.requirements if r.activity_id == activity_id]

    def find_user_by_id(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def list_users(self) -> List[User]:
        return list(self.users.values())

    def list_activities(self) -> List[Activity]:
        return list(self.activities.values())


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store() -> InMemoryRecordStore:
    """Empty in-memory record store."""
    return InMemoryRecordStore()


@pytest.fixture
def risk_associate() -> TeamRole:
    return TeamRole(
        id="tr_risk_associate",
        name="Risk Associate",
        billing_rate=Decimal("150.00"),
        cost_rate=Decimal("75.00"),
    )


@pytest.fixture
def director() -> TeamRole:
    return TeamRole(
        id="tr_director",
        name="Director",
        billing_rate=Decimal("400.00"),
        cost_rate=Decimal("200.00"),
    )


@pytest.fixture
def project(store) -> Activity:
    """An active project registered in the store."""
    return store.add_activity(
        "act_audit",
        name="Vendor Risk Audit",
        type=ActivityType.PROJECT,
        status=ActivityStatus.ACTIVE,
        start_date=date(2024, 5, 1),
        end_date=date(2024, 8, 31),
    )


@pytest.fixture
def fixed_today():
    """Clock pinned to 2024-05-01."""
    return lambda: date(2024, 5, 1)


@pytest.fixture
def expert():
    return ProficiencyLevel.EXPERT
