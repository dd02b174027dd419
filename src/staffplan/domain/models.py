"""
Snapshot records handed to the engine by a record store.

These are read-only views of rows owned by the store. The engine never
mutates them and never writes them back.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class UserRole(str, Enum):
    """Application access roles."""
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    TEAM_MEMBER = "TEAM_MEMBER"


class ActivityType(str, Enum):
    """Kinds of billable and non-billable work."""
    PROJECT = "PROJECT"
    INTERNAL = "INTERNAL"
    PTO = "PTO"
    NON_BILLABLE = "NON_BILLABLE"


class ActivityStatus(str, Enum):
    PLANNING = "PLANNING"
    ACTIVE = "ACTIVE"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class AssignmentStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TimeEntryStatus(str, Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ProficiencyLevel(str, Enum):
    """Ordinal skill levels, comparable with <, <=, >, >=."""
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    EXPERT = "EXPERT"

    @property
    def rank(self) -> int:
        return _PROFICIENCY_ORDER.index(self)

    def __ge__(self, other):
        if not isinstance(other, ProficiencyLevel):
            return NotImplemented
        return self.rank >= other.rank

    def __gt__(self, other):
        if not isinstance(other, ProficiencyLevel):
            return NotImplemented
        return self.rank > other.rank

    def __le__(self, other):
        if not isinstance(other, ProficiencyLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __lt__(self, other):
        if not isinstance(other, ProficiencyLevel):
            return NotImplemented
        return self.rank < other.rank


_PROFICIENCY_ORDER = list(ProficiencyLevel)

# Assignment states that still hold capacity
ACTIVE_ASSIGNMENT_STATUSES = (AssignmentStatus.PENDING, AssignmentStatus.CONFIRMED)


@dataclass(frozen=True)
class DateWindow:
    """Inclusive calendar-date window. A None bound is unbounded on that side."""
    start: Optional[date] = None
    end: Optional[date] = None

    @property
    def is_bounded(self) -> bool:
        return self.start is not None and self.end is not None

    def __str__(self) -> str:
        start = self.start.isoformat() if self.start else "..."
        end = self.end.isoformat() if self.end else "..."
        return f"{start} to {end}"


@dataclass
class TeamRole:
    """A billing tier a user currently holds."""
    id: str
    name: str
    billing_rate: Decimal
    cost_rate: Decimal


@dataclass
class UserSkill:
    name: str
    proficiency_level: ProficiencyLevel = ProficiencyLevel.BEGINNER
    certified: bool = False


@dataclass
class Assignment:
    """
    A planned commitment of a user to an activity.

    allocated_hours is hours per week, not a total. A None end_date means
    the assignment runs open-ended.
    """
    id: str
    user_id: str
    activity_id: str
    allocated_hours: Decimal
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: AssignmentStatus = AssignmentStatus.CONFIRMED
    billing_rate_override: Optional[Decimal] = None
    cost_rate_override: Optional[Decimal] = None


@dataclass
class TimeEntry:
    id: str
    user_id: str
    activity_id: str
    entry_date: date
    hours: Decimal
    status: TimeEntryStatus = TimeEntryStatus.DRAFT
    billable_amount: Optional[Decimal] = None
    cost_amount: Optional[Decimal] = None


@dataclass
class User:
    """
    A user snapshot.

    assignments and time_entries are only populated by the candidate query,
    already restricted to the requested window and statuses.
    """
    id: str
    name: str
    email: str
    role: UserRole = UserRole.TEAM_MEMBER
    team_role: Optional[TeamRole] = None
    skills: List[UserSkill] = field(default_factory=list)
    assignments: List[Assignment] = field(default_factory=list)
    time_entries: List[TimeEntry] = field(default_factory=list)


@dataclass
class Scope:
    """An activity's declared need for a team role."""
    team_role: TeamRole
    allocated_hours: Decimal
    billing_rate_override: Optional[Decimal] = None
    cost_rate_override: Optional[Decimal] = None


@dataclass
class Activity:
    id: str
    name: str
    type: ActivityType = ActivityType.PROJECT
    status: ActivityStatus = ActivityStatus.PLANNING
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget_hours: Optional[Decimal] = None
    budget_cost: Optional[Decimal] = None
    scopes: List[Scope] = field(default_factory=list)
    created_at: Optional[datetime] = None


@dataclass
class ProjectRequirement:
    """A skill an activity needs, weighted by priority."""
    id: str
    activity_id: str
    skill_name: str
    required_level: ProficiencyLevel
    priority: int = 1
