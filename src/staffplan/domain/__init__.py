"""staffplan domain records - read-only snapshots consumed by the engine."""

from .models import (
    ACTIVE_ASSIGNMENT_STATUSES,
    Activity,
    ActivityStatus,
    ActivityType,
    Assignment,
    AssignmentStatus,
    DateWindow,
    ProficiencyLevel,
    ProjectRequirement,
    Scope,
    TeamRole,
    TimeEntry,
    TimeEntryStatus,
    User,
    UserRole,
    UserSkill,
)

__all__ = [
    "ACTIVE_ASSIGNMENT_STATUSES",
    "Activity",
    "ActivityStatus",
    "ActivityType",
    "Assignment",
    "AssignmentStatus",
    "DateWindow",
    "ProficiencyLevel",
    "ProjectRequirement",
    "Scope",
    "TeamRole",
    "TimeEntry",
    "TimeEntryStatus",
    "User",
    "UserRole",
    "UserSkill",
]
