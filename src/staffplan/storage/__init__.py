"""staffplan Storage Layer - record store contract and the SQLAlchemy implementation."""

from .base import CandidateFilter, RecordStore, StorageAdapter
from .sql_adapter import DatabaseAdapter, DatabaseConfig
from .sql_store import SqlRecordStore
from .models import (
    ActivityModel,
    AssignmentModel,
    Base,
    ProjectRequirementModel,
    ScopeModel,
    SkillModel,
    TeamRoleModel,
    TimeEntryModel,
    UserModel,
    UserSkillModel,
    UserTeamRoleModel,
)

__all__ = [
    "StorageAdapter",
    "RecordStore",
    "CandidateFilter",
    "DatabaseAdapter",
    "DatabaseConfig",
    "SqlRecordStore",
    "Base",
    "ActivityModel",
    "AssignmentModel",
    "ProjectRequirementModel",
    "ScopeModel",
    "SkillModel",
    "TeamRoleModel",
    "TimeEntryModel",
    "UserModel",
    "UserSkillModel",
    "UserTeamRoleModel",
]
