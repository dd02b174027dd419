"""
SQLAlchemy-backed record store.

Every query opens its own session through the adapter and returns domain
snapshots, so nothing ORM-bound escapes a session.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from sqlalchemy import select, and_, or_
from sqlalchemy.orm import selectinload

from staffplan.domain import (
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
from staffplan.platform.logging import get_logger

from .base import CandidateFilter, RecordStore, StorageAdapter
from .models import (
    ActivityModel,
    AssignmentModel,
    ProjectRequirementModel,
    ScopeModel,
    TeamRoleModel,
    TimeEntryModel,
    UserModel,
    UserSkillModel,
    UserTeamRoleModel,
)

logger = get_logger(__name__)


class SqlRecordStore(RecordStore):
    """RecordStore implementation over the relational schema."""

    def __init__(self, adapter: StorageAdapter):
        self.adapter = adapter

    # --- Users ---

    def find_users_with_skills_roles_assignments(self, candidate_filter: CandidateFilter) -> List[User]:
        with self.adapter.get_session() as session:
            stmt = self._user_query()
            if candidate_filter.exclude_user_ids:
                stmt = stmt.where(UserModel.id.notin_(list(candidate_filter.exclude_user_ids)))
            users = list(session.scalars(stmt).all())
            if not users:
                return []

            user_ids = [u.id for u in users]

            assignment_stmt = select(AssignmentModel).where(
                and_(
                    AssignmentModel.user_id.in_(user_ids),
                    *_assignment_overlap_clauses(candidate_filter.window),
                )
            ).order_by(AssignmentModel.start_date, AssignmentModel.id)
            if candidate_filter.assignment_statuses:
                assignment_stmt = assignment_stmt.where(
                    AssignmentModel.status.in_(_values(candidate_filter.assignment_statuses))
                )

            entry_stmt = select(TimeEntryModel).where(
                and_(
                    TimeEntryModel.user_id.in_(user_ids),
                    *_entry_window_clauses(candidate_filter.window),
                )
            ).order_by(TimeEntryModel.entry_date, TimeEntryModel.id)
            if candidate_filter.time_entry_statuses:
                entry_stmt = entry_stmt.where(
                    TimeEntryModel.status.in_(_values(candidate_filter.time_entry_statuses))
                )

            assignments_by_user: Dict[str, List[Assignment]] = defaultdict(list)
            for row in session.scalars(assignment_stmt).all():
                assignments_by_user[row.user_id].append(_to_assignment(row))

            entries_by_user: Dict[str, List[TimeEntry]] = defaultdict(list)
            for row in session.scalars(entry_stmt).all():
                entries_by_user[row.user_id].append(_to_time_entry(row))

            result = []
            for row in users:
                user = _to_user(row)
                user.assignments = assignments_by_user.get(row.id, [])
                user.time_entries = entries_by_user.get(row.id, [])
                result.append(user)

            logger.debug(
                "candidate query",
                users=len(result),
                window=str(candidate_filter.window),
            )
            return result

    def find_user_by_id(self, user_id: str) -> Optional[User]:
        with self.adapter.get_session() as session:
            row = session.scalars(self._user_query().where(UserModel.id == user_id)).first()
            return _to_user(row) if row else None

    def list_users(self) -> List[User]:
        with self.adapter.get_session() as session:
            return [_to_user(row) for row in session.scalars(self._user_query()).all()]

    # --- Assignments & Time ---

    def find_assignments_overlapping(
        self,
        user_id: str,
        window: DateWindow,
        statuses: Optional[Sequence[AssignmentStatus]] = None,
    ) -> List[Assignment]:
        with self.adapter.get_session() as session:
            stmt = select(AssignmentModel).where(
                and_(
                    AssignmentModel.user_id == user_id,
                    *_assignment_overlap_clauses(window),
                )
            ).order_by(AssignmentModel.start_date, AssignmentModel.id)
            if statuses:
                stmt = stmt.where(AssignmentModel.status.in_(_values(statuses)))
            return [_to_assignment(row) for row in session.scalars(stmt).all()]

    def find_time_entries_in_window(
        self,
        user_id: Optional[str],
        window: DateWindow,
        statuses: Optional[Sequence[TimeEntryStatus]] = None,
    ) -> List[TimeEntry]:
        with self.adapter.get_session() as session:
            stmt = select(TimeEntryModel).where(
                *_entry_window_clauses(window)
            ).order_by(TimeEntryModel.entry_date, TimeEntryModel.id)
            if user_id is not None:
                stmt = stmt.where(TimeEntryModel.user_id == user_id)
            if statuses:
                stmt = stmt.where(TimeEntryModel.status.in_(_values(statuses)))
            return [_to_time_entry(row) for row in session.scalars(stmt).all()]

    # --- Activities ---

    def find_activity_by_id(self, activity_id: str) -> Optional[Activity]:
        with self.adapter.get_session() as session:
            row = session.scalars(
                self._activity_query().where(ActivityModel.id == activity_id)
            ).first()
            return _to_activity(row) if row else None

    def list_activities(self) -> List[Activity]:
        with self.adapter.get_session() as session:
            return [_to_activity(row) for row in session.scalars(self._activity_query()).all()]

    def find_project_requirements(self, activity_id: str) -> List[ProjectRequirement]:
        with self.adapter.get_session() as session:
            stmt = select(ProjectRequirementModel).where(
                ProjectRequirementModel.activity_id == activity_id
            ).order_by(ProjectRequirementModel.priority.desc(), ProjectRequirementModel.id)
            return [
                ProjectRequirement(
                    id=row.id,
                    activity_id=row.activity_id,
                    skill_name=row.skill_name,
                    required_level=ProficiencyLevel(row.required_level),
                    priority=row.priority if row.priority is not None else 1,
                )
                for row in session.scalars(stmt).all()
            ]

    # --- Query builders ---

    def _user_query(self):
        return select(UserModel).options(
            selectinload(UserModel.skills).selectinload(UserSkillModel.skill),
            selectinload(UserModel.team_roles).selectinload(UserTeamRoleModel.team_role),
        ).order_by(UserModel.created_at, UserModel.id)

    def _activity_query(self):
        return select(ActivityModel).options(
            selectinload(ActivityModel.scopes).selectinload(ScopeModel.team_role),
        ).order_by(ActivityModel.created_at, ActivityModel.id)


def _values(statuses) -> List[str]:
    return [getattr(s, "value", s) for s in statuses]


def _assignment_overlap_clauses(window: DateWindow) -> list:
    """Null assignment dates are unbounded on that side."""
    clauses = []
    if window.end is not None:
        clauses.append(or_(AssignmentModel.start_date.is_(None), AssignmentModel.start_date <= window.end))
    if window.start is not None:
        clauses.append(or_(AssignmentModel.end_date.is_(None), AssignmentModel.end_date >= window.start))
    return clauses


def _entry_window_clauses(window: DateWindow) -> list:
    clauses = []
    if window.start is not None:
        clauses.append(TimeEntryModel.entry_date >= window.start)
    if window.end is not None:
        clauses.append(TimeEntryModel.entry_date <= window.end)
    return clauses


# --- Row mappers ---

def _to_team_role(row: TeamRoleModel) -> TeamRole:
    return TeamRole(
        id=row.id,
        name=row.name,
        billing_rate=row.billing_rate,
        cost_rate=row.cost_rate,
    )


def _to_user(row: UserModel) -> User:
    current = next((tr for tr in row.team_roles if tr.is_current), None)
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        role=UserRole(row.role),
        team_role=_to_team_role(current.team_role) if current else None,
        skills=[
            UserSkill(
                name=us.skill.name,
                proficiency_level=ProficiencyLevel(us.proficiency_level),
                certified=bool(us.certified),
            )
            for us in row.skills
        ],
    )


def _to_assignment(row: AssignmentModel) -> Assignment:
    return Assignment(
        id=row.id,
        user_id=row.user_id,
        activity_id=row.activity_id,
        allocated_hours=row.allocated_hours,
        start_date=row.start_date,
        end_date=row.end_date,
        status=AssignmentStatus(row.status),
        billing_rate_override=row.billing_rate_override,
        cost_rate_override=row.cost_rate_override,
    )


def _to_time_entry(row: TimeEntryModel) -> TimeEntry:
    return TimeEntry(
        id=row.id,
        user_id=row.user_id,
        activity_id=row.activity_id,
        entry_date=row.entry_date,
        hours=row.hours,
        status=TimeEntryStatus(row.status),
        billable_amount=row.billable_amount,
        cost_amount=row.cost_amount,
    )


def _to_activity(row: ActivityModel) -> Activity:
    return Activity(
        id=row.id,
        name=row.name,
        type=ActivityType(row.type),
        status=ActivityStatus(row.status),
        start_date=row.start_date,
        end_date=row.end_date,
        budget_hours=row.budget_hours,
        budget_cost=row.budget_cost,
        scopes=[
            Scope(
                team_role=_to_team_role(scope.team_role),
                allocated_hours=scope.allocated_hours,
                billing_rate_override=scope.billing_rate_override,
                cost_rate_override=scope.cost_rate_override,
            )
            for scope in row.scopes
        ],
        created_at=row.created_at,
    )
