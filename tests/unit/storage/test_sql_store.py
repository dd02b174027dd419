"""
Tests for SqlRecordStore against an in-memory SQLite database.
"""

from datetime import date
from decimal import Decimal

import pytest

from staffplan.domain import (
    ActivityStatus,
    AssignmentStatus,
    DateWindow,
    ProficiencyLevel,
    TimeEntryStatus,
)
from staffplan.storage import (
    ActivityModel,
    AssignmentModel,
    CandidateFilter,
    DatabaseAdapter,
    DatabaseConfig,
    ProjectRequirementModel,
    SkillModel,
    SqlRecordStore,
    TeamRoleModel,
    TimeEntryModel,
    UserModel,
    UserSkillModel,
    UserTeamRoleModel,
)

WINDOW = DateWindow(date(2024, 1, 1), date(2024, 1, 31))


@pytest.fixture
def adapter():
    adapter = DatabaseAdapter(DatabaseConfig(DATABASE_URL="sqlite://"))
    adapter.connect()
    adapter.create_schema()
    yield adapter
    adapter.close()


@pytest.fixture
def sql_store(adapter):
    with adapter.get_session() as session:
        session.add_all([
            TeamRoleModel(id="tr_assoc", name="Risk Associate",
                          billing_rate=Decimal("150.00"), cost_rate=Decimal("75.00")),
            TeamRoleModel(id="tr_senior", name="Senior Associate",
                          billing_rate=Decimal("200.00"), cost_rate=Decimal("100.00")),
            SkillModel(id="sk_risk", name="Risk Assessment"),
            UserModel(id="alice", name="Alice", email="alice@example.com"),
            UserModel(id="bob", name="Bob", email="bob@example.com", role="MANAGER"),
            ActivityModel(id="act_audit", name="Vendor Risk Audit", status="ACTIVE",
                          start_date=date(2024, 1, 1), end_date=date(2024, 6, 30)),
        ])
        session.flush()
        session.add_all([
            UserTeamRoleModel(id="utr_1", user_id="alice", team_role_id="tr_assoc", is_current=False),
            UserTeamRoleModel(id="utr_2", user_id="alice", team_role_id="tr_senior", is_current=True),
            UserSkillModel(id="us_1", user_id="alice", skill_id="sk_risk", proficiency_level="EXPERT"),
            ProjectRequirementModel(id="req_1", activity_id="act_audit", skill_name="Python",
                                    required_level="INTERMEDIATE", priority=1),
            ProjectRequirementModel(id="req_2", activity_id="act_audit", skill_name="Risk Assessment",
                                    required_level="ADVANCED", priority=3),
            # overlaps, open-ended
            AssignmentModel(id="asg_open", user_id="alice", activity_id="act_audit",
                            allocated_hours=Decimal("10"), start_date=date(2023, 12, 1),
                            end_date=None, status="CONFIRMED"),
            # ends before the window
            AssignmentModel(id="asg_past", user_id="alice", activity_id="act_audit",
                            allocated_hours=Decimal("20"), start_date=date(2023, 11, 1),
                            end_date=date(2023, 12, 31), status="CONFIRMED"),
            # overlaps but cancelled
            AssignmentModel(id="asg_cancelled", user_id="alice", activity_id="act_audit",
                            allocated_hours=Decimal("30"), start_date=date(2024, 1, 10),
                            end_date=date(2024, 1, 20), status="CANCELLED"),
            # no dates at all
            AssignmentModel(id="asg_undated", user_id="bob", activity_id="act_audit",
                            allocated_hours=Decimal("5"), status="PENDING"),
            TimeEntryModel(id="te_1", user_id="alice", activity_id="act_audit",
                           entry_date=date(2024, 1, 5), hours=Decimal("8"), status="APPROVED"),
            TimeEntryModel(id="te_2", user_id="alice", activity_id="act_audit",
                           entry_date=date(2024, 1, 6), hours=Decimal("4"), status="REJECTED"),
            TimeEntryModel(id="te_3", user_id="bob", activity_id="act_audit",
                           entry_date=date(2024, 2, 1), hours=Decimal("6"), status="APPROVED"),
        ])
    return SqlRecordStore(adapter)


def test_find_user_maps_current_role_and_skills(sql_store):
    user = sql_store.find_user_by_id("alice")

    assert user.team_role.name == "Senior Associate"
    assert user.team_role.billing_rate == Decimal("200.00")
    assert [s.name for s in user.skills] == ["Risk Assessment"]
    assert user.skills[0].proficiency_level == ProficiencyLevel.EXPERT


def test_find_user_missing(sql_store):
    assert sql_store.find_user_by_id("ghost") is None


def test_assignment_overlap_treats_null_dates_as_unbounded(sql_store):
    alice = sql_store.find_assignments_overlapping("alice", WINDOW)
    bob = sql_store.find_assignments_overlapping("bob", WINDOW)

    assert {a.id for a in alice} == {"asg_open", "asg_cancelled"}
    assert [a.id for a in bob] == ["asg_undated"]


def test_assignment_status_filter(sql_store):
    assignments = sql_store.find_assignments_overlapping(
        "alice", WINDOW, statuses=[AssignmentStatus.PENDING, AssignmentStatus.CONFIRMED]
    )

    assert [a.id for a in assignments] == ["asg_open"]
    assert assignments[0].allocated_hours == Decimal("10")
    assert assignments[0].end_date is None


def test_time_entries_for_everyone_and_by_status(sql_store):
    everyone = sql_store.find_time_entries_in_window(None, WINDOW)
    approved = sql_store.find_time_entries_in_window(
        "alice", WINDOW, statuses=[TimeEntryStatus.APPROVED]
    )

    assert [e.id for e in everyone] == ["te_1", "te_2"]
    assert [e.id for e in approved] == ["te_1"]
    assert approved[0].entry_date == date(2024, 1, 5)


def test_candidate_query(sql_store):
    users = sql_store.find_users_with_skills_roles_assignments(CandidateFilter(
        window=WINDOW,
        exclude_user_ids=["bob"],
        assignment_statuses=[AssignmentStatus.CONFIRMED],
        time_entry_statuses=[TimeEntryStatus.APPROVED],
    ))

    assert [u.id for u in users] == ["alice"]
    assert [a.id for a in users[0].assignments] == ["asg_open"]
    assert [e.id for e in users[0].time_entries] == ["te_1"]


def test_candidate_query_open_window(sql_store):
    users = sql_store.find_users_with_skills_roles_assignments(CandidateFilter())

    by_id = {u.id: u for u in users}
    assert len(by_id["alice"].assignments) == 3
    assert len(by_id["bob"].time_entries) == 1


def test_activity_and_requirements(sql_store):
    activity = sql_store.find_activity_by_id("act_audit")
    requirements = sql_store.find_project_requirements("act_audit")

    assert activity.status == ActivityStatus.ACTIVE
    assert sql_store.find_activity_by_id("missing") is None
    assert [r.skill_name for r in requirements] == ["Risk Assessment", "Python"]
    assert requirements[0].required_level == ProficiencyLevel.ADVANCED
    assert len(sql_store.list_activities()) == 1


def test_health_check(adapter):
    assert adapter.health_check() is True


def test_session_requires_connect():
    adapter = DatabaseAdapter(DatabaseConfig(DATABASE_URL="sqlite://"))
    assert adapter.health_check() is False
    with pytest.raises(ConnectionError):
        with adapter.get_session():
            pass
