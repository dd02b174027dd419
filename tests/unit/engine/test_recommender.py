"""
Tests for ResourceRecommender

Tests cover:
- Hard filters (exclusion, team role, remaining capacity)
- Skill matching
- Score composition and ordering
"""

from datetime import date, datetime

import pytest

from staffplan.domain import (
    AssignmentStatus,
    ProficiencyLevel,
    TimeEntryStatus,
    User,
    UserSkill,
)
from staffplan.engine import RecommendationCriteria, ResourceRecommender
from staffplan.errors import InvalidInputError, NotFoundError

START = date(2024, 1, 1)
END = date(2024, 1, 29)


@pytest.fixture
def recommender(store):
    return ResourceRecommender(store)


def criteria(**overrides):
    values = dict(activity_id="act_audit", start_date=START, end_date=END)
    values.update(overrides)
    return RecommendationCriteria(**values)


class TestFilters:

    @pytest.mark.asyncio
    async def test_excluded_users_never_returned(self, store, project, recommender):
        store.add_user("alice")
        store.add_user("bob")

        results = await recommender.recommend_resources(criteria(exclude_user_ids=["alice"]))

        assert [r.user_id for r in results] == ["bob"]

    @pytest.mark.asyncio
    async def test_team_role_is_exact(self, store, project, recommender, risk_associate, director):
        store.add_user("alice", team_role=risk_associate)
        store.add_user("bob", team_role=director)
        store.add_user("carol")

        results = await recommender.recommend_resources(
            criteria(required_team_role="Risk Associate")
        )

        assert [r.user_id for r in results] == ["alice"]
        assert results[0].team_role == "Risk Associate"
        assert results[0].billing_rate == risk_associate.billing_rate

    @pytest.mark.asyncio
    async def test_insufficient_remaining_capacity_dropped(self, store, project, recommender):
        store.add_user("busy")
        store.add_user("free")
        store.add_assignment("busy", 150, start=START, end=END)

        results = await recommender.recommend_resources(criteria(allocated_hours=20))

        assert [r.user_id for r in results] == ["free"]
        assert results[0].remaining_capacity == 160.0

    @pytest.mark.asyncio
    async def test_inactive_assignments_do_not_load(self, store, project, recommender):
        store.add_user("alice")
        store.add_assignment("alice", 150, start=START, end=END, status=AssignmentStatus.CANCELLED)
        store.add_time_entry("alice", date(2024, 1, 2), 8, status=TimeEntryStatus.REJECTED)

        results = await recommender.recommend_resources(criteria(allocated_hours=20))

        assert results[0].current_utilization == 0.0

    @pytest.mark.asyncio
    async def test_unknown_activity(self, recommender):
        with pytest.raises(NotFoundError):
            await recommender.recommend_resources(criteria(activity_id="missing"))

    @pytest.mark.asyncio
    async def test_inverted_window(self, project, recommender):
        with pytest.raises(InvalidInputError):
            await recommender.recommend_resources(criteria(start_date=END, end_date=START))

    @pytest.mark.asyncio
    async def test_no_candidates(self, project, recommender):
        assert await recommender.recommend_resources(criteria()) == []

    @pytest.mark.asyncio
    async def test_single_datetime_bound_is_treated_as_date(self, store, project, recommender):
        store.add_user("alice")
        store.add_assignment("alice", 10, start=date(2024, 1, 10), end=None)
        store.add_time_entry("alice", date(2024, 1, 1), 8)
        store.add_time_entry("alice", date(2023, 12, 31), 8)

        results = await recommender.recommend_resources(
            RecommendationCriteria("act_audit", start_date=datetime(2024, 1, 1, 9))
        )

        assert [r.user_id for r in results] == ["alice"]
        # open window sizes capacity as a single 40h week
        assert results[0].current_utilization == pytest.approx(18 / 40)

    @pytest.mark.asyncio
    async def test_single_datetime_end_bound(self, store, project, recommender):
        store.add_user("alice")
        store.add_time_entry("alice", date(2024, 1, 31), 8)
        store.add_time_entry("alice", date(2024, 2, 1), 8)

        results = await recommender.recommend_resources(
            RecommendationCriteria("act_audit", end_date=datetime(2024, 1, 31, 17, 30))
        )

        assert results[0].current_utilization == pytest.approx(8 / 40)

    @pytest.mark.asyncio
    async def test_single_bound_must_be_a_date(self, project, recommender):
        with pytest.raises(InvalidInputError):
            await recommender.recommend_resources(
                RecommendationCriteria("act_audit", start_date="2024-01-01")
            )


class TestScoring:

    @pytest.mark.asyncio
    async def test_exact_skill_ranks_above_non_match(self, store, project, recommender):
        store.add_user("generalist", skills=[("Project Management", ProficiencyLevel.EXPERT)])
        store.add_user("specialist", skills=[("Risk Assessment", ProficiencyLevel.ADVANCED)])

        results = await recommender.recommend_resources(
            criteria(required_skills=["Risk Assessment"])
        )

        assert [r.user_id for r in results] == ["specialist", "generalist"]
        assert results[0].skills_match == 1.0
        assert results[0].score == pytest.approx(1.0)
        assert results[1].skills_match == 0.0
        assert results[1].score == pytest.approx(0.6)
        assert "Strong skills match" in results[0].reasons

    @pytest.mark.asyncio
    async def test_skill_ranking_with_capacity_gate(self, store, project, recommender):
        store.add_user("generalist", skills=[("Project Management", ProficiencyLevel.EXPERT)])
        store.add_user("specialist", skills=[("Risk Assessment", ProficiencyLevel.ADVANCED)])
        store.add_user("busy_specialist", skills=[("Risk Assessment", ProficiencyLevel.EXPERT)])
        store.add_assignment("busy_specialist", 150, start=START, end=END)

        results = await recommender.recommend_resources(
            criteria(required_skills=["Risk Assessment"], allocated_hours=20)
        )

        assert [r.user_id for r in results] == ["specialist", "generalist"]
        assert results[0].score > results[1].score
        assert all(r.remaining_capacity >= 20 for r in results)

    @pytest.mark.asyncio
    async def test_load_lowers_score(self, store, project, recommender):
        store.add_user("alice")
        store.add_user("bob")
        store.add_assignment("alice", 80, start=START, end=END)
        store.add_time_entry("alice", date(2024, 1, 3), 40)

        results = await recommender.recommend_resources(criteria())

        assert [r.user_id for r in results] == ["bob", "alice"]
        alice = results[1]
        assert alice.current_utilization == pytest.approx(0.75)
        assert alice.availability == pytest.approx(0.25)
        assert alice.remaining_capacity == pytest.approx(40.0)
        assert "Good utilization level" not in alice.reasons

    @pytest.mark.asyncio
    async def test_utilization_capped_at_one(self, store, project, recommender):
        store.add_user("alice")
        store.add_assignment("alice", 200, start=START, end=END)

        results = await recommender.recommend_resources(criteria())

        assert results[0].current_utilization == 1.0
        assert results[0].availability == 0.0
        assert results[0].remaining_capacity == 0.0

    @pytest.mark.asyncio
    async def test_ties_keep_fetch_order(self, store, project, recommender):
        for user_id in ("alice", "bob", "carol"):
            store.add_user(user_id)

        results = await recommender.recommend_resources(criteria())

        assert [r.user_id for r in results] == ["alice", "bob", "carol"]

    def test_no_required_skills_is_neutral(self, recommender):
        user = User(id="alice", name="Alice", email="alice@example.com")
        assert recommender.calculate_skills_match(user, []) == 0.5

    def test_skill_match_is_loose_and_monotonic(self, recommender):
        user = User(id="alice", name="Alice", email="alice@example.com", skills=[
            UserSkill("Risk Assessment"),
        ])
        required = ["risk", "python"]
        before = recommender.calculate_skills_match(user, required)

        user.skills.append(UserSkill("Python"))
        after = recommender.calculate_skills_match(user, required)

        assert before == 0.5
        assert after == 1.0

    def test_composite_score_is_bounded(self):
        assert ResourceRecommender.composite_score(1.0, 1.0, 0.0) == pytest.approx(1.0)
        assert ResourceRecommender.composite_score(0.0, 0.0, 3.0) == 0.0

    @pytest.mark.parametrize("availability,utilization", [(1.0, 0.0), (0.25, 0.75), (0.0, 1.5)])
    def test_composite_score_never_drops_as_skills_rise(self, availability, utilization):
        scores = [
            ResourceRecommender.composite_score(skills / 10, availability, utilization)
            for skills in range(11)
        ]

        assert scores == sorted(scores)
        assert scores[-1] > scores[0]
