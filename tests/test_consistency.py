"""Tests for member counts and denormalized names kept by the consistency maintainer."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from issue_tracker.config import load_config
from issue_tracker.context import AppContext, build_context
from issue_tracker.domain.models import Identity, User


def _as(user: User) -> Identity:
    return Identity(id=user.id, role=user.role, team_id=user.team_id)


def _live_count(ctx: AppContext, team_id: str) -> int:
    return sum(1 for u in ctx.container.users.list() if u.team_id == team_id and u.is_active)


@pytest.fixture
def ctx() -> AppContext:
    return build_context(load_config(environ={}, overrides={"bcrypt_rounds": 4}))


@pytest.fixture
def world(ctx: AppContext) -> SimpleNamespace:
    admin = _as(ctx.container.users.get_by_email("admin@company.com"))
    lead_a = ctx.users.create_user(admin, email="la@x.com", name="Lead A", password="pw", role="TEAM_LEAD")
    lead_b = ctx.users.create_user(admin, email="lb@x.com", name="Lead B", password="pw", role="TEAM_LEAD")
    team_a = ctx.teams.create_team(admin, name="A", team_lead_id=lead_a.id)
    team_b = ctx.teams.create_team(admin, name="B", team_lead_id=lead_b.id)
    dev = ctx.users.create_user(admin, email="dev@x.com", name="Dev", password="pw", role="USER", team_id=team_a.id)
    task = ctx.tasks.create_task(
        _as(ctx.container.users.get(lead_a.id)),
        title="t", description="d", priority="LOW", team_id=team_a.id, assignee_id=dev.id,
    )
    return SimpleNamespace(admin=admin, lead_a=lead_a, team_a=team_a, team_b=team_b, dev=dev, task=task)


class TestMemberCount:
    def test_counts_follow_team_moves(self, ctx: AppContext, world: SimpleNamespace) -> None:
        assert ctx.container.teams.get(world.team_a.id).member_count == 2
        ctx.users.update_user(world.admin, world.dev.id, {"team_id": world.team_b.id})
        for team in (world.team_a, world.team_b):
            assert ctx.container.teams.get(team.id).member_count == _live_count(ctx, team.id)
        assert ctx.container.teams.get(world.team_b.id).member_count == 2
        assert ctx.container.users.get(world.dev.id).team_name == "B"

    def test_leaving_all_teams(self, ctx: AppContext, world: SimpleNamespace) -> None:
        ctx.users.update_user(world.admin, world.dev.id, {"team_id": None})
        dev = ctx.container.users.get(world.dev.id)
        assert dev.team_id is None
        assert dev.team_name is None
        assert ctx.container.teams.get(world.team_a.id).member_count == 1

    def test_deactivation_and_reactivation(self, ctx: AppContext, world: SimpleNamespace) -> None:
        ctx.users.update_user(world.admin, world.dev.id, {"is_active": False})
        assert ctx.container.teams.get(world.team_a.id).member_count == 1
        ctx.users.update_user(world.admin, world.dev.id, {"is_active": True})
        assert ctx.container.teams.get(world.team_a.id).member_count == 2

    def test_rebuild_repairs_drift(self, ctx: AppContext, world: SimpleNamespace) -> None:
        team = ctx.container.teams.get(world.team_a.id)
        team.member_count = 42
        team.team_lead_name = "stale"
        ctx.consistency.rebuild()
        assert team.member_count == 2
        assert team.team_lead_name == "Lead A"

    def test_refresh_is_idempotent(self, ctx: AppContext, world: SimpleNamespace) -> None:
        ctx.consistency.sync_user(world.dev.id)
        snapshot = [t.to_dict() for t in ctx.container.teams.list()]
        ctx.consistency.sync_user(world.dev.id)
        ctx.consistency.refresh_team(world.team_a.id)
        assert [t.to_dict() for t in ctx.container.teams.list()] == snapshot


class TestDenormalizedNames:
    def test_user_rename_reaches_tasks_and_teams(self, ctx: AppContext, world: SimpleNamespace) -> None:
        ctx.users.update_user(world.admin, world.dev.id, {"name": "Developer", "email": "developer@x.com"})
        ctx.users.update_user(world.admin, world.lead_a.id, {"name": "Boss"})
        task = ctx.container.tasks.get(world.task.id)
        assert task.assignee_name == "Developer"
        assert task.assignee_email == "developer@x.com"
        assert task.reporter_name == "Boss"
        assert ctx.container.teams.get(world.team_a.id).team_lead_name == "Boss"

    def test_missing_ids_are_ignored(self, ctx: AppContext) -> None:
        ctx.consistency.sync_user("user-missing")
        ctx.consistency.refresh_team("team-missing")
        ctx.consistency.refresh_team(None)
