"""Tests for task comments: authoring, editing and deletion rights."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from issue_tracker.config import load_config
from issue_tracker.context import AppContext, build_context
from issue_tracker.domain.models import Identity, User
from issue_tracker.errors import ForbiddenError, NotFoundError, ValidationFailedError


def _as(user: User) -> Identity:
    return Identity(id=user.id, role=user.role, team_id=user.team_id)


@pytest.fixture
def ctx() -> AppContext:
    return build_context(load_config(environ={}, overrides={"bcrypt_rounds": 4}))


@pytest.fixture
def world(ctx: AppContext) -> SimpleNamespace:
    admin = _as(ctx.container.users.get_by_email("admin@company.com"))
    lead = ctx.users.create_user(admin, email="l@x.com", name="Lead", password="pw", role="TEAM_LEAD")
    team = ctx.teams.create_team(admin, name="Core", team_lead_id=lead.id)
    dev = ctx.users.create_user(admin, email="d@x.com", name="Dev", password="pw", role="USER", team_id=team.id)
    peer = ctx.users.create_user(admin, email="p@x.com", name="Peer", password="pw", role="USER", team_id=team.id)
    task = ctx.tasks.create_task(_as(lead), title="t", description="d", priority="LOW", team_id=team.id)
    return SimpleNamespace(admin=admin, lead=_as(lead), dev=_as(dev), peer=_as(peer), task=task)


class TestAddComment:
    def test_add_records_author_name(self, ctx: AppContext, world: SimpleNamespace) -> None:
        comment = ctx.comments.add_comment(world.dev, world.task.id, "  Looks good  ")
        assert comment.content == "Looks good"
        assert comment.user_name == "Dev"
        assert comment.is_edited is False
        assert [c.id for c in ctx.comments.list_comments(world.task.id)] == [comment.id]

    def test_blank_content(self, ctx: AppContext, world: SimpleNamespace) -> None:
        with pytest.raises(ValidationFailedError, match="content"):
            ctx.comments.add_comment(world.dev, world.task.id, "   ")

    def test_missing_task(self, ctx: AppContext, world: SimpleNamespace) -> None:
        with pytest.raises(NotFoundError):
            ctx.comments.add_comment(world.dev, "task-missing", "hello")
        with pytest.raises(NotFoundError):
            ctx.comments.list_comments("task-missing")


class TestEditComment:
    def test_author_edits(self, ctx: AppContext, world: SimpleNamespace) -> None:
        comment = ctx.comments.add_comment(world.dev, world.task.id, "first")
        edited = ctx.comments.edit_comment(world.dev, comment.id, "second")
        assert edited.content == "second"
        assert edited.is_edited is True
        assert edited.updated_at is not None

    @pytest.mark.parametrize("who", ["peer", "lead", "admin"])
    def test_nobody_else_edits(self, ctx: AppContext, world: SimpleNamespace, who: str) -> None:
        comment = ctx.comments.add_comment(world.dev, world.task.id, "mine")
        with pytest.raises(ForbiddenError, match="your own"):
            ctx.comments.edit_comment(getattr(world, who), comment.id, "theirs")
        assert ctx.container.comments.get(comment.id).content == "mine"


class TestDeleteComment:
    def test_author_deletes(self, ctx: AppContext, world: SimpleNamespace) -> None:
        comment = ctx.comments.add_comment(world.dev, world.task.id, "oops")
        ctx.comments.delete_comment(world.dev, comment.id)
        assert ctx.container.comments.get(comment.id) is None

    def test_other_user_forbidden(self, ctx: AppContext, world: SimpleNamespace) -> None:
        comment = ctx.comments.add_comment(world.dev, world.task.id, "keep")
        with pytest.raises(ForbiddenError):
            ctx.comments.delete_comment(world.peer, comment.id)
        assert ctx.container.comments.get(comment.id) is not None

    @pytest.mark.parametrize("who", ["lead", "admin"])
    def test_privileged_delete_any(self, ctx: AppContext, world: SimpleNamespace, who: str) -> None:
        comment = ctx.comments.add_comment(world.dev, world.task.id, "spam")
        ctx.comments.delete_comment(getattr(world, who), comment.id)
        assert ctx.container.comments.get(comment.id) is None

    def test_missing_comment(self, ctx: AppContext, world: SimpleNamespace) -> None:
        with pytest.raises(NotFoundError):
            ctx.comments.delete_comment(world.admin, "comment-missing")
