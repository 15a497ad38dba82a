"""Tests for the access policy table and the status transition tables."""

from __future__ import annotations

import pytest

from issue_tracker.domain.models import Identity, TaskStatus, UserRole
from issue_tracker.errors import ForbiddenError
from issue_tracker.policy import Action, allowed_roles, authorize, can_transition, is_allowed

ADMIN = Identity(id="a", role=UserRole.ADMIN)
LEAD = Identity(id="l", role=UserRole.TEAM_LEAD)
USER = Identity(id="u", role=UserRole.USER)

S = TaskStatus


class TestPolicyTable:
    def test_admin_only_actions(self) -> None:
        for action in (Action.CREATE_USER, Action.UPDATE_USER, Action.CREATE_TEAM, Action.UPDATE_TEAM):
            assert is_allowed(action, UserRole.ADMIN)
            assert not is_allowed(action, UserRole.TEAM_LEAD)
            assert not is_allowed(action, UserRole.USER, owns=True)

    def test_task_creation_is_privileged(self) -> None:
        assert is_allowed(Action.CREATE_TASK, UserRole.TEAM_LEAD)
        assert not is_allowed(Action.CREATE_TASK, UserRole.USER)

    def test_user_update_requires_ownership(self) -> None:
        assert not is_allowed(Action.UPDATE_TASK, UserRole.USER)
        assert is_allowed(Action.UPDATE_TASK, UserRole.USER, owns=True)
        assert is_allowed(Action.SET_TASK_HOURS, UserRole.USER, owns=True)
        assert not is_allowed(Action.SET_TASK_PRIORITY, UserRole.USER, owns=True)
        assert not is_allowed(Action.REASSIGN_TASK, UserRole.USER, owns=True)

    def test_comment_rules(self) -> None:
        # Editing is author-only for every role.
        assert not is_allowed(Action.EDIT_COMMENT, UserRole.ADMIN)
        assert is_allowed(Action.EDIT_COMMENT, UserRole.ADMIN, owns=True)
        assert is_allowed(Action.DELETE_COMMENT, UserRole.TEAM_LEAD)
        assert not is_allowed(Action.DELETE_COMMENT, UserRole.USER)
        assert is_allowed(Action.DELETE_COMMENT, UserRole.USER, owns=True)

    def test_allowed_roles_depend_on_ownership(self) -> None:
        assert allowed_roles(Action.UPDATE_TASK) == {UserRole.ADMIN, UserRole.TEAM_LEAD}
        assert allowed_roles(Action.UPDATE_TASK, owns=True) == set(UserRole)
        assert allowed_roles(Action.EDIT_COMMENT) == set()

    def test_authorize_raises_with_message(self) -> None:
        authorize(ADMIN, Action.CREATE_USER)
        with pytest.raises(ForbiddenError, match="Insufficient permissions"):
            authorize(USER, Action.CREATE_USER)
        with pytest.raises(ForbiddenError, match="custom"):
            authorize(LEAD, Action.UPDATE_TEAM, message="custom")


class TestTransitions:
    @pytest.mark.parametrize(
        ("current", "target"),
        [(S.TODO, S.IN_PROGRESS), (S.IN_PROGRESS, S.IN_REVIEW), (S.IN_PROGRESS, S.TODO)],
    )
    def test_assignee_moves(self, current: TaskStatus, target: TaskStatus) -> None:
        assert can_transition(USER, current, target)

    @pytest.mark.parametrize(
        ("current", "target"),
        [(S.IN_REVIEW, S.DONE), (S.IN_REVIEW, S.IN_PROGRESS), (S.DONE, S.IN_PROGRESS), (S.TODO, S.DONE)],
    )
    def test_assignee_cannot(self, current: TaskStatus, target: TaskStatus) -> None:
        assert not can_transition(USER, current, target)

    @pytest.mark.parametrize("actor", [ADMIN, LEAD])
    def test_privileged_can_review_and_reopen(self, actor: Identity) -> None:
        assert can_transition(actor, S.IN_REVIEW, S.DONE)
        assert can_transition(actor, S.IN_REVIEW, S.IN_PROGRESS)
        assert can_transition(actor, S.DONE, S.IN_PROGRESS)
        assert can_transition(actor, S.TODO, S.IN_PROGRESS)

    @pytest.mark.parametrize("actor", [ADMIN, LEAD, USER])
    def test_no_one_skips_states(self, actor: Identity) -> None:
        assert not can_transition(actor, S.TODO, S.DONE)
        assert not can_transition(actor, S.TODO, S.IN_REVIEW)
        assert not can_transition(actor, S.DONE, S.TODO)
