"""Declarative access rules and task status transition tables.

``POLICY`` maps each action to the roles that may perform it and the scope
under which they may do so.  ``Scope.OWN`` grants the action only when the
caller owns the resource (assignee of a task, author of a comment).  Anything
not listed is denied.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .auth import require_role
from .domain.models import Identity, TaskStatus, UserRole


class Scope(str, Enum):
    ANY = "any"
    OWN = "own"


class Action(str, Enum):
    CREATE_USER = "create_user"
    UPDATE_USER = "update_user"
    VIEW_INACTIVE_USERS = "view_inactive_users"
    CREATE_TEAM = "create_team"
    UPDATE_TEAM = "update_team"
    VIEW_INACTIVE_TEAMS = "view_inactive_teams"
    CREATE_TASK = "create_task"
    UPDATE_TASK = "update_task"
    SET_TASK_PRIORITY = "set_task_priority"
    REASSIGN_TASK = "reassign_task"
    SET_TASK_DUE_DATE = "set_task_due_date"
    SET_TASK_HOURS = "set_task_hours"
    EDIT_COMMENT = "edit_comment"
    DELETE_COMMENT = "delete_comment"


_ADMIN = UserRole.ADMIN
_LEAD = UserRole.TEAM_LEAD
_USER = UserRole.USER

POLICY: dict[Action, dict[UserRole, Scope]] = {
    Action.CREATE_USER: {_ADMIN: Scope.ANY},
    Action.UPDATE_USER: {_ADMIN: Scope.ANY},
    Action.VIEW_INACTIVE_USERS: {_ADMIN: Scope.ANY},
    Action.CREATE_TEAM: {_ADMIN: Scope.ANY},
    Action.UPDATE_TEAM: {_ADMIN: Scope.ANY},
    Action.VIEW_INACTIVE_TEAMS: {_ADMIN: Scope.ANY},
    Action.CREATE_TASK: {_ADMIN: Scope.ANY, _LEAD: Scope.ANY},
    Action.UPDATE_TASK: {_ADMIN: Scope.ANY, _LEAD: Scope.ANY, _USER: Scope.OWN},
    Action.SET_TASK_PRIORITY: {_ADMIN: Scope.ANY, _LEAD: Scope.ANY},
    Action.REASSIGN_TASK: {_ADMIN: Scope.ANY, _LEAD: Scope.ANY},
    Action.SET_TASK_DUE_DATE: {_ADMIN: Scope.ANY, _LEAD: Scope.ANY},
    Action.SET_TASK_HOURS: {_ADMIN: Scope.ANY, _LEAD: Scope.ANY, _USER: Scope.OWN},
    Action.EDIT_COMMENT: {_ADMIN: Scope.OWN, _LEAD: Scope.OWN, _USER: Scope.OWN},
    Action.DELETE_COMMENT: {_ADMIN: Scope.ANY, _LEAD: Scope.ANY, _USER: Scope.OWN},
}


def allowed_roles(action: Action, *, owns: bool = False) -> set[UserRole]:
    """Roles that may perform *action*, given whether the caller owns the resource."""
    return {role for role, scope in POLICY.get(action, {}).items() if scope == Scope.ANY or owns}


def is_allowed(action: Action, role: UserRole, *, owns: bool = False) -> bool:
    return role in allowed_roles(action, owns=owns)


def authorize(identity: Identity, action: Action, *, owns: bool = False, message: Optional[str] = None) -> None:
    """Raise :class:`ForbiddenError` unless *identity* may perform *action*."""
    require_role(identity, allowed_roles(action, owns=owns), message=message)


# ---------------------------------------------------------------------------
# Status transitions
# ---------------------------------------------------------------------------

ASSIGNEE_TRANSITIONS: dict[TaskStatus, set[TaskStatus]] = {
    TaskStatus.TODO: {TaskStatus.IN_PROGRESS},
    TaskStatus.IN_PROGRESS: {TaskStatus.IN_REVIEW, TaskStatus.TODO},
}

PRIVILEGED_TRANSITIONS: dict[TaskStatus, set[TaskStatus]] = {
    TaskStatus.TODO: {TaskStatus.IN_PROGRESS},
    TaskStatus.IN_PROGRESS: {TaskStatus.IN_REVIEW, TaskStatus.TODO},
    TaskStatus.IN_REVIEW: {TaskStatus.DONE, TaskStatus.IN_PROGRESS},
    # Reopening
    TaskStatus.DONE: {TaskStatus.IN_PROGRESS},
}


def transition_table(identity: Identity) -> dict[TaskStatus, set[TaskStatus]]:
    return PRIVILEGED_TRANSITIONS if identity.is_privileged else ASSIGNEE_TRANSITIONS


def can_transition(identity: Identity, current: TaskStatus, target: TaskStatus) -> bool:
    return target in transition_table(identity).get(current, set())
