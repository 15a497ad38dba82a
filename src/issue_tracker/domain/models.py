"""Entities of the issue tracker.

Users belong to at most one team, teams have one distinguished lead, tasks
belong to a team and optionally an assignee.  All references are plain id
strings; the ``*_name`` / ``*_email`` fields are denormalized copies kept in
sync by :class:`issue_tracker.engine.consistency.ConsistencyMaintainer`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional

from ..utils import _new_id, _now_iso


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class UserRole(str, Enum):
    ADMIN = "ADMIN"
    TEAM_LEAD = "TEAM_LEAD"
    USER = "USER"


PRIVILEGED_ROLES = frozenset({UserRole.ADMIN, UserRole.TEAM_LEAD})


class TaskStatus(str, Enum):
    """Lifecycle states.  Every task starts in TODO."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    IN_REVIEW = "IN_REVIEW"
    DONE = "DONE"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ActivityType(str, Enum):
    TASK_ASSIGNED = "task_assigned"
    COMMENT_ADDED = "comment_added"
    STATUS_CHANGED = "status_changed"


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

@dataclass
class User:
    id: str = field(default_factory=lambda: _new_id("user"))
    email: str = ""
    name: str = ""
    password_hash: str = ""
    role: UserRole = UserRole.USER
    team_id: Optional[str] = None
    team_name: Optional[str] = None
    is_active: bool = True
    profile_picture: Optional[str] = None
    created_at: str = field(default_factory=_now_iso)
    updated_at: str = field(default_factory=_now_iso)

    def touch(self) -> None:
        self.updated_at = _now_iso()

    def to_public_dict(self) -> dict[str, Any]:
        """Serialize without credentials."""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "team_id": self.team_id,
            "team_name": self.team_name,
            "is_active": self.is_active,
            "profile_picture": self.profile_picture,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def to_member_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email, "role": self.role.value}


@dataclass
class Team:
    id: str = field(default_factory=lambda: _new_id("team"))
    name: str = ""
    description: Optional[str] = None
    team_lead_id: str = ""
    team_lead_name: Optional[str] = None
    # Cache of active users whose team_id points here.
    member_count: int = 0
    is_active: bool = True
    created_at: str = field(default_factory=_now_iso)
    updated_at: str = field(default_factory=_now_iso)

    def touch(self) -> None:
        self.updated_at = _now_iso()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class Task:
    id: str = field(default_factory=lambda: _new_id("task"))
    title: str = ""
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM

    assignee_id: Optional[str] = None
    assignee_name: Optional[str] = None
    assignee_email: Optional[str] = None
    reporter_id: str = ""
    reporter_name: Optional[str] = None
    team_id: str = ""
    team_name: Optional[str] = None

    estimated_hours: Optional[float] = None
    actual_hours: Optional[float] = None
    due_date: Optional[str] = None

    created_at: str = field(default_factory=_now_iso)
    updated_at: str = field(default_factory=_now_iso)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        data["priority"] = self.priority.value
        return data


@dataclass
class Comment:
    id: str = field(default_factory=lambda: _new_id("comment"))
    task_id: str = ""
    user_id: str = ""
    user_name: str = ""
    content: str = ""
    is_edited: bool = False
    created_at: str = field(default_factory=_now_iso)
    updated_at: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TaskHistory:
    """One changed field of one update call.  Never mutated after creation."""

    task_id: str
    user_id: str
    user_name: str
    field_changed: str
    old_value: Any = None
    new_value: Any = None
    id: str = field(default_factory=lambda: _new_id("history"))
    created_at: str = field(default_factory=_now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "task_id": self.task_id,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "field_changed": self.field_changed,
            "old_value": self.old_value,
            "new_value": self.new_value,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, as decoded from a bearer token."""

    id: str
    role: UserRole
    team_id: Optional[str] = None

    @property
    def is_privileged(self) -> bool:
        return self.role in PRIVILEGED_ROLES
