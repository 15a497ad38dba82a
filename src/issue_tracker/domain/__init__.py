"""Domain entities and enums."""

from .models import (
    PRIVILEGED_ROLES,
    ActivityType,
    Comment,
    Identity,
    Task,
    TaskHistory,
    TaskPriority,
    TaskStatus,
    Team,
    User,
    UserRole,
)

__all__ = [
    "PRIVILEGED_ROLES",
    "ActivityType",
    "Comment",
    "Identity",
    "Task",
    "TaskHistory",
    "TaskPriority",
    "TaskStatus",
    "Team",
    "User",
    "UserRole",
]
