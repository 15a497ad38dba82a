"""Domain services: task lifecycle, consistency bookkeeping, users, teams, comments, dashboard."""

from .comments import CommentService
from .consistency import ConsistencyMaintainer
from .dashboard import DashboardService
from .lifecycle import TaskEngine
from .teams import TeamService
from .users import UserService

__all__ = [
    "CommentService",
    "ConsistencyMaintainer",
    "DashboardService",
    "TaskEngine",
    "TeamService",
    "UserService",
]
