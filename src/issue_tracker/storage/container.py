from __future__ import annotations

from .interfaces import (
    CommentRepository,
    TaskHistoryRepository,
    TaskRepository,
    TeamRepository,
    UserRepository,
)
from .memory_repos import (
    InMemoryCommentRepository,
    InMemoryTaskHistoryRepository,
    InMemoryTaskRepository,
    InMemoryTeamRepository,
    InMemoryUserRepository,
)


class Container:
    """One repository per entity.  Pass your own to swap the backend."""

    def __init__(
        self,
        *,
        users: UserRepository | None = None,
        teams: TeamRepository | None = None,
        tasks: TaskRepository | None = None,
        comments: CommentRepository | None = None,
        history: TaskHistoryRepository | None = None,
    ) -> None:
        self.users = users or InMemoryUserRepository()
        self.teams = teams or InMemoryTeamRepository()
        self.tasks = tasks or InMemoryTaskRepository()
        self.comments = comments or InMemoryCommentRepository()
        self.history = history or InMemoryTaskHistoryRepository()
