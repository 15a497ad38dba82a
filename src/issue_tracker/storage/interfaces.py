from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..domain.models import Comment, Task, TaskHistory, Team, User


class UserRepository(ABC):
    @abstractmethod
    def list(self) -> list[User]:
        raise NotImplementedError

    @abstractmethod
    def get(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    def upsert(self, user: User) -> User:
        raise NotImplementedError


class TeamRepository(ABC):
    @abstractmethod
    def list(self) -> list[Team]:
        raise NotImplementedError

    @abstractmethod
    def get(self, team_id: str) -> Optional[Team]:
        raise NotImplementedError

    @abstractmethod
    def upsert(self, team: Team) -> Team:
        raise NotImplementedError


class TaskRepository(ABC):
    @abstractmethod
    def list(self) -> list[Task]:
        raise NotImplementedError

    @abstractmethod
    def get(self, task_id: str) -> Optional[Task]:
        raise NotImplementedError

    @abstractmethod
    def upsert(self, task: Task) -> Task:
        raise NotImplementedError


class CommentRepository(ABC):
    @abstractmethod
    def list(self) -> list[Comment]:
        raise NotImplementedError

    @abstractmethod
    def for_task(self, task_id: str) -> list[Comment]:
        raise NotImplementedError

    @abstractmethod
    def get(self, comment_id: str) -> Optional[Comment]:
        raise NotImplementedError

    @abstractmethod
    def upsert(self, comment: Comment) -> Comment:
        raise NotImplementedError

    @abstractmethod
    def delete(self, comment_id: str) -> bool:
        raise NotImplementedError


class TaskHistoryRepository(ABC):
    @abstractmethod
    def list(self) -> list[TaskHistory]:
        raise NotImplementedError

    @abstractmethod
    def for_task(self, task_id: str) -> list[TaskHistory]:
        raise NotImplementedError

    @abstractmethod
    def append(self, entry: TaskHistory) -> TaskHistory:
        raise NotImplementedError
