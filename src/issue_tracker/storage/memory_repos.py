"""Process-lifetime repositories backed by insertion-ordered dicts."""

from __future__ import annotations

from typing import Callable, Generic, Optional, TypeVar

from ..domain.models import Comment, Task, TaskHistory, Team, User
from .interfaces import (
    CommentRepository,
    TaskHistoryRepository,
    TaskRepository,
    TeamRepository,
    UserRepository,
)

T = TypeVar("T")


class _MemoryCollection(Generic[T]):
    def __init__(self, key: Callable[[T], str]) -> None:
        self._items: dict[str, T] = {}
        self._key = key

    def list(self) -> list[T]:
        return list(self._items.values())

    def get(self, item_id: str) -> Optional[T]:
        return self._items.get(item_id)

    def upsert(self, item: T) -> T:
        self._items[self._key(item)] = item
        return item

    def delete(self, item_id: str) -> bool:
        return self._items.pop(item_id, None) is not None


class InMemoryUserRepository(_MemoryCollection[User], UserRepository):
    def __init__(self) -> None:
        super().__init__(lambda user: user.id)

    def get_by_email(self, email: str) -> Optional[User]:
        for user in self._items.values():
            if user.email == email:
                return user
        return None


class InMemoryTeamRepository(_MemoryCollection[Team], TeamRepository):
    def __init__(self) -> None:
        super().__init__(lambda team: team.id)


class InMemoryTaskRepository(_MemoryCollection[Task], TaskRepository):
    def __init__(self) -> None:
        super().__init__(lambda task: task.id)


class InMemoryCommentRepository(_MemoryCollection[Comment], CommentRepository):
    def __init__(self) -> None:
        super().__init__(lambda comment: comment.id)

    def for_task(self, task_id: str) -> list[Comment]:
        return [c for c in self._items.values() if c.task_id == task_id]


class InMemoryTaskHistoryRepository(TaskHistoryRepository):
    """Append-only log; entries are never replaced or removed."""

    def __init__(self) -> None:
        self._entries: list[TaskHistory] = []

    def list(self) -> list[TaskHistory]:
        return list(self._entries)

    def for_task(self, task_id: str) -> list[TaskHistory]:
        return [h for h in self._entries if h.task_id == task_id]

    def append(self, entry: TaskHistory) -> TaskHistory:
        self._entries.append(entry)
        return entry
