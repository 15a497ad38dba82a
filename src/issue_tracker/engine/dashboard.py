"""Per-user dashboard statistics and recent activity feed."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from ..constants import (
    COMPLETED_WINDOW_DAYS,
    RECENT_ACTIVITY_LIMIT,
    RECENT_ASSIGNMENTS,
    RECENT_COMMENTS,
    RECENT_STATUS_CHANGES,
)
from ..domain.models import ActivityType, Identity, Task, TaskStatus
from ..storage.container import Container
from ..utils import _parse_iso

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _ts(value: Optional[str]) -> datetime:
    return _parse_iso(value) or _EPOCH


class DashboardService:
    def __init__(self, container: Container) -> None:
        self._c = container

    def stats(self, actor: Identity, *, now: Optional[datetime] = None) -> dict[str, Any]:
        now = now or datetime.now(timezone.utc)
        tasks = self._c.tasks.list()
        mine = [t for t in tasks if t.assignee_id == actor.id]

        # Prefer the stored team; the token copy may predate a team move.
        user = self._c.users.get(actor.id)
        team_id = user.team_id if user is not None else actor.team_id

        return {
            "user_stats": self._user_stats(mine, now),
            "team_stats": self._team_stats([t for t in tasks if team_id and t.team_id == team_id]),
            "recent_activity": self._recent_activity(actor, mine),
        }

    def _user_stats(self, mine: list[Task], now: datetime) -> dict[str, int]:
        week_ago = now - timedelta(days=COMPLETED_WINDOW_DAYS)
        completed = sum(1 for t in mine if t.status == TaskStatus.DONE and _ts(t.updated_at) >= week_ago)
        overdue = 0
        for t in mine:
            due = _parse_iso(t.due_date)
            if due is not None and t.status != TaskStatus.DONE and due < now:
                overdue += 1
        return {
            "assigned_tasks": len(mine),
            "completed_this_week": completed,
            "in_progress": sum(1 for t in mine if t.status == TaskStatus.IN_PROGRESS),
            "overdue": overdue,
        }

    def _team_stats(self, team_tasks: list[Task]) -> dict[str, int]:
        def count(status: TaskStatus) -> int:
            return sum(1 for t in team_tasks if t.status == status)

        return {
            "total_tasks": len(team_tasks),
            "todo": count(TaskStatus.TODO),
            "in_progress": count(TaskStatus.IN_PROGRESS),
            "in_review": count(TaskStatus.IN_REVIEW),
            "done": count(TaskStatus.DONE),
        }

    def _recent_activity(self, actor: Identity, mine: list[Task]) -> list[dict[str, str]]:
        titles = {t.id: t.title for t in self._c.tasks.list()}
        my_ids = {t.id for t in mine}
        activity: list[dict[str, str]] = []

        for task in sorted(mine, key=lambda t: _ts(t.created_at), reverse=True)[:RECENT_ASSIGNMENTS]:
            activity.append({
                "type": ActivityType.TASK_ASSIGNED.value,
                "message": f"You were assigned to '{task.title}'",
                "timestamp": task.created_at,
            })

        comments = [c for c in self._c.comments.list() if c.task_id in my_ids and c.user_id != actor.id]
        for comment in sorted(comments, key=lambda c: _ts(c.created_at), reverse=True)[:RECENT_COMMENTS]:
            activity.append({
                "type": ActivityType.COMMENT_ADDED.value,
                "message": f"New comment on '{titles.get(comment.task_id, 'Unknown task')}'",
                "timestamp": comment.created_at,
            })

        changes = [h for h in self._c.history.list() if h.field_changed == "status" and h.task_id in my_ids]
        for entry in sorted(changes, key=lambda h: _ts(h.created_at), reverse=True)[:RECENT_STATUS_CHANGES]:
            activity.append({
                "type": ActivityType.STATUS_CHANGED.value,
                "message": f"Task '{titles.get(entry.task_id, 'Unknown task')}' status changed to {entry.new_value}",
                "timestamp": entry.created_at,
            })

        activity.sort(key=lambda a: _ts(a["timestamp"]), reverse=True)
        return activity[:RECENT_ACTIVITY_LIMIT]
