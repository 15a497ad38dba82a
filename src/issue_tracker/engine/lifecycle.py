"""Task engine: creation, validated field updates and the status state machine.

Updates are two-phase.  Every requested field is checked first, in the order
status, priority, assignee, estimated_hours, actual_hours, due_date; only when
all checks pass are the fields written and one history record per changed
field appended.  A rejected call therefore leaves the task and its history
exactly as they were.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from loguru import logger

from ..config import TrackerConfig
from ..domain.models import Identity, Task, TaskHistory, TaskPriority, TaskStatus
from ..errors import InvalidTransitionError, NotFoundError, ValidationFailedError
from ..policy import Action, authorize, can_transition
from ..storage.container import Container
from ..utils import _now_iso
from .common import Page, coerce_enum, paginate, require_text, validate_due_date, validate_hours

UPDATABLE_FIELDS = ("status", "priority", "assignee_id", "estimated_hours", "actual_hours", "due_date")


@dataclass
class _PendingChange:
    field_changed: str
    old_value: Any
    new_value: Any
    apply: Callable[[Task], None]


def _setter(name: str, value: Any) -> Callable[[Task], None]:
    def apply(task: Task) -> None:
        setattr(task, name, value)
    return apply


class TaskEngine:
    """Manage the full lifecycle of tasks."""

    def __init__(self, container: Container, config: TrackerConfig) -> None:
        self._c = container
        self._config = config

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_task(self, task_id: str) -> Task:
        task = self._c.tasks.get(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    def get_task_details(self, task_id: str) -> dict[str, Any]:
        """Task fields plus its comments and history, oldest first."""
        task = self.get_task(task_id)
        data = task.to_dict()
        data["comments"] = [c.to_dict() for c in self._c.comments.for_task(task.id)]
        data["history"] = [h.to_dict() for h in self._c.history.for_task(task.id)]
        return data

    def list_tasks(
        self,
        *,
        team_id: Optional[str] = None,
        assignee_id: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Page[Task]:
        out: list[Task] = []
        query = search.lower() if search else None
        for t in self._c.tasks.list():
            if team_id and t.team_id != team_id:
                continue
            if assignee_id and t.assignee_id != assignee_id:
                continue
            if status and t.status.value != status:
                continue
            if priority and t.priority.value != priority:
                continue
            if query and query not in t.title.lower() and query not in t.description.lower():
                continue
            out.append(t)
        return paginate(
            out,
            page,
            limit or self._config.default_page_size,
            max_limit=self._config.max_page_size,
        )

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_task(
        self,
        actor: Identity,
        *,
        title: str,
        description: str,
        priority: Any,
        team_id: str,
        assignee_id: Optional[str] = None,
        estimated_hours: Optional[float] = None,
        due_date: Optional[str] = None,
    ) -> Task:
        """Create a task in TODO with *actor* as reporter."""
        authorize(actor, Action.CREATE_TASK)

        if not (require_text(title) and require_text(description) and priority and team_id):
            raise ValidationFailedError(
                "Title, description, priority, and team_id are required",
                details={"required_fields": ["title", "description", "priority", "team_id"]},
            )
        prio = coerce_enum(TaskPriority, priority, "priority")

        team = self._c.teams.get(team_id)
        if team is None:
            raise ValidationFailedError("Invalid team_id", details={"fields": ["team_id"]})

        assignee = None
        if assignee_id:
            assignee = self._c.users.get(assignee_id)
            if assignee is None or not assignee.is_active:
                raise ValidationFailedError("Invalid assignee_id", details={"fields": ["assignee_id"]})

        hours = validate_hours(estimated_hours, "estimated_hours")
        due = validate_due_date(due_date)
        reporter = self._c.users.get(actor.id)

        task = Task(
            title=title.strip(),
            description=description.strip(),
            status=TaskStatus.TODO,
            priority=prio,
            assignee_id=assignee.id if assignee else None,
            assignee_name=assignee.name if assignee else None,
            assignee_email=assignee.email if assignee else None,
            reporter_id=actor.id,
            reporter_name=reporter.name if reporter else None,
            team_id=team.id,
            team_name=team.name,
            estimated_hours=hours,
            due_date=due,
        )
        self._c.tasks.upsert(task)
        logger.info("Created task {} in team {} by {}", task.id, team.id, actor.id)
        return task

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_task(self, actor: Identity, task_id: str, patch: Mapping[str, Any]) -> Task:
        """Apply a partial update on behalf of *actor*.

        Only keys present in *patch* are considered.  ``assignee_id: None``
        unassigns; absence leaves the assignee alone.
        """
        task = self.get_task(task_id)
        unknown = sorted(set(patch) - set(UPDATABLE_FIELDS))
        if unknown:
            raise ValidationFailedError(f"Unknown fields: {', '.join(unknown)}", details={"fields": unknown})

        is_assignee = task.assignee_id is not None and task.assignee_id == actor.id
        authorize(actor, Action.UPDATE_TASK, owns=is_assignee, message="You can only update tasks assigned to you")

        pending: list[_PendingChange] = []

        if "status" in patch:
            target = coerce_enum(TaskStatus, patch["status"], "status")
            if target != task.status:
                if not can_transition(actor, task.status, target):
                    logger.warning(
                        "Rejected transition {} -> {} on {} by {}",
                        task.status.value, target.value, task.id, actor.id,
                    )
                    raise InvalidTransitionError(task.status.value, target.value)
                pending.append(_PendingChange("status", task.status.value, target.value, _setter("status", target)))

        if "priority" in patch:
            prio = coerce_enum(TaskPriority, patch["priority"], "priority")
            if prio != task.priority:
                authorize(
                    actor, Action.SET_TASK_PRIORITY, owns=is_assignee,
                    message="Only admin or team lead can change task priority",
                )
                pending.append(_PendingChange("priority", task.priority.value, prio.value, _setter("priority", prio)))

        if "assignee_id" in patch:
            new_id = patch["assignee_id"] or None
            if new_id != task.assignee_id:
                authorize(
                    actor, Action.REASSIGN_TASK, owns=is_assignee,
                    message="Only admin or team lead can change task assignee",
                )
                assignee = None
                if new_id is not None:
                    assignee = self._c.users.get(new_id)
                    if assignee is None or not assignee.is_active:
                        raise ValidationFailedError("Invalid assignee_id", details={"fields": ["assignee_id"]})

                def assign(t: Task, user=assignee) -> None:
                    t.assignee_id = user.id if user else None
                    t.assignee_name = user.name if user else None
                    t.assignee_email = user.email if user else None

                pending.append(_PendingChange("assignee", task.assignee_name, assignee.name if assignee else None, assign))

        for hours_field in ("estimated_hours", "actual_hours"):
            if hours_field in patch:
                value = validate_hours(patch[hours_field], hours_field)
                current = getattr(task, hours_field)
                if value != current:
                    authorize(actor, Action.SET_TASK_HOURS, owns=is_assignee)
                    pending.append(_PendingChange(hours_field, current, value, _setter(hours_field, value)))

        if "due_date" in patch:
            due = validate_due_date(patch["due_date"])
            if due != task.due_date:
                authorize(
                    actor, Action.SET_TASK_DUE_DATE, owns=is_assignee,
                    message="Only admin or team lead can change task due date",
                )
                pending.append(_PendingChange("due_date", task.due_date, due, _setter("due_date", due)))

        if not pending:
            return task

        now = _now_iso()
        for change in pending:
            change.apply(task)
        task.updated_at = now
        self._c.tasks.upsert(task)

        actor_user = self._c.users.get(actor.id)
        actor_name = actor_user.name if actor_user else "Unknown"
        for change in pending:
            self._c.history.append(
                TaskHistory(
                    task_id=task.id,
                    user_id=actor.id,
                    user_name=actor_name,
                    field_changed=change.field_changed,
                    old_value=change.old_value,
                    new_value=change.new_value,
                    created_at=now,
                )
            )
            if change.field_changed == "status":
                logger.info("Task {} {} -> {} by {}", task.id, change.old_value, change.new_value, actor.id)

        logger.debug("Task {} updated fields {}", task.id, [c.field_changed for c in pending])
        return task
