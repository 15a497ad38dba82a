"""Task endpoints mounted under ``/api/tasks``."""

from __future__ import annotations

from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends, Query

from ..context import AppContext
from ..domain.models import Identity
from ..policy import Action
from .deps import action_dependency, identity_dependency
from .envelope import ok
from .models import CreateTaskRequest, UpdateTaskRequest


def create_task_router(get_context: Callable[[], AppContext]) -> APIRouter:
    router = APIRouter(prefix="/api/tasks", tags=["tasks"])
    current_identity = identity_dependency(get_context)
    can_create = action_dependency(get_context, Action.CREATE_TASK)

    @router.get("")
    async def list_tasks(
        team_id: Optional[str] = Query(None),
        assignee_id: Optional[str] = Query(None),
        status: Optional[str] = Query(None),
        priority: Optional[str] = Query(None),
        search: Optional[str] = Query(None),
        page: int = Query(1, ge=1),
        limit: Optional[int] = Query(None, ge=1),
        identity: Identity = Depends(current_identity),
    ) -> dict[str, Any]:
        result = get_context().tasks.list_tasks(
            team_id=team_id,
            assignee_id=assignee_id,
            status=status,
            priority=priority,
            search=search,
            page=page,
            limit=limit,
        )
        return ok([t.to_dict() for t in result.items], pagination=result.pagination())

    @router.post("")
    async def create_task(body: CreateTaskRequest, identity: Identity = Depends(can_create)) -> dict[str, Any]:
        task = get_context().tasks.create_task(identity, **body.model_dump())
        return ok(task.to_dict(), message="Task created successfully")

    @router.get("/{task_id}")
    async def get_task(task_id: str, identity: Identity = Depends(current_identity)) -> dict[str, Any]:
        """Task with its comments and change history."""
        return ok(get_context().tasks.get_task_details(task_id))

    @router.put("/{task_id}")
    async def update_task(
        task_id: str,
        body: UpdateTaskRequest,
        identity: Identity = Depends(current_identity),
    ) -> dict[str, Any]:
        task = get_context().tasks.update_task(identity, task_id, body.model_dump(exclude_unset=True))
        return ok(task.to_dict(), message="Task updated successfully")

    return router
