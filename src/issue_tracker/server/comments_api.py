"""Comment endpoints: nested under a task for create/list, flat for edit/delete."""

from __future__ import annotations

from typing import Any, Callable

from fastapi import APIRouter, Depends

from ..context import AppContext
from ..domain.models import Identity
from .deps import identity_dependency
from .envelope import ok
from .models import CommentRequest


def create_comments_router(get_context: Callable[[], AppContext]) -> APIRouter:
    router = APIRouter(tags=["comments"])
    current_identity = identity_dependency(get_context)

    @router.get("/api/tasks/{task_id}/comments")
    async def list_comments(task_id: str, identity: Identity = Depends(current_identity)) -> dict[str, Any]:
        return ok([c.to_dict() for c in get_context().comments.list_comments(task_id)])

    @router.post("/api/tasks/{task_id}/comments")
    async def add_comment(
        task_id: str,
        body: CommentRequest,
        identity: Identity = Depends(current_identity),
    ) -> dict[str, Any]:
        comment = get_context().comments.add_comment(identity, task_id, body.content)
        return ok(comment.to_dict(), message="Comment added successfully")

    @router.put("/api/comments/{comment_id}")
    async def edit_comment(
        comment_id: str,
        body: CommentRequest,
        identity: Identity = Depends(current_identity),
    ) -> dict[str, Any]:
        comment = get_context().comments.edit_comment(identity, comment_id, body.content)
        return ok(comment.to_dict(), message="Comment updated successfully")

    @router.delete("/api/comments/{comment_id}")
    async def delete_comment(comment_id: str, identity: Identity = Depends(current_identity)) -> dict[str, Any]:
        get_context().comments.delete_comment(identity, comment_id)
        return ok(message="Comment deleted successfully")

    return router
